"""The reference-resolving pass.

Runs once the SymbolTable is complete and frozen. Every <xref> marker in the document is parsed into an XrefMarker,
its target id is worked out (explicit, or implicit from the marker text), and if the table knows the id the marker
is planned to be replaced by a link.

Markers that can't be resolved are left exactly where they are. They are reported in ResolutionResult.unresolved
so a caller can warn about them, but resolving never raises for them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, List, Optional, Tuple

from xrefnum.config import NumberingConfig
from xrefnum.doc.anchors import LabelInfo, RefFormat, XrefMarker, format_ref
from xrefnum.doc.dfs import collect_kinds
from xrefnum.doc.symbols import SymbolTable
from xrefnum.doc.tree import TNode, TreeAdapter
from xrefnum.render.annotations import ReplaceWithLink


class UnresolvedReason(Enum):
    NoTarget = "no target"
    Dangling = "dangling"


@dataclass
class UnresolvedRef(Generic[TNode]):
    node: TNode
    marker: XrefMarker
    reason: UnresolvedReason

    def describe(self) -> str:
        if self.reason is UnresolvedReason.NoTarget:
            return "<xref> with no target and no text"
        return f"<xref> to '{self.marker.lookup_id()}' doesn't match any numbered item"


@dataclass
class ResolutionResult(Generic[TNode]):
    instructions: List[ReplaceWithLink] = field(default_factory=list)
    unresolved: List[UnresolvedRef[TNode]] = field(default_factory=list)


def parse_marker(
    tree: TreeAdapter[TNode], node: TNode, config: NumberingConfig
) -> XrefMarker:
    target: Optional[str] = None
    for attr in config.target_attrs:
        value = tree.get_attr(node, attr)
        if value:
            target = value[1:] if value.startswith("#") else value
            break
    return XrefMarker(
        target=target or None,
        fmt=RefFormat.parse(tree.get_attr(node, config.format_attr)),
        literal_text=tree.text(node),
    )


def lookup_marker(
    symbols: SymbolTable, marker: XrefMarker
) -> Optional[Tuple[str, LabelInfo]]:
    """The (id, label info) a marker refers to, or None if it's dangling or has no target"""
    id = marker.lookup_id()
    if id is None:
        return None
    info = symbols.lookup(id)
    if info is not None:
        return id, info
    if marker.is_implicit():
        # Fall back to the title index, so <xref>Kernel</xref> finds <definition data-title="Kernel">
        titled_id = symbols.lookup_title(marker.literal_text)
        if titled_id is not None:
            titled = symbols.lookup(titled_id)
            if titled is not None:
                return titled_id, titled
    return None


def resolve_marker(
    node: TNode, marker: XrefMarker, id: str, info: LabelInfo
) -> ReplaceWithLink:
    if marker.has_literal_text():
        text = marker.literal_text
    else:
        text = format_ref(info, marker.fmt)
    return ReplaceWithLink(
        node=node,
        href=f"#{id}",
        text=text,
        kind=info.kind,
        aria_label=info.label,
    )


def resolve_references(
    tree: TreeAdapter[Any],
    symbols: SymbolTable,
    config: Optional[NumberingConfig] = None,
) -> ResolutionResult[Any]:
    if not symbols.frozen:
        raise RuntimeError(
            "Can't resolve references before the symbol table is frozen - run the numbering pass first"
        )
    config = config or NumberingConfig()
    result: ResolutionResult[Any] = ResolutionResult()

    for node in collect_kinds(
        tree, tree.root(), [config.xref_kind], config.xref_skip_kinds, include_start=True
    ):
        marker = parse_marker(tree, node, config)
        if marker.lookup_id() is None:
            result.unresolved.append(
                UnresolvedRef(node, marker, UnresolvedReason.NoTarget)
            )
            continue
        found = lookup_marker(symbols, marker)
        if found is None:
            result.unresolved.append(
                UnresolvedRef(node, marker, UnresolvedReason.Dangling)
            )
            continue
        id, info = found
        result.instructions.append(resolve_marker(node, marker, id, info))

    return result
