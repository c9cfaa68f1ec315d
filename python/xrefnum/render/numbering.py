"""The numbering pass.

Walks the document once, in document order:
- every numbered scope (section), then every lettered scope (appendix), gets the next numeral of its kind;
- every recognized item inside a scope gets the next value of its family's counter in that scope;
- every scope and item is registered in the SymbolTable under its existing id, or a synthesized one;
- the annotations it needs (numeral badges, theorem title blocks, id/number attributes) are planned as instructions.

Nothing is written to the tree here. The caller applies the instructions with render.annotations.apply_instructions().
"""

from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Set, Tuple

from xrefnum.config import NumberingConfig
from xrefnum.doc.anchors import (
    EQUATION_KIND,
    FIGURE_KIND,
    TABLE_KIND,
    Anchor,
    LabelInfo,
)
from xrefnum.doc.dfs import DocumentDfsPass, collect_kinds
from xrefnum.doc.symbols import SymbolTable
from xrefnum.doc.tree import TNode, TreeAdapter
from xrefnum.render.annotations import (
    FTNO_CLASS,
    LABELED_ATTR,
    NUMBER_ATTR,
    SECNO_CLASS,
    InsertBadge,
    InsertTitleBlock,
    Instruction,
    SetAttribute,
    is_labeled,
)
from xrefnum.render.counters import IdentifierAllocator, ScopeCounters, ScopeKind

# Synthesized ids use these short prefixes, theorem-like kinds use their own name
ID_PREFIXES = {EQUATION_KIND: "eq", FIGURE_KIND: "fig", TABLE_KIND: "tab"}

CAPTION_KINDS = {FIGURE_KIND: "figcaption", TABLE_KIND: "caption"}
CAPTION_NAMES = {FIGURE_KIND: "Figure", TABLE_KIND: "Table"}


def synthesize_scope_id(scope: ScopeCounters) -> str:
    if scope.kind is ScopeKind.Numbered:
        return f"s{scope.numeral}"
    return f"app{scope.numeral}"


def synthesize_item_id(scope: ScopeCounters, kind: str, seq: int) -> str:
    prefix = ID_PREFIXES.get(kind, kind)
    if scope.kind is ScopeKind.Numbered:
        return f"{prefix}:s{scope.numeral}-{seq}"
    return f"{prefix}-app{scope.numeral}-{seq}"


def capitalize_kind(kind: str) -> str:
    return kind[:1].upper() + kind[1:]


@dataclass
class NumberedScope(Generic[TNode]):
    node: TNode
    kind: ScopeKind
    anchor: Anchor
    info: LabelInfo


@dataclass
class NumberedItem(Generic[TNode]):
    node: TNode
    scope: Anchor
    sequence: int
    anchor: Anchor
    info: LabelInfo


@dataclass
class NumberingResult(Generic[TNode]):
    symbols: SymbolTable
    instructions: List[Instruction] = field(default_factory=list)
    scopes: List[NumberedScope[TNode]] = field(default_factory=list)
    items: List[NumberedItem[TNode]] = field(default_factory=list)


def find_scopes(
    tree: TreeAdapter[TNode], config: NumberingConfig
) -> Tuple[List[TNode], List[TNode]]:
    """All (numbered, lettered) scope nodes, each in document order"""
    numbered: List[TNode] = []
    lettered: List[TNode] = []

    def visit(node: TNode) -> None:
        if not _has_parent_path(tree, node, config.scope_parent_path):
            return
        if tree.has_class(node, config.section_class):
            numbered.append(node)
        elif tree.has_class(node, config.appendix_class):
            lettered.append(node)

    DocumentDfsPass([({config.scope_kind}, visit)], config.skip_kinds).dfs_over_tree(
        tree, tree.root()
    )
    return numbered, lettered


def _has_parent_path(
    tree: TreeAdapter[TNode], node: TNode, path: Tuple[str, ...]
) -> bool:
    # path is outermost-first, so compare against the ancestors nearest-first
    p = tree.parent(node)
    for kind in reversed(path):
        if p is None or tree.kind(p) != kind:
            return False
        p = tree.parent(p)
    return True


def first_descendant(
    tree: TreeAdapter[TNode],
    node: TNode,
    kind: str,
    cls: Optional[str] = None,
    skip_kinds: Tuple[str, ...] = (),
) -> Optional[TNode]:
    for candidate in collect_kinds(tree, node, [kind], skip_kinds):
        if cls is None or tree.has_class(candidate, cls):
            return candidate
    return None


class _NumberingPass(Generic[TNode]):
    tree: TreeAdapter[TNode]
    config: NumberingConfig
    allocator: IdentifierAllocator
    result: NumberingResult[TNode]
    # Nodes that already have an annotation planned in this pass, by identity
    _annotated: Set[int]

    def __init__(self, tree: TreeAdapter[TNode], config: NumberingConfig) -> None:
        self.tree = tree
        self.config = config
        self.allocator = IdentifierAllocator(
            config.numbered_theorem_kinds, config.lettered_theorem_kinds
        )
        self.result = NumberingResult(SymbolTable(config.title_collisions))
        self._annotated = set()

    def emit(self, i: Instruction) -> None:
        self.result.instructions.append(i)

    def may_annotate(self, host: TNode) -> bool:
        """True the first time a host is seen, if it wasn't already labeled by a previous run"""
        if id(host) in self._annotated or is_labeled(self.tree, host):
            return False
        self._annotated.add(id(host))
        return True

    def ensure_id(self, node: TNode, synthesized: str) -> str:
        existing = self.tree.get_attr(node, "id")
        if existing:
            return existing
        self.emit(SetAttribute(node, "id", synthesized))
        return synthesized

    def run(self) -> NumberingResult[TNode]:
        numbered, lettered = find_scopes(self.tree, self.config)
        for node in numbered:
            self.number_scope(node, ScopeKind.Numbered)
        for node in lettered:
            self.number_scope(node, ScopeKind.Lettered)
        self.result.symbols.freeze()
        return self.result

    def number_scope(self, node: TNode, kind: ScopeKind) -> None:
        scope = self.allocator.open_scope(kind)
        if kind is ScopeKind.Numbered:
            label = f"Section {scope.numeral}"
            badge = f"{scope.numeral}. "
        else:
            label = f"Appendix {scope.numeral}"
            badge = f"Appendix {scope.numeral}. "

        heading = first_descendant(
            self.tree,
            node,
            self.config.heading_kind,
            self.config.heading_class,
            self.config.skip_kinds,
        )
        if heading is not None and self.may_annotate(heading):
            self.emit(InsertBadge(heading, SECNO_CLASS, badge))

        anchor = Anchor(kind.value, self.ensure_id(node, synthesize_scope_id(scope)))
        info = LabelInfo(kind=kind.value, label=label, short=scope.numeral)
        self.result.symbols.register(anchor, info)
        self.emit(SetAttribute(node, NUMBER_ATTR, scope.numeral))
        if not is_labeled(self.tree, node):
            self.emit(SetAttribute(node, LABELED_ATTR, ""))
        self.result.scopes.append(NumberedScope(node, kind, anchor, info))

        for item in collect_kinds(
            self.tree, node, self.config.all_item_kinds(), self.config.skip_kinds
        ):
            self.number_item(item, scope, anchor)

    def number_item(self, node: TNode, scope: ScopeCounters, scope_anchor: Anchor) -> None:
        kind = self.tree.kind(node)
        allocated = scope.allocate(kind)
        if allocated is None:
            # e.g. a remark inside an appendix
            return
        seq, short = allocated

        title: Optional[str] = None
        if kind in scope.theorem_kinds:
            label = f"{capitalize_kind(kind)} {short}"
            title = self.tree.get_attr(node, self.config.title_attr) or None
        elif kind == EQUATION_KIND:
            label = f"({short})"
        else:
            label = f"{CAPTION_NAMES[kind]} {short}"

        anchor = Anchor(kind, self.ensure_id(node, synthesize_item_id(scope, kind, seq)))
        info = LabelInfo(kind=kind, label=label, short=short, title=title)
        self.result.symbols.register(anchor, info)
        self.emit(SetAttribute(node, NUMBER_ATTR, short))

        if kind in scope.theorem_kinds:
            if self.may_annotate(node):
                self.emit(
                    InsertTitleBlock(
                        node, f"{label}.", f"({title})" if title else None
                    )
                )
        elif kind in CAPTION_KINDS:
            caption = first_descendant(
                self.tree, node, CAPTION_KINDS[kind], skip_kinds=self.config.skip_kinds
            )
            if caption is not None and self.may_annotate(caption):
                self.emit(InsertBadge(caption, FTNO_CLASS, f"{label}. "))

        if not is_labeled(self.tree, node):
            self.emit(SetAttribute(node, LABELED_ATTR, ""))

        self.result.items.append(NumberedItem(node, scope_anchor, seq, anchor, info))


def build_symbol_table(
    tree: TreeAdapter[Any], config: Optional[NumberingConfig] = None
) -> NumberingResult[Any]:
    """Run the numbering pass over `tree` and return the frozen SymbolTable plus the annotations to apply.

    Numbers are assigned in document order, so running this twice over the same tree gives the same table.
    Hosts already marked `data-labeled` (by an earlier run) get no new badges or title blocks."""
    return _NumberingPass(tree, config or NumberingConfig()).run()
