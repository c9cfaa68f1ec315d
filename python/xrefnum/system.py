"""The phases of numbering a document:

1. Numbering
   A single ordered walk over the tree. Scopes get numerals, items get per-scope counters, and every scope and item
   is registered in a fresh SymbolTable. The pass only *plans* the visible annotations (numeral badges on headings and
   captions, title blocks on theorem-like blocks, id/number attributes), and freezes the SymbolTable when it's done.
2. Annotating
   The planned instructions are applied to the tree.
3. Resolving
   Every <xref> marker is looked up in the frozen SymbolTable and planned to be replaced with a link.
   This must not start before phase 1 has seen the whole document, because references may point forwards.
4. Linking
   The link replacements are applied. Unresolved markers stay as they were.
5. Outline (optional)
   The table of contents is rebuilt from the annotated tree into every `.toc-tree` container.

Everything happens synchronously on one tree, and the SymbolTable lives only as long as the returned NumberingReport."""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from xrefnum.config import NumberingConfig
from xrefnum.doc.symbols import SymbolTable
from xrefnum.doc.tree import TreeAdapter
from xrefnum.render.annotations import apply_instructions
from xrefnum.render.numbering import NumberingResult, build_symbol_table
from xrefnum.render.outline import OutlineEntry, build_outline, render_outline
from xrefnum.render.resolver import ResolutionResult, UnresolvedRef, resolve_references


@dataclass
class NumberingReport:
    numbering: NumberingResult[Any]
    resolution: ResolutionResult[Any]
    outline: List[OutlineEntry] = field(default_factory=list)
    outline_containers: int = 0

    @property
    def symbols(self) -> SymbolTable:
        return self.numbering.symbols

    @property
    def unresolved(self) -> List[UnresolvedRef[Any]]:
        return self.resolution.unresolved


def number_document(
    tree: TreeAdapter[Any],
    config: Optional[NumberingConfig] = None,
    build_toc: bool = True,
) -> NumberingReport:
    config = config or NumberingConfig()

    # Phase 1 - Numbering
    numbering = build_symbol_table(tree, config)
    # Phase 2 - Annotating
    apply_instructions(tree, numbering.instructions)

    # Phase 3 - Resolving
    resolution = resolve_references(tree, numbering.symbols, config)
    # Phase 4 - Linking
    apply_instructions(tree, resolution.instructions)

    report = NumberingReport(numbering=numbering, resolution=resolution)

    # Phase 5 - Outline
    if build_toc:
        report.outline = build_outline(tree, config)
        report.outline_containers = render_outline(tree, report.outline, config)

    return report
