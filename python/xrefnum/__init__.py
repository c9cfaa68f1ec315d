__all__ = [
    "Anchor",
    "LabelInfo",
    "RefFormat",
    "XrefMarker",
    "SymbolTable",
    "TitleCollisions",
    "TreeAdapter",
    "SoupTree",
    "NumberingConfig",
    "MathJaxConfig",
    "XrefConfig",
    "load_config",
    "NumberingReport",
    "number_document",
    "number_html",
    "XrefError",
    "TreeContractError",
    "DuplicateTitleError",
    "ConfigError",
]

from typing import Optional, Tuple

from xrefnum.config import MathJaxConfig, NumberingConfig, XrefConfig, load_config
from xrefnum.doc.anchors import Anchor, LabelInfo, RefFormat, XrefMarker
from xrefnum.doc.symbols import SymbolTable, TitleCollisions
from xrefnum.doc.tree import SoupTree, TreeAdapter
from xrefnum.errors import (
    ConfigError,
    DuplicateTitleError,
    TreeContractError,
    XrefError,
)
from xrefnum.system import NumberingReport, number_document


def number_html(
    html: str, config: Optional[NumberingConfig] = None, build_toc: bool = True
) -> Tuple[str, NumberingReport]:
    """A shortcut for numbering an HTML string, returning the rewritten HTML and the report"""
    tree = SoupTree.from_html(html)
    report = number_document(tree, config, build_toc=build_toc)
    return str(tree.soup), report
