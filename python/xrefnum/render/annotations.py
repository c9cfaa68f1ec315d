"""Annotation instructions produced by the numbering and resolving passes, and the step that applies them to a tree.

The passes themselves only read the tree. Everything they want to change is described as a list of
instructions, which apply_instructions() then executes in order against a TreeAdapter.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterable, Optional, Type, TypeVar, Union

from xrefnum.doc.tree import TNode, TreeAdapter

LABELED_ATTR = "data-labeled"
NUMBER_ATTR = "data-number"

SECNO_CLASS = "secno"
FTNO_CLASS = "ftno"
BLOCK_TITLE_CLASS = "block-title"
BLOCK_SUBTITLE_CLASS = "block-subtitle"
XREF_LINK_CLASS = "xref"


@dataclass(frozen=True)
class SetAttribute(Generic[TNode]):
    node: TNode
    name: str
    value: str


@dataclass(frozen=True)
class InsertBadge(Generic[TNode]):
    """Prepend `<span class=css_class>text</span>` to the node's contents and mark the node labeled.

    Used for section headings ('2. ') and figure/table captions ('Figure 2.1. ')."""

    node: TNode
    css_class: str
    text: str


@dataclass(frozen=True)
class InsertTitleBlock(Generic[TNode]):
    """Insert `<div class="block-title">text <span class="block-subtitle">subtitle</span></div>` as the first child
    and mark the node labeled."""

    node: TNode
    text: str
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class ReplaceWithLink(Generic[TNode]):
    """Replace a reference marker with `<a class="xref" href=... data-type=... aria-label=...>text</a>`"""

    node: TNode
    href: str
    text: str
    kind: str
    aria_label: str


Instruction = Union[SetAttribute, InsertBadge, InsertTitleBlock, ReplaceWithLink]

TInstruction = TypeVar("TInstruction")


class InstructionDispatch:
    """Maps instruction types to the function that executes them, by exact type."""

    _table: Dict[Type[Any], Callable[[Any, TreeAdapter], None]]

    def __init__(self) -> None:
        self._table = {}

    def register_handler(
        self,
        t: Type[TInstruction],
        f: Callable[[TInstruction, TreeAdapter], None],
    ) -> None:
        if t in self._table:
            raise RuntimeError(f"Conflict: registered two handlers for {t}")
        self._table[t] = f

    def get_handler(self, obj: Any) -> Optional[Callable[[Any, TreeAdapter], None]]:
        return self._table.get(type(obj))


def _apply_set_attribute(i: SetAttribute, tree: TreeAdapter) -> None:
    tree.set_attr(i.node, i.name, i.value)


def _apply_insert_badge(i: InsertBadge, tree: TreeAdapter) -> None:
    span = tree.create_element("span", {"class": i.css_class}, i.text)
    tree.insert_child(i.node, 0, span)
    tree.set_attr(i.node, LABELED_ATTR, "")


def _apply_insert_title_block(i: InsertTitleBlock, tree: TreeAdapter) -> None:
    block = tree.create_element("div", {"class": BLOCK_TITLE_CLASS}, i.text)
    if i.subtitle:
        tree.append_text(block, " ")
        tree.append_child(
            block,
            tree.create_element("span", {"class": BLOCK_SUBTITLE_CLASS}, i.subtitle),
        )
    tree.insert_child(i.node, 0, block)
    tree.set_attr(i.node, LABELED_ATTR, "")


def _apply_replace_with_link(i: ReplaceWithLink, tree: TreeAdapter) -> None:
    link = tree.create_element(
        "a",
        {
            "class": XREF_LINK_CLASS,
            "href": i.href,
            "data-type": i.kind,
            "aria-label": i.aria_label,
        },
        i.text,
    )
    tree.replace_node(i.node, link)


DEFAULT_DISPATCH = InstructionDispatch()
DEFAULT_DISPATCH.register_handler(SetAttribute, _apply_set_attribute)
DEFAULT_DISPATCH.register_handler(InsertBadge, _apply_insert_badge)
DEFAULT_DISPATCH.register_handler(InsertTitleBlock, _apply_insert_title_block)
DEFAULT_DISPATCH.register_handler(ReplaceWithLink, _apply_replace_with_link)


def apply_instructions(
    tree: TreeAdapter[TNode],
    instructions: Iterable[Instruction],
    dispatch: InstructionDispatch = DEFAULT_DISPATCH,
) -> int:
    """Execute `instructions` in order. Returns how many were applied."""
    n = 0
    for i in instructions:
        handler = dispatch.get_handler(i)
        if handler is None:
            raise RuntimeError(f"No handler registered for instruction {type(i).__name__}")
        handler(i, tree)
        n += 1
    return n


def is_labeled(tree: TreeAdapter[TNode], node: TNode) -> bool:
    return tree.get_attr(node, LABELED_ATTR) is not None
