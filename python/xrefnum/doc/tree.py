"""
The tree the numbering engine works on.

The engine never parses markup itself. It receives something that already looks like a tree of typed nodes
(tags, ordered children, string attributes) and talks to it through the TreeAdapter protocol.
Reading is done with kind()/children()/get_attr()/text(), and the apply steps only ever use the
handful of mutation primitives below, so another backend only needs to supply those.

SoupTree is the adapter used everywhere in practice, wrapping a BeautifulSoup document.
"""

from typing import Any, Dict, List, Optional, Protocol, Sequence, TypeVar

from bs4 import BeautifulSoup, NavigableString, Tag
from typing_extensions import override

from xrefnum.errors import TreeContractError

TNode = TypeVar("TNode")


def _classes(tag: Tag) -> List[str]:
    # Parsed tags hold a list, but a class set by hand may still be a plain string
    value: Any = tag.get("class")
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


class TreeAdapter(Protocol[TNode]):
    def root(self) -> TNode: ...

    def kind(self, node: TNode) -> str:
        """The lower-case tag name of the node"""
        ...

    def children(self, node: TNode) -> Sequence[TNode]:
        """Element children in document order. Text is not included."""
        ...

    def parent(self, node: TNode) -> Optional[TNode]: ...

    def get_attr(self, node: TNode, name: str) -> Optional[str]: ...

    def has_class(self, node: TNode, cls: str) -> bool: ...

    def text(self, node: TNode, skip_class: Optional[str] = None) -> str:
        """All the text inside the node. Text inside descendants with class `skip_class` is left out."""
        ...

    def create_element(
        self, kind: str, attrs: Dict[str, str], text: Optional[str] = None
    ) -> TNode: ...

    def insert_child(self, parent: TNode, index: int, child: TNode) -> None: ...

    def append_child(self, parent: TNode, child: TNode) -> None: ...

    def append_text(self, parent: TNode, text: str) -> None: ...

    def clear_children(self, node: TNode) -> None: ...

    def replace_node(self, old: TNode, new: TNode) -> None: ...

    def set_attr(self, node: TNode, name: str, value: str) -> None: ...


class SoupTree(TreeAdapter[Tag]):
    """TreeAdapter over a parsed BeautifulSoup document.

    Attribute values are always exposed as strings - multi-valued attributes like `class` are joined with spaces."""

    soup: BeautifulSoup

    def __init__(self, soup: BeautifulSoup) -> None:
        if not isinstance(soup, BeautifulSoup):
            raise TreeContractError(
                f"SoupTree needs a parsed BeautifulSoup document, got {type(soup).__name__}"
            )
        self.soup = soup

    @classmethod
    def from_html(cls, html: str, parser: str = "html.parser") -> "SoupTree":
        return cls(BeautifulSoup(html, parser))

    @override
    def root(self) -> Tag:
        return self.soup

    @override
    def kind(self, node: Tag) -> str:
        return (node.name or "").lower()

    @override
    def children(self, node: Tag) -> List[Tag]:
        return [c for c in node.children if isinstance(c, Tag)]

    @override
    def parent(self, node: Tag) -> Optional[Tag]:
        return node.parent

    @override
    def get_attr(self, node: Tag, name: str) -> Optional[str]:
        value: Any = node.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @override
    def has_class(self, node: Tag, cls: str) -> bool:
        return cls in _classes(node)

    @override
    def text(self, node: Tag, skip_class: Optional[str] = None) -> str:
        if skip_class is None:
            return node.get_text()
        parts = []
        for s in node.descendants:
            if not isinstance(s, NavigableString):
                continue
            # Walk up to `node` looking for a skipped ancestor
            p = s.parent
            skipped = False
            while p is not None and p is not node:
                if skip_class in _classes(p):
                    skipped = True
                    break
                p = p.parent
            if not skipped:
                parts.append(str(s))
        return "".join(parts)

    @override
    def create_element(
        self, kind: str, attrs: Dict[str, str], text: Optional[str] = None
    ) -> Tag:
        tag_attrs: Dict[str, Any] = dict(attrs)
        # Match what the parser produces for multi-valued attributes
        if "class" in tag_attrs:
            tag_attrs["class"] = tag_attrs["class"].split()
        tag = self.soup.new_tag(kind, attrs=tag_attrs)
        if text:
            tag.string = text
        return tag

    @override
    def insert_child(self, parent: Tag, index: int, child: Tag) -> None:
        parent.insert(index, child)

    @override
    def append_child(self, parent: Tag, child: Tag) -> None:
        parent.append(child)

    @override
    def append_text(self, parent: Tag, text: str) -> None:
        parent.append(self.soup.new_string(text))

    @override
    def clear_children(self, node: Tag) -> None:
        node.clear()

    @override
    def replace_node(self, old: Tag, new: Tag) -> None:
        old.replace_with(new)

    @override
    def set_attr(self, node: Tag, name: str, value: str) -> None:
        node[name] = value

    def head(self) -> Tag:
        """The <head> element, created if the document doesn't have one."""
        head = self.soup.find("head")
        if isinstance(head, Tag):
            return head
        head = self.soup.new_tag("head")
        html = self.soup.find("html")
        if isinstance(html, Tag):
            html.insert(0, head)
        else:
            self.soup.insert(0, head)
        return head
