"""A static outline (table of contents) of the numbered sections.

Three levels:
1. each numbered section, as "N. Title"
2. each subsection directly inside it, numbered only if the author gave the heading a numeral badge
3. each theorem-like block directly inside a section or subsection, as "Thm 1.2. Title"

Appendices are not listed. The outline is built from the tree after numbering has been applied,
so it reads the numbers back from the badges and `data-number` attributes.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

from xrefnum.config import NumberingConfig
from xrefnum.doc.dfs import collect_kinds
from xrefnum.doc.tree import TNode, TreeAdapter
from xrefnum.render.annotations import NUMBER_ATTR, SECNO_CLASS
from xrefnum.render.numbering import find_scopes

KIND_ABBREVIATIONS = {
    "theorem": "Thm",
    "definition": "Def",
    "lemma": "Lem",
    "corollary": "Cor",
    "proposition": "Prop",
    "remark": "Rem",
}

# A leading "1.2. " someone typed into a heading by hand
_LEADING_NUMBER = re.compile(r"^\s*\d+(?:\.\d+)*\.\s*")


@dataclass
class OutlineEntry:
    level: int
    href: str
    text: str
    kind: Optional[str] = None
    """Only set for level-3 entries, the kind of the theorem-like block"""
    children: List["OutlineEntry"] = field(default_factory=list)


def strip_number(s: str) -> str:
    return _LEADING_NUMBER.sub("", s, count=1).strip()


def _direct_child_with_class(
    tree: TreeAdapter[TNode], node: TNode, cls: str
) -> Optional[TNode]:
    for c in tree.children(node):
        if tree.has_class(c, cls):
            return c
    return None


def _heading_number(tree: TreeAdapter[TNode], heading: Optional[TNode]) -> str:
    if heading is None:
        return ""
    for badge in collect_kinds(tree, heading, ["span"]):
        if tree.has_class(badge, SECNO_CLASS):
            return tree.text(badge).strip().rstrip(".")
    return ""


def _heading_text(tree: TreeAdapter[TNode], heading: Optional[TNode]) -> str:
    if heading is None:
        return ""
    return strip_number(tree.text(heading, skip_class=SECNO_CLASS))


def _numbered(number: str, text: str) -> str:
    return f"{number}. {text}" if number else text


def _item_entries(
    tree: TreeAdapter[TNode], container: TNode, config: NumberingConfig
) -> List[OutlineEntry]:
    entries = []
    for it in tree.children(container):
        kind = tree.kind(it)
        if kind not in KIND_ABBREVIATIONS:
            continue
        id = tree.get_attr(it, "id")
        num = (tree.get_attr(it, NUMBER_ATTR) or "").strip().rstrip(". ")
        dot = f"{num}." if num else ""
        title = (tree.get_attr(it, config.title_attr) or "").strip()
        abbr = KIND_ABBREVIATIONS[kind]
        entries.append(
            OutlineEntry(
                level=3,
                href=f"#{id}" if id else "#",
                text=f"{abbr} {dot} {title}" if title else f"{abbr} {dot}",
                kind=kind,
            )
        )
    return entries


def build_outline(
    tree: TreeAdapter[Any], config: Optional[NumberingConfig] = None
) -> List[OutlineEntry]:
    config = config or NumberingConfig()
    numbered, _ = find_scopes(tree, config)

    outline = []
    for sec in numbered:
        sec_id = tree.get_attr(sec, "id")
        heading = _direct_child_with_class(tree, sec, config.heading_class)
        if not sec_id or heading is None:
            continue
        entry = OutlineEntry(
            level=1,
            href=f"#{sec_id}",
            text=_numbered(_heading_number(tree, heading), _heading_text(tree, heading)),
        )

        for sub in tree.children(sec):
            if tree.kind(sub) != config.scope_kind or not tree.has_class(
                sub, config.subsection_class
            ):
                continue
            sub_heading = _direct_child_with_class(tree, sub, config.heading_class)
            sub_id = (
                tree.get_attr(sub_heading, "id") if sub_heading is not None else None
            ) or tree.get_attr(sub, "id")
            entry.children.append(
                OutlineEntry(
                    level=2,
                    href=f"#{sub_id}" if sub_id else "#",
                    text=_numbered(
                        _heading_number(tree, sub_heading),
                        _heading_text(tree, sub_heading),
                    ),
                    children=_item_entries(tree, sub, config),
                )
            )

        entry.children.extend(_item_entries(tree, sec, config))
        outline.append(entry)
    return outline


def _render_entry(tree: TreeAdapter[TNode], entry: OutlineEntry) -> TNode:
    li = tree.create_element("li", {"class": f"toc-level-{entry.level}"})
    a = tree.create_element("a", {"href": entry.href})
    if entry.kind is not None:
        tree.append_child(
            a,
            tree.create_element(
                "span", {"class": f"toc-kind toc-kind--{entry.kind}"}
            ),
        )
    tree.append_child(a, tree.create_element("span", {"class": "toc-text"}, entry.text))
    tree.append_child(li, a)

    subsections = [c for c in entry.children if c.level == 2]
    items = [c for c in entry.children if c.level == 3]
    if entry.level == 1:
        if subsections or items:
            ul = tree.create_element("ul", {})
            for s in subsections:
                tree.append_child(ul, _render_entry(tree, s))
            if items:
                tree.append_child(ul, _render_items(tree, items))
            tree.append_child(li, ul)
    elif entry.level == 2:
        # Subsections always get an item list, even an empty one
        tree.append_child(li, _render_items(tree, items))
    return li


def _render_items(tree: TreeAdapter[TNode], items: List[OutlineEntry]) -> TNode:
    ul = tree.create_element("ul", {"class": "toc-items"})
    for it in items:
        tree.append_child(ul, _render_entry(tree, it))
    return ul


def render_outline(
    tree: TreeAdapter[TNode],
    outline: List[OutlineEntry],
    config: Optional[NumberingConfig] = None,
) -> int:
    """Replace the contents of every outline container (class `toc-tree`) with the outline.

    Returns the number of containers filled."""
    config = config or NumberingConfig()
    containers = [
        n
        for n in collect_kinds(tree, tree.root(), None, config.skip_kinds, include_start=True)
        if tree.has_class(n, config.toc_class)
    ]
    for container in containers:
        tree.clear_children(container)
        root = tree.create_element("ul", {})
        for entry in outline:
            tree.append_child(root, _render_entry(tree, entry))
        tree.append_child(container, root)
    return len(containers)

