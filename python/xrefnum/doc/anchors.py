"""
Labels and refs.

Every numbered thing in a document (a section, an appendix, a theorem-like block, an equation, a figure, a table)
gets an Anchor: the kind of thing it is plus the id it can be referred to by.
The numbering pass works out the LabelInfo for every Anchor - how the item is named when something refers back to it -
and in-text <xref> markers are parsed into XrefMarkers which get resolved against those.

Ids are either taken from the document (an `id` attribute the author wrote) or synthesized from the
kind and scope/sequence of the item, so authors only need to write ids for things they want stable names for.
"""

import dataclasses
from enum import Enum
from typing import Optional

THEOREM_LIKE_KINDS = (
    "theorem",
    "lemma",
    "corollary",
    "proposition",
    "definition",
    "remark",
)

SECTION_KIND = "section"
APPENDIX_KIND = "appendix"
EQUATION_KIND = "equation"
FIGURE_KIND = "figure"
TABLE_KIND = "table"

# Implicit references are keyed as "def:<normalized text>"
IMPLICIT_ID_PREFIX = "def:"


def normalize_title(text: str) -> str:
    """Normalization used for implicit lookups: trim, spaces to hyphens, lower-case."""
    return text.strip().replace(" ", "-").lower()


def implicit_id(text: str) -> str:
    return IMPLICIT_ID_PREFIX + normalize_title(text)


@dataclasses.dataclass(frozen=True)
class Anchor:
    """A point in the document which can always be referred back to with an XrefMarker."""

    kind: str
    id: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.id}"


@dataclasses.dataclass(frozen=True)
class LabelInfo:
    """What a reference to an anchor can say about it.

    e.g. LabelInfo(kind="lemma", label="Lemma 2.3", short="2.3", title="Kernel")"""

    kind: str
    label: str
    short: str
    title: Optional[str] = None


class RefFormat(Enum):
    """The `format` attribute of an <xref>."""

    Full = "full"
    Bare = "bare"
    Title = "title"
    Paren = "paren"
    Auto = "auto"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RefFormat":
        """Values are matched exactly, anything unknown or missing falls back to Auto"""
        if value is None:
            return cls.Auto
        try:
            return cls(value)
        except ValueError:
            return cls.Auto


def format_ref(info: LabelInfo, fmt: RefFormat) -> str:
    if fmt is RefFormat.Full:
        return info.label
    if fmt is RefFormat.Bare:
        return info.short
    if fmt is RefFormat.Title:
        return info.title or ""
    # paren, auto, anything else
    if info.kind == EQUATION_KIND:
        return f"({info.short})"
    return info.label


@dataclasses.dataclass(frozen=True)
class XrefMarker:
    """A request in the text to refer to an anchor.

    `target` is the explicit id (already stripped of a leading #), `literal_text` is whatever the author wrote inside the marker.
    If the literal text is non-blank it is rendered verbatim, but the link still points at the resolved anchor."""

    target: Optional[str]
    fmt: RefFormat
    literal_text: str

    def has_literal_text(self) -> bool:
        return bool(self.literal_text.strip())

    def lookup_id(self) -> Optional[str]:
        """The id this marker asks for, explicit or implicit. None if the marker doesn't ask for anything."""
        if self.target:
            return self.target
        if self.has_literal_text():
            return implicit_id(self.literal_text)
        return None

    def is_implicit(self) -> bool:
        return not self.target and self.has_literal_text()
