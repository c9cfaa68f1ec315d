from dataclasses import dataclass
from enum import Enum
from typing import Collection, Dict, FrozenSet, Optional, Tuple

from xrefnum.doc.anchors import (
    APPENDIX_KIND,
    EQUATION_KIND,
    FIGURE_KIND,
    SECTION_KIND,
    TABLE_KIND,
)
from xrefnum.render.manual_numbering import (
    APPENDIX_FORMAT,
    ITEM_FORMAT,
    SECTION_FORMAT,
    SimpleCounterFormat,
)

# The counter families inside a scope.
# Every theorem-like kind shares the THEOREM_FAMILY counter, everything else has its own.
THEOREM_FAMILY = "theorem-like"
ITEM_FAMILIES = (THEOREM_FAMILY, EQUATION_KIND, FIGURE_KIND, TABLE_KIND)


class ScopeKind(Enum):
    """The two kinds of scope. The value is the kind under which the scope itself is registered."""

    Numbered = SECTION_KIND
    Lettered = APPENDIX_KIND


SCOPE_FORMATS: Dict[ScopeKind, SimpleCounterFormat] = {
    ScopeKind.Numbered: SECTION_FORMAT,
    ScopeKind.Lettered: APPENDIX_FORMAT,
}


@dataclass
class DocCounter:
    name: str
    value: int = 0

    def increment(self) -> int:
        self.value += 1
        return self.value


@dataclass
class ScopeCounters:
    """The counting state of a single scope: its numeral and one counter per item family.

    Created by IdentifierAllocator.open_scope(), never shared between scopes."""

    kind: ScopeKind
    index: int
    """1-based position of this scope among scopes of the same kind"""
    numeral: str
    theorem_kinds: FrozenSet[str]
    counters: Dict[str, DocCounter]

    def family(self, item_kind: str) -> Optional[str]:
        """Which counter an item kind uses in this scope, or None if it isn't counted here"""
        if item_kind in self.theorem_kinds:
            return THEOREM_FAMILY
        if item_kind in (EQUATION_KIND, FIGURE_KIND, TABLE_KIND):
            return item_kind
        return None

    def allocate(self, item_kind: str) -> Optional[Tuple[int, str]]:
        """Count one more item of `item_kind`, returning (sequence, short code) e.g. (3, '2.3').

        Returns None without touching any counter if the kind isn't counted in this scope."""
        family = self.family(item_kind)
        if family is None:
            return None
        seq = self.counters[family].increment()
        short = SimpleCounterFormat.resolve(
            [(SCOPE_FORMATS[self.kind], self.index), (ITEM_FORMAT, seq)]
        )
        return seq, short


class IdentifierAllocator:
    """Hands out scope numerals in traversal order, independently for numbered and lettered scopes.

    Numerals are never reused - a scope which turns out to be empty still consumes one."""

    _scope_counters: Dict[ScopeKind, DocCounter]
    _theorem_kinds: Dict[ScopeKind, FrozenSet[str]]

    def __init__(
        self,
        numbered_theorem_kinds: Collection[str],
        lettered_theorem_kinds: Collection[str],
    ) -> None:
        self._scope_counters = {k: DocCounter(k.value) for k in ScopeKind}
        self._theorem_kinds = {
            ScopeKind.Numbered: frozenset(numbered_theorem_kinds),
            ScopeKind.Lettered: frozenset(lettered_theorem_kinds),
        }

    def open_scope(self, kind: ScopeKind) -> ScopeCounters:
        index = self._scope_counters[kind].increment()
        return ScopeCounters(
            kind=kind,
            index=index,
            numeral=SCOPE_FORMATS[kind].style[index],
            theorem_kinds=self._theorem_kinds[kind],
            counters={f: DocCounter(f) for f in ITEM_FAMILIES},
        )
