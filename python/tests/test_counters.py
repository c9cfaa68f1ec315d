import pytest

from xrefnum.config import NumberingConfig
from xrefnum.render.counters import (
    THEOREM_FAMILY,
    DocCounter,
    IdentifierAllocator,
    ScopeKind,
)
from xrefnum.render.manual_numbering import (
    ARABIC_NUMBERING,
    UPPER_LETTER_NUMBERING,
    SimpleCounterFormat,
)


def make_allocator() -> IdentifierAllocator:
    config = NumberingConfig()
    return IdentifierAllocator(
        config.numbered_theorem_kinds, config.lettered_theorem_kinds
    )


def test_letter_numbering():
    assert [UPPER_LETTER_NUMBERING[i] for i in range(1, 5)] == ["A", "B", "C", "D"]
    assert UPPER_LETTER_NUMBERING[26] == "Z"
    # No wrapping to AA
    assert UPPER_LETTER_NUMBERING[27] == chr(91)
    with pytest.raises(RuntimeError):
        UPPER_LETTER_NUMBERING[0]


def test_counter_format_resolves_chains():
    section = SimpleCounterFormat(ARABIC_NUMBERING)
    appendix = SimpleCounterFormat(UPPER_LETTER_NUMBERING)
    item = SimpleCounterFormat(ARABIC_NUMBERING)
    assert SimpleCounterFormat.resolve([(section, 2), (item, 3)]) == "2.3"
    assert SimpleCounterFormat.resolve([(appendix, 2), (item, 1)]) == "B.1"
    assert SimpleCounterFormat.resolve([(section, 4)]) == "4"
    dashed = SimpleCounterFormat(ARABIC_NUMBERING, postfix_for_child="-")
    assert SimpleCounterFormat.resolve([(dashed, 1), (item, 7)]) == "1-7"


def test_doc_counter_counts_from_one():
    counter = DocCounter("equation")
    assert counter.value == 0
    assert [counter.increment() for _ in range(3)] == [1, 2, 3]
    assert counter.value == 3


def test_scope_numerals_are_independent_per_kind():
    alloc = make_allocator()
    numerals = [
        alloc.open_scope(ScopeKind.Numbered).numeral,
        alloc.open_scope(ScopeKind.Lettered).numeral,
        alloc.open_scope(ScopeKind.Numbered).numeral,
        alloc.open_scope(ScopeKind.Lettered).numeral,
        alloc.open_scope(ScopeKind.Numbered).numeral,
    ]
    assert numerals == ["1", "A", "2", "B", "3"]


def test_empty_scopes_still_consume_numerals():
    alloc = make_allocator()
    alloc.open_scope(ScopeKind.Numbered)
    second = alloc.open_scope(ScopeKind.Numbered)
    assert second.allocate("figure") == (1, "2.1")


def test_theorem_like_kinds_share_a_counter():
    scope = make_allocator().open_scope(ScopeKind.Numbered)
    got = [
        scope.allocate(k)
        for k in ["definition", "theorem", "lemma", "remark", "corollary", "proposition"]
    ]
    assert got == [(1, "1.1"), (2, "1.2"), (3, "1.3"), (4, "1.4"), (5, "1.5"), (6, "1.6")]


def test_families_count_independently():
    scope = make_allocator().open_scope(ScopeKind.Numbered)
    assert scope.allocate("theorem") == (1, "1.1")
    assert scope.allocate("equation") == (1, "1.1")
    assert scope.allocate("equation") == (2, "1.2")
    assert scope.allocate("figure") == (1, "1.1")
    assert scope.allocate("table") == (1, "1.1")
    assert scope.allocate("lemma") == (2, "1.2")
    assert scope.allocate("table") == (2, "1.2")


def test_counters_are_gapless_across_many_items():
    scope = make_allocator().open_scope(ScopeKind.Numbered)
    shorts = [scope.allocate("equation")[1] for _ in range(12)]  # type: ignore[index]
    assert shorts == [f"1.{i}" for i in range(1, 13)]


def test_unknown_kinds_are_not_counted():
    scope = make_allocator().open_scope(ScopeKind.Numbered)
    assert scope.allocate("paragraph") is None
    assert scope.allocate("theorem") == (1, "1.1")


def test_appendices_only_count_the_narrow_theorem_set():
    # Definitions and remarks aren't numbered inside appendices.
    # This mirrors the long-standing behaviour of the numbering and is pinned deliberately.
    scope = make_allocator().open_scope(ScopeKind.Lettered)
    assert scope.family("definition") is None
    assert scope.family("remark") is None
    assert scope.family("proposition") == THEOREM_FAMILY
    assert scope.allocate("definition") is None
    assert scope.allocate("remark") is None
    assert scope.allocate("theorem") == (1, "A.1")
    assert scope.allocate("proposition") == (2, "A.2")
