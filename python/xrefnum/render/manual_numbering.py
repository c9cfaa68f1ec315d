from dataclasses import dataclass
from typing import Protocol, Sequence, Tuple


class ManualNumbering(Protocol):
    def __getitem__(self, num: int) -> str: ...


class ArabicManualNumbering(ManualNumbering):
    def __getitem__(self, num: int) -> str:
        return str(num)


class LetterManualNumbering(ManualNumbering):
    """1 -> A, 2 -> B, ...

    Computed as chr(64 + num), so past 26 this continues into the characters after Z rather than wrapping to AA."""

    def __getitem__(self, num: int) -> str:
        if num < 1:
            raise RuntimeError(f"Can't represent number {num} as a letter - too small")
        return chr(64 + num)


ARABIC_NUMBERING = ArabicManualNumbering()
UPPER_LETTER_NUMBERING = LetterManualNumbering()


@dataclass
class SimpleCounterFormat:
    """
    The numbering style for a given counter, and how it's combined with child counters.
    """

    style: ManualNumbering
    """The style of the numerical counter."""

    postfix_for_child: str = "."
    """When combined with a child counter, what should be placed between this counter and the child? e.g. the '.' in '2.3'"""

    @classmethod
    def resolve(cls, counters: Sequence[Tuple["SimpleCounterFormat", int]]) -> str:
        """Render a chain of (format, value) pairs, outermost first, e.g. [(section, 2), (theorem, 3)] -> '2.3'"""
        c = ""
        prev_fmt = None
        for fmt, i in counters:
            if prev_fmt:
                c += prev_fmt.postfix_for_child
            c += fmt.style[i]
            prev_fmt = fmt
        return c


SECTION_FORMAT = SimpleCounterFormat(ARABIC_NUMBERING)
APPENDIX_FORMAT = SimpleCounterFormat(UPPER_LETTER_NUMBERING)
ITEM_FORMAT = SimpleCounterFormat(ARABIC_NUMBERING)
