from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from xrefnum.doc.anchors import Anchor, LabelInfo, normalize_title
from xrefnum.errors import DuplicateTitleError


class TitleCollisions(Enum):
    """What happens when two titled items normalize to the same implicit key"""

    LastWins = "last-wins"
    Error = "error"


class SymbolTable:
    """Keeps track of every anchor in one document and the label information associated with it.

    Built once by the numbering pass, then frozen. After freezing, registering raises RuntimeError.
    Lookups are exact-match on the id and never raise - a missing id returns None.

    Alongside the id-keyed table there is a secondary index from normalized item titles to ids,
    used to resolve implicit references like `<xref>Kernel</xref>` when nobody wrote `id="def:kernel"`.
    If two entries share an id the later one replaces the earlier one.
    """

    _entries: Dict[str, LabelInfo]
    _title_index: Dict[str, str]
    _title_collisions: TitleCollisions
    _frozen: bool

    def __init__(
        self, title_collisions: TitleCollisions = TitleCollisions.LastWins
    ) -> None:
        self._entries = {}
        self._title_index = {}
        self._title_collisions = title_collisions
        self._frozen = False

    def register(self, anchor: Anchor, info: LabelInfo) -> None:
        if self._frozen:
            raise RuntimeError(
                f"Can't register anchor {anchor} when the symbol table is frozen!"
            )
        self._entries[anchor.id] = info

        if info.title:
            key = normalize_title(info.title)
            existing = self._title_index.get(key)
            if (
                existing is not None
                and existing != anchor.id
                and self._title_collisions is TitleCollisions.Error
            ):
                raise DuplicateTitleError(
                    f"Anchor {anchor} has title '{info.title}', which collides with the title of '{existing}'"
                )
            self._title_index[key] = anchor.id

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, id: str) -> Optional[LabelInfo]:
        return self._entries.get(id)

    def lookup_title(self, title: str) -> Optional[str]:
        """Find the id of the item whose title normalizes the same way as `title`"""
        return self._title_index.get(normalize_title(title))

    def __contains__(self, id: object) -> bool:
        return id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self) -> List[Tuple[str, LabelInfo]]:
        return list(self._entries.items())
