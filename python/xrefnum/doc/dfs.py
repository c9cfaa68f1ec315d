from typing import Any, Callable, Collection, Generic, Iterable, List, Optional, Tuple

from xrefnum.doc.tree import TNode, TreeAdapter
from xrefnum.errors import TreeContractError

# A visitor is called for every node whose kind is in the filter, or for every node if the filter is None
VisitorFilter = Optional[Collection[str]]
VisitorFunc = Callable[[Any], None]


class DocumentDfsPass(Generic[TNode]):
    """A single pre-order depth-first traversal of a tree, calling visitor functions on the way.

    Nodes are visited in document order.
    Subtrees rooted at a kind in `skip_kinds` (e.g. <script>, <pre>) are not entered at all."""

    visitors: List[Tuple[VisitorFilter, VisitorFunc]]
    skip_kinds: Collection[str]

    def __init__(
        self,
        visitors: List[Tuple[VisitorFilter, VisitorFunc]],
        skip_kinds: Collection[str] = (),
    ) -> None:
        self.visitors = visitors
        self.skip_kinds = skip_kinds

    def dfs_over_tree(
        self, tree: TreeAdapter[TNode], start: TNode, include_start: bool = True
    ) -> None:
        dfs_queue: List[TNode] = []
        if include_start:
            dfs_queue.append(start)
        else:
            dfs_queue.extend(reversed(self._children(tree, start)))

        while dfs_queue:
            node = dfs_queue.pop()
            kind = tree.kind(node)
            if kind in self.skip_kinds:
                continue

            for v_kinds, v_f in self.visitors:
                if v_kinds is None or kind in v_kinds:
                    v_f(node)

            # reversed is important because we pop the last thing in the queue off first.
            dfs_queue.extend(reversed(self._children(tree, node)))

    @staticmethod
    def _children(tree: TreeAdapter[TNode], node: TNode) -> List[TNode]:
        try:
            return list(tree.children(node))
        except (AttributeError, TypeError) as e:
            raise TreeContractError(f"Can't list the children of {node!r}") from e


def collect_kinds(
    tree: TreeAdapter[TNode],
    start: TNode,
    kinds: Optional[Iterable[str]],
    skip_kinds: Collection[str] = (),
    include_start: bool = False,
) -> List[TNode]:
    """Every node under `start` with one of `kinds` (or every node at all, if `kinds` is None), in document order"""
    found: List[TNode] = []
    v_kinds = frozenset(kinds) if kinds is not None else None
    DocumentDfsPass([(v_kinds, found.append)], skip_kinds).dfs_over_tree(
        tree, start, include_start=include_start
    )
    return found
