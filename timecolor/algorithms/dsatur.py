from typing import List, Set

from ..grid import SlotGrid
from ..models import ConflictGraph, Item


def saturation(item: Item, graph: ConflictGraph, grid: SlotGrid) -> int:
    """Number of distinct colors (cells) already held by the item's conflicting neighbours."""
    colors: Set[int] = set()
    for other in set(graph.conflicts_of(item.code)):
        colors |= grid.colors_of(other)
    return len(colors)


def dsatur(items: List[Item], graph: ConflictGraph):
    """DSATUR selection, recomputed against the grid before every pick.

    Highest saturation wins, then raw degree, then priority; remaining ties
    keep input order.
    """
    position = {it.code: i for i, it in enumerate(items)}

    def select(remaining: List[Item], grid: SlotGrid) -> Item:
        return min(remaining, key=lambda it: (-saturation(it, graph, grid), -graph.degree(it.code),
                                              it.priority, position[it.code]))
    return select
