from typing import List

from ..grid import SlotGrid
from ..models import ConflictGraph, Item


def greedy_order(items: List[Item], graph: ConflictGraph, order: str = 'degree') -> List[Item]:
    """Static vertex ordering: 'degree' is Welsh-Powell, 'input' keeps the caller's order."""
    if order == 'degree':
        # stable sort, so equal (degree, priority) keeps input order
        return sorted(items, key=lambda it: (-graph.degree(it.code), it.priority))
    elif order == 'input':
        return list(items)
    raise ValueError("order must be 'degree' or 'input'")


def static_selector(order: List[Item]):
    rank = {it.code: i for i, it in enumerate(order)}

    def select(remaining: List[Item], grid: SlotGrid) -> Item:
        return min(remaining, key=lambda it: rank[it.code])
    return select


def welsh_powell(items: List[Item], graph: ConflictGraph):
    return static_selector(greedy_order(items, graph, order='degree'))


def first_fit(items: List[Item], graph: ConflictGraph):
    return static_selector(greedy_order(items, graph, order='input'))
