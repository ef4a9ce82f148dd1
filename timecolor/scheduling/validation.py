from collections import Counter
from typing import Dict, List

from ..grid import SlotGrid
from ..models import ConflictGraph, Item, StrategyResult


def conflicts_ok(graph: ConflictGraph, grid: SlotGrid) -> bool:
    """No two items joined by a conflict edge share a (day, hour) cell."""
    G = graph.to_networkx()
    for u, v in G.edges():
        if set(grid.cells_of(u)) & set(grid.cells_of(v)):
            return False
    return True


def symmetric(graph: ConflictGraph) -> bool:
    for e in graph.edges:
        if e.target not in graph.conflicts_of(e.source) or e.source not in graph.conflicts_of(e.target):
            return False
    return True


def labs_contiguous(grid: SlotGrid, result: StrategyResult, division: str) -> bool:
    for o in result.outcomes:
        if o.division != division or o.unit != "lab" or o.day is None:
            continue
        if o.span != 2:
            return False
        for k in range(2):
            cell = grid.cell(o.day, o.hour + k)
            if cell is None or cell.item_code != o.item_code or not cell.is_lab:
                return False
    return True


def hours_conserved(items: List[Item], grid: SlotGrid) -> bool:
    theory: Dict[str, int] = Counter()
    lab_cells: Dict[str, int] = Counter()
    for d in range(grid.days):
        for h in range(grid.hours):
            for occ in grid.occupants(d, h):
                if occ.is_lab:
                    lab_cells[occ.item_code] += 1
                else:
                    theory[occ.item_code] += 1
    for it in items:
        if theory[it.code] > it.theory_hours or lab_cells[it.code] > 2 * it.lab_sessions:
            return False
    return True


def result_ok(graph: ConflictGraph, result: StrategyResult) -> bool:
    return all(conflicts_ok(graph, grid) and labs_contiguous(grid, result, name)
               for name, grid in result.divisions.items())
