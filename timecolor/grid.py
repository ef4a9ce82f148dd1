from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from .models import DAY_NAMES, ConflictGraph, Item


@dataclass
class Cell:
    item_code: str
    personnel: str
    is_lab: bool = False
    kind: Optional[str] = None
    venue: Optional[str] = None


class SlotGrid:
    """Week grid [day][hour]; each cell holds at most one item."""

    def __init__(self, days: int = 5, hours: int = 6):
        self.days = days
        self.hours = hours
        self._cells: List[List[List[Cell]]] = [[[] for _ in range(hours)] for _ in range(days)]
        self._where: Dict[str, List[Tuple[int, int]]] = {}

    def occupants(self, day: int, hour: int) -> List[Cell]:
        return list(self._cells[day][hour])

    def cell(self, day: int, hour: int) -> Optional[Cell]:
        occ = self._cells[day][hour]
        return occ[0] if occ else None

    def is_free(self, day: int, hour: int) -> bool:
        return not self._cells[day][hour]

    def put(self, day: int, hour: int, cell: Cell):
        if not self.is_free(day, hour):
            raise ValueError(f"cell ({day}, {hour}) already holds {self._cells[day][hour][0].item_code}")
        self._cells[day][hour].append(cell)
        self._where.setdefault(cell.item_code, []).append((day, hour))

    def remove(self, day: int, hour: int, item_code: str):
        occ = self._cells[day][hour]
        self._cells[day][hour] = [c for c in occ if c.item_code != item_code]
        cells = self._where.get(item_code, [])
        if (day, hour) in cells:
            cells.remove((day, hour))

    def cells_of(self, item_code: str) -> List[Tuple[int, int]]:
        return list(self._where.get(item_code, []))

    def color(self, day: int, hour: int) -> int:
        return day * self.hours + hour

    def colors_of(self, item_code: str) -> Set[int]:
        return {self.color(d, h) for d, h in self._where.get(item_code, [])}

    def used_cells(self) -> int:
        return sum(1 for d in range(self.days) for h in range(self.hours) if self._cells[d][h])

    def slot_label(self, day: int, hour: int, span: int = 1) -> str:
        if span == 1:
            return f"{DAY_NAMES[day]} H{hour + 1}"
        return f"{DAY_NAMES[day]} H{hour + 1}-H{hour + span}"


class EventGrid(SlotGrid):
    """Shared grid for combined events; parallel events may share a cell."""

    def is_free(self, day: int, hour: int) -> bool:
        return True

    def put(self, day: int, hour: int, cell: Cell):
        self._cells[day][hour].append(cell)
        self._where.setdefault(cell.item_code, []).append((day, hour))


def occupied(grid: SlotGrid, day: int, hour: int) -> bool:
    return bool(grid.occupants(day, hour))


def conflicts_with_occupant(grid: SlotGrid, day: int, hour: int, item: Item, graph: ConflictGraph) -> bool:
    """True iff another item in the cell lists `item` as a conflict."""
    for occ in grid.occupants(day, hour):
        if occ.item_code != item.code and item.code in graph.conflicts_of(occ.item_code):
            return True
    return False


def venue_clash(grid: SlotGrid, day: int, hour: int, item: Item) -> bool:
    if not item.venue:
        return False
    return any(occ.item_code != item.code and occ.venue == item.venue
               for occ in grid.occupants(day, hour))
