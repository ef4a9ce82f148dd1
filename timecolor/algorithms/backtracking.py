import logging
import time
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..grid import SlotGrid
from ..models import Item, Outcome, PlacementOutcome, StrategyResult
from ..scheduling.placement import PlacementEngine, is_event_mode, precedence
from .greedy import greedy_order, welsh_powell

logger = logging.getLogger(__name__)


class _BudgetExhausted(Exception):
    pass


@dataclass
class _Unit:
    item: Item
    span: int
    kind: str  # lab | theory | event
    personnel: str


def _units(items: List[Item], engine: PlacementEngine, grid: SlotGrid, division: int) -> List[_Unit]:
    if division == 0:
        return [_Unit(it, engine.event_span(it, grid), "event", it.personnel[0]) for it in items]
    units = []
    for it in items:
        units.extend(_Unit(it, 2, "lab", it.personnel_for(division)) for _ in range(it.lab_sessions))
    for it in items:
        units.extend(_Unit(it, 1, "theory", it.personnel_for(division)) for _ in range(it.theory_hours))
    return units


def _scan(grid: SlotGrid, span: int) -> Iterator[Tuple[int, int]]:
    for d in range(grid.days):
        for h in range(grid.hours - span + 1):
            yield d, h


class _Search:
    def __init__(self, engine: PlacementEngine, grid: SlotGrid, units: List[_Unit], limit: int):
        self.engine = engine
        self.grid = grid
        self.units = units
        self.budget = limit
        self.backtracks = 0
        self.placed: List[Optional[Tuple[int, int]]] = [None] * len(units)

    def _same_as_previous(self, i: int) -> bool:
        if i == 0:
            return False
        a, b = self.units[i - 1], self.units[i]
        return a.item.code == b.item.code and a.kind == b.kind

    def extend(self, i: int = 0) -> bool:
        if i == len(self.units):
            return True
        u = self.units[i]
        # interchangeable units of one item are placed in increasing cell order
        floor = self.grid.color(*self.placed[i - 1]) + 1 if self._same_as_previous(i) else 0
        for d, h in _scan(self.grid, u.span):
            if self.grid.color(d, h) < floor:
                continue
            self.budget -= 1
            if self.budget < 0:
                raise _BudgetExhausted()
            why = self.engine.fits(self.grid, u.item, d, h, u.span)
            if why is not None:
                if why != "occupied":
                    self.engine.rejected += 1
                continue
            self.engine.occupy(self.grid, u.item, d, h, u.span, u.personnel, is_lab=u.kind == "lab")
            self.placed[i] = (d, h)
            if self.extend(i + 1):
                return True
            self.engine.vacate(self.grid, u.item, d, h, u.span)
            self.placed[i] = None
            self.backtracks += 1
        return False


_ACTIONS = {"lab": "Place Lab Session", "theory": "Assign Theory Hour", "event": "Schedule Event"}


def backtracking(engine: PlacementEngine, items: List[Item], name: str = "backtracking") -> StrategyResult:
    """Exhaustive search with undo, bounded by params.backtrack_limit probes per grid.

    Finds a complete placement whenever one exists within the bound. When the
    bound is hit, or no complete placement exists, the Welsh-Powell result is
    returned instead with exhaustive=False and a deferred outcome per item.
    """
    start = time.perf_counter()
    graph = engine.graph
    event_mode = is_event_mode(items)
    if event_mode:
        ordered = sorted(items, key=lambda it: (precedence(it), -graph.degree(it.code)))
        plan = [("Events", 0)]
    else:
        ordered = greedy_order(items, graph, order='degree')
        plan = [("Division 1", 1), ("Division 2", 2)]

    engine.reset()
    divisions: Dict[str, SlotGrid] = {}
    for division, number in plan:
        grid = engine.new_grid(event_mode)
        units = _units(ordered, engine, grid, number)
        search = _Search(engine, grid, units, engine.params.backtrack_limit)
        need = sum(u.span for u in units)
        try:
            complete = (event_mode or need <= grid.days * grid.hours) and search.extend()
            why = "no complete placement exists"
        except _BudgetExhausted:
            complete = False
            why = f"search bound of {engine.params.backtrack_limit} probes reached"
        if not complete:
            logger.warning("%s: exhaustive search failed on %s (%s); falling back to welsh_powell",
                           name, division, why)
            result = engine.run(name, items, welsh_powell(items, graph))
            result.outcomes[:0] = [PlacementOutcome(Outcome.DEFERRED, it.code, "search", division,
                                                    reason=f"{why}; heuristic placement used")
                                   for it in items]
            result.elapsed_ms = (time.perf_counter() - start) * 1000.0
            return result

        for u, slot in zip(units, search.placed):
            engine.record(Outcome.PLACED, u.item, u.kind, division, slot, u.span)
            engine.log_step(_ACTIONS[u.kind], u.item, division, grid, slot, u.span,
                            f"Exhaustive search assignment; {search.backtracks} backtracks on {division}.")
        divisions[division] = grid

    return engine.result(name, divisions, start, exhaustive=True)
