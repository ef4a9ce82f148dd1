import logging
import random
import re
import time
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..grid import Cell, EventGrid, SlotGrid, conflicts_with_occupant, venue_clash
from ..models import (
    ConflictGraph, EngineParams, Item, ItemKind, Outcome, PlacementOutcome,
    PlacementStep, StrategyResult,
)

logger = logging.getLogger(__name__)

# remaining items, current grid -> next item to place
Selector = Callable[[List[Item], SlotGrid], Item]

_FINAL_RE = re.compile(r"(?<!semi)(?<!semi-)(?<!semi )(?<!quarter)(?<!quarter-)(?<!quarter )"
                       r"\bfinals?\b|championship", re.IGNORECASE)


def is_final_stage(item: Item) -> bool:
    return bool(_FINAL_RE.search(item.name))


def is_event_mode(items: List[Item]) -> bool:
    """Homogeneous exam/sports/cultural input is scheduled as one-off events on one grid."""
    if not items:
        return False
    kinds = {it.kind for it in items}
    return len(kinds) == 1 and ItemKind.ACADEMIC not in kinds


def precedence(item: Item) -> Tuple[int, int]:
    return item.priority, 1 if is_final_stage(item) else 0


class PlacementEngine:
    """Places items on fresh grids in the order chosen by a selector.

    Academic input fills two divisions: lab sessions (consecutive pairs) first,
    then single theory hours, then the same order again on a second grid with
    the alternate personnel. Combined-event input fills one shared grid with a
    single contiguous block per item.
    """

    def __init__(self, graph: ConflictGraph, params: Optional[EngineParams] = None,
                 rng: Optional[random.Random] = None):
        self.graph = graph
        self.params = params or EngineParams()
        self.rng = rng or random.Random(self.params.seed)
        self.rejected = 0
        self.steps: List[PlacementStep] = []
        self.outcomes: List[PlacementOutcome] = []

    # ---------- grids and cells ----------
    def new_grid(self, event_mode: bool = False) -> SlotGrid:
        cls = EventGrid if event_mode else SlotGrid
        return cls(self.params.days, self.params.hours)

    def candidates(self, grid: SlotGrid, span: int) -> Iterator[Tuple[int, int]]:
        last_start = grid.hours - span
        if last_start < 0:
            return
        if self.params.probe == "scan":
            for d in range(grid.days):
                for h in range(last_start + 1):
                    yield d, h
        else:
            for _ in range(self.params.max_attempts):
                yield self.rng.randrange(grid.days), self.rng.randrange(last_start + 1)

    def fits(self, grid: SlotGrid, item: Item, day: int, hour: int, span: int) -> Optional[str]:
        """Return None when the block is legal for item, otherwise why it is not."""
        for k in range(span):
            if conflicts_with_occupant(grid, day, hour + k, item, self.graph):
                return "conflict"
            if isinstance(grid, EventGrid) and venue_clash(grid, day, hour + k, item):
                return "venue"
            if not grid.is_free(day, hour + k):
                return "occupied"
        return None

    def occupy(self, grid: SlotGrid, item: Item, day: int, hour: int, span: int,
               personnel: str, is_lab: bool = False):
        for k in range(span):
            grid.put(day, hour + k, Cell(item.code, personnel, is_lab, item.kind.value, item.venue))

    def vacate(self, grid: SlotGrid, item: Item, day: int, hour: int, span: int):
        for k in range(span):
            grid.remove(day, hour + k, item.code)

    def find_block(self, grid: SlotGrid, item: Item, span: int) -> Tuple[Optional[Tuple[int, int]], str]:
        seen_clash = ""
        for d, h in self.candidates(grid, span):
            why = self.fits(grid, item, d, h, span)
            if why is None:
                return (d, h), ""
            if why != "occupied":
                self.rejected += 1
                seen_clash = why
        if span > grid.hours:
            return None, f"needs {span} hours but a day has {grid.hours}"
        if seen_clash:
            return None, f"every free candidate was blocked ({seen_clash})"
        return None, "no consecutive pair free" if span == 2 else "no free cell"

    # ---------- logging ----------
    def log_step(self, action: str, item: Item, division: str, grid: SlotGrid,
                 slot: Optional[Tuple[int, int]], span: int, reasoning: str):
        step = PlacementStep(
            step=len(self.steps) + 1,
            action=action,
            item_code=item.code,
            division=division,
            slot=grid.slot_label(slot[0], slot[1], span) if slot else None,
            color=grid.color(*slot) if slot else None,
            reasoning=reasoning,
        )
        self.steps.append(step)
        return step

    def record(self, status: Outcome, item: Item, unit: str, division: str,
               slot: Optional[Tuple[int, int]] = None, span: int = 1, reason: str = ""):
        day, hour = slot if slot else (None, None)
        self.outcomes.append(PlacementOutcome(status, item.code, unit, division, day, hour, span, reason))

    def _conflict_text(self, item: Item) -> str:
        names = list(dict.fromkeys(self.graph.conflicts_of(item.code)))
        return ", ".join(names) or "none"

    # ---------- units ----------
    def place_lab_sessions(self, grid: SlotGrid, item: Item, division: str, personnel: str):
        for _ in range(item.lab_sessions):
            slot, why = self.find_block(grid, item, 2)
            if slot is None:
                self.record(Outcome.FAILED, item, "lab", division, reason=why)
                self.log_step("Unplaced Lab Session", item, division, grid, None, 2, why)
                logger.warning("%s: lab session of %s left unplaced (%s)", division, item.code, why)
                continue
            self.occupy(grid, item, slot[0], slot[1], 2, personnel, is_lab=True)
            self.record(Outcome.PLACED, item, "lab", division, slot, 2)
            self.log_step("Place Lab Session", item, division, grid, slot, 2,
                          "Lab requires 2 consecutive hours. Placed in available slot "
                          "with no faculty conflicts.")

    def place_theory_hours(self, grid: SlotGrid, item: Item, division: str, personnel: str):
        for _ in range(item.theory_hours):
            slot, why = self.find_block(grid, item, 1)
            if slot is None:
                self.record(Outcome.FAILED, item, "theory", division, reason=why)
                self.log_step("Unplaced Theory Hour", item, division, grid, None, 1, why)
                logger.warning("%s: theory hour of %s left unplaced (%s)", division, item.code, why)
                continue
            self.occupy(grid, item, slot[0], slot[1], 1, personnel)
            self.record(Outcome.PLACED, item, "theory", division, slot, 1)
            self.log_step("Assign Theory Hour", item, division, grid, slot, 1,
                          f"Found valid slot. No conflicts with courses: {self._conflict_text(item)}.")

    def event_span(self, item: Item, grid: SlotGrid) -> int:
        return max(1, min(item.hours, grid.hours))

    def place_event(self, grid: SlotGrid, item: Item, division: str = "Events"):
        span = self.event_span(item, grid)
        slot, why = self.find_block(grid, item, span)
        if slot is None:
            self.record(Outcome.FAILED, item, "event", division, reason=why)
            self.log_step("Unplaced Event", item, division, grid, None, span, why)
            logger.warning("event %s left unplaced (%s)", item.code, why)
            return
        self.occupy(grid, item, slot[0], slot[1], span, item.personnel[0])
        self.record(Outcome.PLACED, item, "event", division, slot, span)
        venue = f" at {item.venue}" if item.venue else ""
        self.log_step("Schedule Event", item, division, grid, slot, span,
                      f"{span}h block{venue} clear of conflicting events: {self._conflict_text(item)}.")

    # ---------- phases ----------
    def _drain(self, items: List[Item], grid: SlotGrid, select: Selector,
               place: Callable[[Item], None], bucketed: bool = False) -> List[Item]:
        remaining = list(items)
        order: List[Item] = []
        while remaining:
            pool = remaining
            if bucketed:
                head = min(precedence(it) for it in remaining)
                pool = [it for it in remaining if precedence(it) == head]
            item = select(pool, grid)
            remaining.remove(item)
            order.append(item)
            place(item)
        return order

    def reset(self):
        self.rejected = 0
        self.steps = []
        self.outcomes = []

    def result(self, name: str, divisions: Dict[str, SlotGrid], start: float,
               exhaustive: bool = False) -> StrategyResult:
        result = StrategyResult(
            name=name,
            divisions=divisions,
            steps=self.steps,
            outcomes=self.outcomes,
            elapsed_ms=(time.perf_counter() - start) * 1000.0,
            conflicts_resolved=self.rejected,
            exhaustive=exhaustive,
        )
        logger.info("%s: %d cells used, %d steps, %d unplaced", name, result.slots_used,
                    result.step_count, len(result.unplaced))
        return result

    def run(self, name: str, items: List[Item], select: Selector) -> StrategyResult:
        self.reset()
        start = time.perf_counter()
        divisions: Dict[str, SlotGrid] = {}

        if is_event_mode(items):
            grid = self.new_grid(event_mode=True)
            self._drain(items, grid, select, lambda it: self.place_event(grid, it), bucketed=True)
            divisions["Events"] = grid
        else:
            div1 = self.new_grid()
            labs = [it for it in items if it.lab_sessions > 0]
            theory = [it for it in items if it.theory_hours > 0]
            lab_order = self._drain(labs, div1, select, lambda it: self.place_lab_sessions(
                div1, it, "Division 1", it.personnel_for(1)))
            theory_order = self._drain(theory, div1, select, lambda it: self.place_theory_hours(
                div1, it, "Division 1", it.personnel_for(1)))

            div2 = self.new_grid()
            for it in lab_order:
                self.place_lab_sessions(div2, it, "Division 2", it.personnel_for(2))
            for it in theory_order:
                self.place_theory_hours(div2, it, "Division 2", it.personnel_for(2))
            divisions["Division 1"] = div1
            divisions["Division 2"] = div2

        return self.result(name, divisions, start)
