from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import networkx as nx


class MalformedItemError(ValueError):
    """Raised when an item reaches the engine without the fields it needs."""


class ItemKind(str, Enum):
    ACADEMIC = "academic"
    EXAM = "exam"
    SPORTS = "sports"
    CULTURAL = "cultural"


class LabMode(str, Enum):
    NONE = "none"
    COMBINED = "combined"
    PER_BATCH = "per_batch"


class EdgeReason(str, Enum):
    SHARED_PERSONNEL = "shared-personnel"
    SHARED_GROUP = "shared-group"
    SHARED_VENUE = "shared-venue"
    MEMBERSHIP = "membership-link"


@dataclass
class Item:
    code: str
    name: str
    personnel: List[str]
    priority: int = 1  # 1 = high
    theory_hours: int = 0
    lab_hours: int = 0
    lab_mode: LabMode = LabMode.NONE
    kind: ItemKind = ItemKind.ACADEMIC
    groups: Optional[List[str]] = None  # student sections or teams
    department: Optional[str] = None
    venue: Optional[str] = None

    @property
    def hours(self) -> int:
        return self.theory_hours + self.lab_hours

    @property
    def lab_sessions(self) -> int:
        return self.lab_hours // 2

    def personnel_for(self, division: int) -> str:
        """Primary personnel for division 1, second-listed (if any) for division 2."""
        if division == 2 and len(self.personnel) > 1:
            return self.personnel[1]
        return self.personnel[0]


@dataclass(frozen=True)
class ConflictEdge:
    source: str
    target: str
    reason: EdgeReason
    detail: str = ""


@dataclass
class GraphNode:
    id: str
    label: str
    kind: str  # item | group | personnel
    conflicts: List[str] = field(default_factory=list)

    @property
    def degree(self) -> int:
        return len(self.conflicts)


@dataclass
class ConflictGraph:
    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    # item-to-item constraints, consulted by the coloring check
    edges: List[ConflictEdge] = field(default_factory=list)
    # item-to-group / item-to-personnel links, display only
    links: List[ConflictEdge] = field(default_factory=list)

    def item_nodes(self) -> List[GraphNode]:
        return [n for n in self.nodes.values() if n.kind == "item"]

    def conflicts_of(self, code: str) -> List[str]:
        node = self.nodes.get(code)
        return node.conflicts if node else []

    def degree(self, code: str) -> int:
        return len(self.conflicts_of(code))

    def to_networkx(self) -> nx.Graph:
        G = nx.Graph()
        for node in self.item_nodes():
            G.add_node(node.id, label=node.label)
        for e in self.edges:
            if G.has_edge(e.source, e.target):
                G[e.source][e.target]["reasons"].append(e.reason)
            else:
                G.add_edge(e.source, e.target, reasons=[e.reason])
        return G


@dataclass
class PlacementStep:
    step: int
    action: str
    item_code: str
    division: str = ""
    slot: Optional[str] = None
    color: Optional[int] = None  # day * hours + hour
    reasoning: str = ""


class Outcome(str, Enum):
    PLACED = "placed"
    DEFERRED = "deferred"
    FAILED = "failed"


@dataclass
class PlacementOutcome:
    status: Outcome
    item_code: str
    unit: str  # lab | theory | event
    division: str
    day: Optional[int] = None
    hour: Optional[int] = None
    span: int = 1
    reason: str = ""


@dataclass
class UnplacedUnit:
    item_code: str
    unit: str
    division: str
    reason: str


@dataclass
class StrategyResult:
    name: str
    divisions: Dict[str, Any] = field(default_factory=dict)  # division name -> grid
    steps: List[PlacementStep] = field(default_factory=list)
    outcomes: List[PlacementOutcome] = field(default_factory=list)
    elapsed_ms: float = 0.0
    conflicts_resolved: int = 0
    exhaustive: bool = False

    @property
    def slots_used(self) -> int:
        return sum(grid.used_cells() for grid in self.divisions.values())

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def unplaced(self) -> List[UnplacedUnit]:
        return [UnplacedUnit(o.item_code, o.unit, o.division, o.reason)
                for o in self.outcomes if o.status == Outcome.FAILED]

    @property
    def heuristic(self) -> bool:
        """True when the result did not come from a completed exhaustive search."""
        return not self.exhaustive


@dataclass
class Recommendation:
    fastest: str
    least_slots: str
    most_efficient: str
    recommended: str


@dataclass
class ScheduleReport:
    graph: ConflictGraph
    results: Dict[str, StrategyResult]
    recommendation: Recommendation
    event_mode: bool = False


class EngineParams:
    def __init__(self, days=5, hours=6, max_attempts=100, backtrack_limit=20000,
                 seed=None, probe="random"):
        if probe not in ("random", "scan"):
            raise ValueError("probe must be 'random' or 'scan'")
        self.days = days
        self.hours = hours
        self.max_attempts = max_attempts
        self.backtrack_limit = backtrack_limit
        self.seed = seed
        self.probe = probe


def validate_items(items: List[Item]) -> None:
    seen = set()
    for it in items:
        if not it.code:
            raise MalformedItemError(f"item {it.name!r} has no code")
        if it.code in seen:
            raise MalformedItemError(f"duplicate item code {it.code!r}")
        seen.add(it.code)
        if not it.personnel:
            raise MalformedItemError(f"item {it.code!r} lists no personnel")
        if it.theory_hours < 0 or it.lab_hours < 0 or it.hours <= 0:
            raise MalformedItemError(f"item {it.code!r} requires no hours")


DAY_NAMES: Tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
                              "Saturday", "Sunday")
