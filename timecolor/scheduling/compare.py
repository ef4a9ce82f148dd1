import logging
import random
from typing import Dict, List, Optional

from ..algorithms.backtracking import backtracking
from ..algorithms.dsatur import dsatur
from ..algorithms.greedy import first_fit, welsh_powell
from ..graph_build import build_conflict_graph
from ..models import ConflictGraph, EngineParams, Item, Recommendation, ScheduleReport, StrategyResult
from .placement import PlacementEngine, is_event_mode

logger = logging.getLogger(__name__)

STRATEGIES = ("welsh_powell", "greedy", "dsatur", "backtracking")


def _engine_for(name: str, graph: ConflictGraph, params: EngineParams) -> PlacementEngine:
    # one independent random source per strategy; str seeds hash deterministically
    seed = None if params.seed is None else f"{params.seed}:{name}"
    return PlacementEngine(graph, params, random.Random(seed))


def run_strategy(name: str, items: List[Item], graph: ConflictGraph,
                 params: Optional[EngineParams] = None) -> StrategyResult:
    params = params or EngineParams()
    engine = _engine_for(name, graph, params)
    if name == "welsh_powell":
        return engine.run(name, items, welsh_powell(items, graph))
    elif name == "greedy":
        return engine.run(name, items, first_fit(items, graph))
    elif name == "dsatur":
        return engine.run(name, items, dsatur(items, graph))
    elif name == "backtracking":
        return backtracking(engine, items, name)
    raise ValueError(f"strategy must be one of {', '.join(STRATEGIES)}")


def compare(results: Dict[str, StrategyResult], item_count: int, edge_count: int) -> Recommendation:
    """Pick fastest / least slots / most efficient from the measurements.

    `recommended` is a size and density heuristic that ignores the measurements.
    """
    ordered = list(results.values())
    fastest = min(ordered, key=lambda r: r.elapsed_ms)
    least = min(ordered, key=lambda r: r.slots_used)
    efficient = min(ordered, key=lambda r: 0.7 * r.slots_used + 0.3 * r.elapsed_ms)

    if item_count <= 5:
        recommended = "backtracking"
    elif item_count > 15:
        recommended = "greedy"
    elif edge_count / item_count > 2:
        recommended = "welsh_powell"
    else:
        recommended = "dsatur"
    return Recommendation(fastest=fastest.name, least_slots=least.name,
                          most_efficient=efficient.name, recommended=recommended)


def generate(items: List[Item], params: Optional[EngineParams] = None) -> ScheduleReport:
    """Build the conflict graph, run every strategy on fresh grids and compare them."""
    params = params or EngineParams()
    graph = build_conflict_graph(items)
    results = {name: run_strategy(name, items, graph, params) for name in STRATEGIES}
    rec = compare(results, len(items), len(graph.edges))
    if results["backtracking"].heuristic:
        logger.warning("backtracking result is heuristic; exhaustive search did not complete")
    logger.info("Recommended strategy: %s (fastest %s, least slots %s, most efficient %s)",
                rec.recommended, rec.fastest, rec.least_slots, rec.most_efficient)
    return ScheduleReport(graph=graph, results=results, recommendation=rec,
                          event_mode=is_event_mode(items))
