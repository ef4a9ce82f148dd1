import networkx as nx

from ..models import ConflictGraph, ScheduleReport
from .validation import result_ok


def _greedy_clique_lb(G: nx.Graph) -> int:
    """Fast lower bound on chromatic number via a greedy maximal clique.

    Picks the highest-degree node, then greedily grows a clique by repeatedly
    adding a node that is adjacent to all current clique members.
    """
    if G.number_of_nodes() == 0:
        return 0
    seed = max(G.nodes(), key=lambda u: G.degree(u))
    clique = {seed}
    candidates = set(G.neighbors(seed))
    while candidates:
        u = max(candidates, key=lambda v: G.degree(v))
        new_cands = {v for v in candidates if all(G.has_edge(v, w) for w in clique)}
        if u in new_cands:
            clique.add(u)
            candidates = new_cands.intersection(G.neighbors(u))
        else:
            candidates.remove(u)
    return len(clique)


def clique_lower_bound(graph: ConflictGraph) -> int:
    return _greedy_clique_lb(graph.to_networkx())


def summary(report: ScheduleReport) -> str:
    G = report.graph.to_networkx()
    lines = [
        f"Items: {G.number_of_nodes()}  Conflict pairs: {G.number_of_edges()}  "
        f"Conflict edges: {len(report.graph.edges)}",
        f"Clique lower bound: {_greedy_clique_lb(G)}",
    ]
    for name, res in report.results.items():
        valid = result_ok(report.graph, res)
        quality = "exhaustive" if res.exhaustive else "heuristic"
        lines.append(
            f"{name}: cells used {res.slots_used}  steps {res.step_count}  "
            f"time {res.elapsed_ms:.2f}ms  unplaced {len(res.unplaced)}  "
            f"valid {valid}  ({quality})"
        )
    rec = report.recommendation
    lines.append(f"Fastest: {rec.fastest}  Least slots: {rec.least_slots}  "
                 f"Most efficient: {rec.most_efficient}  Recommended: {rec.recommended}")
    return "\n".join(lines) + "\n"
