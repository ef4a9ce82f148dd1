import logging
from typing import List

from .models import ConflictEdge, ConflictGraph, EdgeReason, GraphNode, Item, validate_items

logger = logging.getLogger(__name__)


def group_node_id(group: str) -> str:
    return f"GROUP-{group}"


def personnel_node_id(person: str) -> str:
    return f"FAC-{person}"


def _connect(graph: ConflictGraph, a: Item, b: Item, reason: EdgeReason, detail: str):
    graph.nodes[a.code].conflicts.append(b.code)
    graph.nodes[b.code].conflicts.append(a.code)
    graph.edges.append(ConflictEdge(a.code, b.code, reason, detail))


def build_conflict_graph(items: List[Item]) -> ConflictGraph:
    """Build the conflict graph for a validated item list.

    Item pairs sharing personnel, a group or a venue get one edge per reason;
    each edge also appends the two codes to each other's conflict lists, so a
    pair with two reasons appears twice there. Group and personnel nodes are
    only joined to items through membership links.
    """
    validate_items(items)
    graph = ConflictGraph()
    for it in items:
        graph.nodes[it.code] = GraphNode(id=it.code, label=f"{it.code}\n({it.hours}h)", kind="item")

    for it in items:
        for g in it.groups or []:
            nid = group_node_id(g)
            if nid not in graph.nodes:
                graph.nodes[nid] = GraphNode(id=nid, label=f"Group\n{g}", kind="group")
    for it in items:
        for p in it.personnel:
            nid = personnel_node_id(p)
            if nid not in graph.nodes:
                graph.nodes[nid] = GraphNode(id=nid, label=f"Faculty\n{p}", kind="personnel")

    for i in range(len(items)):
        for j in range(i + 1, len(items)):
            a, b = items[i], items[j]
            shared = [p for p in a.personnel if p in b.personnel]
            if shared:
                _connect(graph, a, b, EdgeReason.SHARED_PERSONNEL,
                         f"Shared faculty: {', '.join(shared)}")
            if a.groups and b.groups:
                common = [g for g in a.groups if g in b.groups]
                if common:
                    _connect(graph, a, b, EdgeReason.SHARED_GROUP,
                             f"Shared student groups: {', '.join(common)}")
            if a.venue and b.venue and a.venue == b.venue:
                _connect(graph, a, b, EdgeReason.SHARED_VENUE, f"Shared venue: {a.venue}")

        it = items[i]
        for g in it.groups or []:
            graph.links.append(ConflictEdge(it.code, group_node_id(g), EdgeReason.MEMBERSHIP,
                                            "Assigned to group"))
        for p in it.personnel:
            graph.links.append(ConflictEdge(it.code, personnel_node_id(p), EdgeReason.MEMBERSHIP,
                                            "Taught by faculty"))

    logger.info("Built conflict graph: %d items, %d conflict edges, %d links",
                len(items), len(graph.edges), len(graph.links))
    return graph
