import pytest

from timecolor.graph_build import build_conflict_graph
from timecolor.models import EdgeReason, Item, MalformedItemError
from timecolor.scheduling.validation import symmetric


def test_shared_personnel_gives_one_edge():
    a = Item(code="A", name="Alpha", personnel=["X"], theory_hours=1, groups=["G1"])
    b = Item(code="B", name="Beta", personnel=["X"], theory_hours=1, groups=["G2"])
    graph = build_conflict_graph([a, b])
    assert len(graph.edges) == 1
    edge = graph.edges[0]
    assert edge.reason == EdgeReason.SHARED_PERSONNEL
    assert edge.detail == "Shared faculty: X"
    assert graph.conflicts_of("A") == ["B"]
    assert graph.conflicts_of("B") == ["A"]


def test_disjoint_items_have_no_conflicts():
    items = [Item(code=c, name=c, personnel=[f"P{c}"], theory_hours=1, groups=[f"G{c}"], venue=f"V{c}")
             for c in "ABC"]
    graph = build_conflict_graph(items)
    assert graph.edges == []
    assert all(n.degree == 0 for n in graph.item_nodes())
    # one group link and one personnel link per item
    assert len(graph.links) == 6
    assert all(link.reason == EdgeReason.MEMBERSHIP for link in graph.links)


def test_multi_reason_pair_keeps_every_edge():
    a = Item(code="A", name="A", personnel=["X"], theory_hours=1, groups=["G"], venue="Hall")
    b = Item(code="B", name="B", personnel=["X"], theory_hours=1, groups=["G"], venue="Hall")
    graph = build_conflict_graph([a, b])
    assert [e.reason for e in graph.edges] == [
        EdgeReason.SHARED_PERSONNEL, EdgeReason.SHARED_GROUP, EdgeReason.SHARED_VENUE,
    ]
    assert graph.conflicts_of("A") == ["B", "B", "B"]
    assert graph.to_networkx().number_of_edges() == 1


def test_group_and_personnel_nodes(demo_items):
    graph = build_conflict_graph(demo_items)
    kinds = {n.id: n.kind for n in graph.nodes.values()}
    assert kinds["DM"] == "item"
    assert kinds["GROUP-CS-A"] == "group"
    assert kinds["FAC-Prof. Smith"] == "personnel"
    assert graph.nodes["DM"].label == "DM\n(6h)"
    # membership links never reach the constraint graph
    assert set(graph.to_networkx().nodes()) == {"DM", "DS", "DB"}


def test_symmetry(demo_items):
    assert symmetric(build_conflict_graph(demo_items))


def test_rebuild_on_reordered_input_is_isomorphic(demo_items):
    g1 = build_conflict_graph(demo_items)
    g2 = build_conflict_graph(list(reversed(demo_items)))

    def edge_set(g):
        return {(frozenset((e.source, e.target)), e.reason) for e in g.edges}

    assert edge_set(g1) == edge_set(g2)
    for node in g1.item_nodes():
        assert set(node.conflicts) == set(g2.conflicts_of(node.id))


@pytest.mark.parametrize("item", [
    Item(code="A", name="A", personnel=[], theory_hours=1),
    Item(code="A", name="A", personnel=["X"]),
    Item(code="", name="A", personnel=["X"], theory_hours=1),
])
def test_malformed_items_fail_fast(item):
    with pytest.raises(MalformedItemError):
        build_conflict_graph([item])


def test_duplicate_codes_rejected():
    a = Item(code="A", name="A", personnel=["X"], theory_hours=1)
    with pytest.raises(MalformedItemError):
        build_conflict_graph([a, Item(code="A", name="Again", personnel=["Y"], theory_hours=1)])
