"""Tests for degree, betweenness and closeness centrality."""

import networkx as nx
import numpy as np
import pytest

from socialgraph.centrality import (
    betweenness,
    closeness,
    degree,
    shortest_path_tree,
)
from socialgraph.graph import (
    build_graph,
    complete_graph,
    empty_graph,
    erdos_renyi_graph,
    path_graph,
    star_graph,
)
from socialgraph.results import UndefinedMetricWarning


def _to_networkx(graph) -> nx.Graph:
    g = nx.Graph()
    g.add_nodes_from(graph.nodes())
    g.add_edges_from(graph.edges())
    return g


@pytest.fixture
def random_graph():
    # Sparse enough to leave a few isolated nodes and several components
    return erdos_renyi_graph(40, 0.06, np.random.default_rng(11))


class TestShortestPathTree:
    def test_path_counts_on_cycle(self) -> None:
        # 4-cycle: two shortest paths from 0 to 2
        g = build_graph(4, [(0, 1), (1, 2), (2, 3), (3, 0)])
        tree = shortest_path_tree(g, 0)
        assert tree.distance.tolist() == [0, 1, 2, 1]
        assert tree.sigma.tolist() == [1.0, 1.0, 2.0, 1.0]
        assert sorted(tree.predecessors[2]) == [1, 3]
        assert tree.order[0] == 0

    def test_unreachable_nodes(self) -> None:
        g = build_graph(3, [(0, 1)])
        tree = shortest_path_tree(g, 0)
        assert tree.distance[2] == -1
        assert tree.sigma[2] == 0.0
        assert 2 not in tree.order


class TestDegree:
    def test_degree_sum_is_twice_edge_count(self, random_graph) -> None:
        assert degree(random_graph).values.sum() == 2 * random_graph.edge_count()

    def test_empty_graph_all_zero(self) -> None:
        d = degree(empty_graph(6))
        assert d.values.tolist() == [0.0] * 6
        assert d.notices == ()

    def test_values_are_floats(self) -> None:
        d = degree(path_graph(3))
        assert d.values.dtype == np.float64
        assert d.as_dict() == {0: 1.0, 1: 2.0, 2: 1.0}


class TestBetweenness:
    def test_edgeless_graph_is_zero(self) -> None:
        assert betweenness(empty_graph(5)).values.tolist() == [0.0] * 5

    def test_path_interior_exceeds_endpoints(self) -> None:
        b = betweenness(path_graph(6)).values
        for interior in range(1, 5):
            assert b[interior] > b[0]
            assert b[interior] > b[5]
        # Node k on a path of n lies on k * (n - 1 - k) pair paths
        assert b.tolist() == [0.0, 4.0, 6.0, 6.0, 4.0, 0.0]

    def test_star_center(self) -> None:
        b = betweenness(star_graph(9))
        assert b[0] == pytest.approx(36.0)
        assert np.all(b.values[1:] == 0.0)

    def test_ties_split_proportionally(self) -> None:
        # 4-cycle: pair (0, 2) has two shortest paths, via 1 and via 3
        g = build_graph(4, [(0, 1), (1, 2), (2, 3), (3, 0)])
        assert betweenness(g).values.tolist() == [0.5, 0.5, 0.5, 0.5]

    def test_complete_graph_is_zero(self) -> None:
        assert np.all(betweenness(complete_graph(5)).values == 0.0)

    def test_normalized(self) -> None:
        b = betweenness(star_graph(9), normalized=True)
        assert b[0] == pytest.approx(1.0)

    def test_matches_networkx(self, random_graph) -> None:
        ours = betweenness(random_graph).values
        ref = nx.betweenness_centrality(_to_networkx(random_graph), normalized=False)
        np.testing.assert_allclose(ours, [ref[v] for v in random_graph.nodes()])


class TestCloseness:
    def test_star(self) -> None:
        c = closeness(star_graph(9))
        assert c[0] == pytest.approx(1.0)
        # Leaf: 1 hop to center, 2 hops to each of 8 leaves
        assert c[1] == pytest.approx(9 / 17)

    def test_values_in_unit_interval(self, random_graph) -> None:
        c = closeness(random_graph)
        defined = c.raw[~c.undefined]
        assert np.all((defined > 0) & (defined <= 1))

    def test_isolate_undefined_and_zero_substituted(self) -> None:
        g = build_graph(4, [(0, 1), (1, 2)])
        c = closeness(g)
        assert np.isnan(c.raw[3])
        assert c[3] == 0.0
        assert c.values[3] == 0.0
        assert not np.isnan(c.summary()["mean"])
        assert len(c.notices) == 1
        notice = c.notices[0]
        assert isinstance(notice, UndefinedMetricWarning)
        assert notice.metric == "closeness"
        assert notice.nodes == (3,)

    def test_reachable_subset_normalization(self) -> None:
        # Components {0, 1} and {2, 3, 4}: each scored on its own component
        g = build_graph(5, [(0, 1), (2, 3), (3, 4)])
        c = closeness(g)
        assert c[0] == pytest.approx(1.0)
        assert c[3] == pytest.approx(1.0)
        assert c[2] == pytest.approx(2 / 3)

    def test_monotone_in_distance_sum(self) -> None:
        # On a path every node reaches the same number of peers, so a larger
        # distance sum must never give a larger score.
        g = path_graph(7)
        c = closeness(g).values
        sums = [
            shortest_path_tree(g, v).distance.sum() for v in g.nodes()
        ]
        order = np.argsort(sums, kind="stable")
        assert np.all(np.diff(c[order]) <= 1e-12)

    def test_matches_networkx(self, random_graph) -> None:
        ours = closeness(random_graph).values
        ref = nx.closeness_centrality(_to_networkx(random_graph), wf_improved=False)
        np.testing.assert_allclose(ours, [ref[v] for v in random_graph.nodes()])
