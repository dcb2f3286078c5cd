"""Tests for the clustering octree and Barnes-Hut repulsion estimates."""

import random

import numpy as np
import pytest

from graph_layout3d.force import pairwise_repulsion
from graph_layout3d.spatial.octree import Octant, OctreeNode, build_octree
from graph_layout3d.types import Vertex
from graph_layout3d.validation import DuplicateVertexError, InternalInvariantViolation


def make_vertices(positions):
    """Create vertices with ids 0..n-1 at the given positions."""
    return [Vertex(i, p) for i, p in enumerate(positions)]


def repel(x1, x2):
    """Default repulsion law (epsilon=0.1, repulsion=50)."""
    return pairwise_repulsion(0.1, 50.0, x1, x2)


def exact_repulsion(vertices, target):
    """Exact O(n) repulsion sum on target."""
    total = np.zeros(3)
    for other in vertices:
        if other.id != target.id:
            total += repel(target.position, other.position)
    return total


class TestOctant:
    """Tests for octant labelling."""

    def test_all_positive(self):
        """Coordinates above the center map to right/up/in."""
        assert Octant.of(np.zeros(3), np.array([1.0, 1.0, 1.0])) is Octant.RUI

    def test_all_negative(self):
        """Coordinates below the center map to left/down/out."""
        assert Octant.of(np.zeros(3), np.array([-1.0, -1.0, -1.0])) is Octant.LDO

    def test_ties_go_low(self):
        """A coordinate equal to the center maps to left/down/out."""
        assert Octant.of(np.zeros(3), np.zeros(3)) is Octant.LDO

    def test_mixed(self):
        """Each axis is classified independently."""
        assert Octant.of(np.zeros(3), np.array([1.0, -1.0, 1.0])) is Octant.RDI
        assert Octant.of(np.zeros(3), np.array([-1.0, 1.0, -1.0])) is Octant.LUO

    def test_eight_distinct_labels(self):
        """There are exactly eight octants."""
        assert len(set(Octant)) == 8

    def test_node_octant_uses_center_of_mass(self):
        """get_octant compares against the node's current center."""
        node = OctreeNode()
        node.insert(Vertex(0, (10.0, 10.0, 10.0)))
        assert node.get_octant(np.array([11.0, 9.0, 10.0])) is Octant.RDO


class TestOctreeInsertion:
    """Tests for insertion and clustering policy."""

    def test_empty_node(self):
        """New node has no members."""
        node = OctreeNode()
        assert node.is_empty()
        assert len(node) == 0
        assert node.count() == 0
        assert node.outers == {}

    def test_first_vertex_becomes_inner(self):
        """First insertion always populates inners."""
        node = OctreeNode()
        node.insert(Vertex(7, (5.0, -3.0, 2.0)))

        assert 7 in node
        assert np.allclose(node.center(), [5.0, -3.0, 2.0])

    def test_close_vertex_joins_cluster(self):
        """Vertex within inner_distance of the center joins inners."""
        node = OctreeNode(inner_distance=0.36)
        node.insert(Vertex(0, (0.0, 0.0, 0.0)))
        node.insert(Vertex(1, (0.3, 0.0, 0.0)))

        assert set(node.inners) == {0, 1}
        assert node.outers == {}

    def test_boundary_distance_joins_cluster(self):
        """Distance exactly equal to inner_distance still joins."""
        node = OctreeNode(inner_distance=0.5)
        node.insert(Vertex(0, (0.0, 0.0, 0.0)))
        node.insert(Vertex(1, (0.5, 0.0, 0.0)))
        assert 1 in node

    def test_far_vertex_creates_child_lazily(self):
        """Distant vertex goes to a single new child for its octant."""
        node = OctreeNode()
        node.insert(Vertex(0, (0.0, 0.0, 0.0)))
        node.insert(Vertex(1, (1.0, 0.0, 0.0)))

        assert list(node.outers) == [Octant.RDO]
        child = node.outers[Octant.RDO]
        assert 1 in child
        assert child.inner_distance == node.inner_distance

    def test_children_share_octant(self):
        """Two distant vertices in the same octant reuse one child."""
        node = OctreeNode()
        node.insert(Vertex(0, (0.0, 0.0, 0.0)))
        node.insert(Vertex(1, (5.0, 5.0, 5.0)))
        node.insert(Vertex(2, (5.1, 5.0, 5.0)))

        assert len(node.outers) == 1
        assert set(node.outers[Octant.RUI].inners) == {1, 2}

    def test_membership_conservation(self):
        """Every inserted vertex ends up in exactly one node."""
        rng = random.Random(3)
        positions = [(rng.uniform(-5, 5), rng.uniform(-5, 5), rng.uniform(-5, 5)) for _ in range(300)]
        vertices = make_vertices(positions)

        tree = build_octree(vertices)

        members = tree.members()
        assert tree.count() == 300
        assert sorted(members) == list(range(300))
        assert len(members) == len(set(members))

    def test_membership_conservation_coincident(self):
        """Coincident vertices are all kept."""
        vertices = make_vertices([(1.0, 1.0, 1.0)] * 20)
        tree = build_octree(vertices)

        assert tree.count() == 20
        assert len(tree) == 20

    def test_find(self):
        """find() returns the node holding a vertex."""
        vertices = make_vertices([(0, 0, 0), (3, 0, 0), (3.1, 0, 0)])
        tree = build_octree(vertices)

        assert tree.find(0) is tree
        assert tree.find(2) is tree.find(1)
        assert tree.find(99) is None

    def test_insertion_order_dependence(self):
        """Clustering depends on insertion order (center drifts)."""
        a = Vertex(0, (0.0, 0.0, 0.0))
        b = Vertex(1, (0.3, 0.0, 0.0))
        c = Vertex(2, (0.6, 0.0, 0.0))

        first = build_octree([a, c, b])
        second = build_octree([b, c, a])

        assert set(first.inners) == {0, 1}
        assert set(second.inners) == {1, 2}

    def test_no_recentering_of_members(self):
        """Members stay in a node even after the center moves away."""
        node = OctreeNode(inner_distance=0.36)
        node.insert(Vertex(0, (0.0, 0.0, 0.0)))
        node.insert(Vertex(1, (0.36, 0.0, 0.0)))
        node.insert(Vertex(2, (0.5, 0.0, 0.0)))
        node.insert(Vertex(3, (0.6, 0.0, 0.0)))

        assert set(node.inners) == {0, 1, 2, 3}
        # vertex 0 is now outside the radius of the final center
        assert np.linalg.norm(node.center()) > 0.36

    def test_deep_chain_does_not_recurse(self):
        """Long chains of outer children are built without recursion limits."""
        vertices = make_vertices([(float(i), 0.0, 0.0) for i in range(1100)])
        tree = build_octree(vertices)

        assert tree.depth() == 1100
        assert tree.count() == 1100

    def test_duplicate_rejected(self):
        """build_octree refuses the same id twice."""
        v = Vertex(0, (0.0, 0.0, 0.0))
        with pytest.raises(DuplicateVertexError, match="inserted twice"):
            build_octree([v, v])

    def test_position_snapshot(self):
        """Moving a vertex after insertion does not change the tree."""
        v = Vertex(0, (1.0, 2.0, 3.0))
        node = OctreeNode()
        node.insert(v)
        v.position += 10.0

        assert np.allclose(node.center(), [1.0, 2.0, 3.0])


class TestCenterOfMass:
    """Tests for center of mass computation."""

    def test_mean_of_inners(self):
        """center() is the arithmetic mean of inner positions."""
        positions = [(0.0, 0.0, 0.0), (0.1, 0.0, 0.0), (0.0, 0.2, 0.0), (0.0, 0.0, 0.1)]
        node = OctreeNode()
        for v in make_vertices(positions):
            node.insert(v)

        assert len(node) == 4
        assert np.allclose(node.center(), np.mean(positions, axis=0), atol=1e-12)

    def test_center_sum(self):
        """center_sum tracks the sum of inner positions."""
        node = OctreeNode()
        node.insert(Vertex(0, (0.1, 0.1, 0.1)))
        node.insert(Vertex(1, (0.2, 0.0, 0.1)))
        assert np.allclose(node.center_sum, [0.3, 0.1, 0.2])

    def test_empty_center_raises(self):
        """center() on an empty node is an invariant violation."""
        with pytest.raises(InternalInvariantViolation):
            OctreeNode().center()


class TestOctreeEstimate:
    """Tests for the top-down force estimate."""

    def test_single_vertex_no_force(self):
        """A lone vertex feels nothing."""
        v = Vertex(0, (1.0, 1.0, 1.0))
        tree = build_octree([v])
        force = tree.estimate(v, np.zeros(3), repel)
        assert np.array_equal(force, np.zeros(3))

    def test_accumulates_in_place(self):
        """estimate() adds to the accumulator it is given."""
        vertices = make_vertices([(0, 0, 0), (2, 0, 0)])
        tree = build_octree(vertices)
        acc = np.array([1.0, 1.0, 1.0])

        result = tree.estimate(vertices[0], acc, repel)

        assert result is acc
        assert acc[1] == 1.0
        assert acc[0] < 1.0

    def test_exact_pair_symmetry(self):
        """Two members of the same cluster repel equally and oppositely."""
        vertices = make_vertices([(0.0, 0.0, 0.0), (0.2, 0.1, 0.0)])
        tree = build_octree(vertices)
        assert len(tree) == 2

        fa = tree.estimate(vertices[0], np.zeros(3), repel)
        fb = tree.estimate(vertices[1], np.zeros(3), repel)

        assert np.allclose(fa, -fb)
        assert fa[0] < 0

    def test_far_pair_symmetric(self):
        """Separate single-member clusters also act symmetrically."""
        vertices = make_vertices([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)])
        tree = build_octree(vertices)

        fa = tree.estimate(vertices[0], np.zeros(3), repel)
        fb = tree.estimate(vertices[1], np.zeros(3), repel)

        expected = 50.0 / (1.1 ** 2)
        assert fa[0] == pytest.approx(-expected)
        assert fb[0] == pytest.approx(expected)

    def test_cluster_scaled_by_size(self):
        """A foreign cluster acts as len(inners) masses at its center."""
        cluster = make_vertices([(0.0, 0.0, 0.0), (0.1, 0.0, 0.0), (0.2, 0.0, 0.0)])
        probe = Vertex(10, (5.0, 0.0, 0.0))
        tree = build_octree(cluster + [probe])
        assert len(tree) == 3

        force = tree.estimate(probe, np.zeros(3), repel)
        expected = repel(probe.position, np.array([0.1, 0.0, 0.0])) * 3
        assert np.allclose(force, expected)

    def test_linear_force_is_exact(self):
        """With a linear force law the estimate equals the exact sum."""
        rng = random.Random(11)
        vertices = make_vertices(
            [(rng.uniform(-3, 3), rng.uniform(-3, 3), rng.uniform(-3, 3)) for _ in range(60)]
        )
        tree = build_octree(vertices)
        assert tree.depth() > 1

        def linear(x1, x2):
            return x1 - x2

        for v in vertices:
            approx = tree.estimate(v, np.zeros(3), linear)
            exact = sum((v.position - o.position for o in vertices if o.id != v.id), np.zeros(3))
            assert np.allclose(approx, exact, atol=1e-9)

    def test_well_separated_clusters_close_to_exact(self):
        """Barnes-Hut estimate is accurate for distant tight clusters."""
        near = [(0.0, 0.0, 0.0), (0.1, 0.0, 0.0), (0.0, 0.1, 0.0), (0.0, 0.0, 0.1), (0.05, 0.05, 0.05)]
        # far cluster lies strictly above the root center on every axis
        far = [(x + 20.0, y + 20.0, z + 20.0) for x, y, z in near]
        vertices = make_vertices(near + far)
        tree = build_octree(vertices)

        assert sorted(tree.inners) == [0, 1, 2, 3, 4]
        assert set(tree.outers) == {Octant.RUI}
        assert sorted(tree.outers[Octant.RUI].inners) == [5, 6, 7, 8, 9]

        for v in vertices:
            approx = tree.estimate(v, np.zeros(3), repel)
            exact = exact_repulsion(vertices, v)
            assert np.allclose(approx, exact, rtol=1e-3, atol=1e-3)

    def test_cluster_straddling_octant_boundary_splits(self):
        """A tight group spanning the parent's octant boundaries is split across siblings."""
        near = [(0.0, 0.0, 0.0), (0.1, 0.0, 0.0), (0.0, 0.1, 0.0), (0.0, 0.0, 0.1), (0.05, 0.05, 0.05)]
        far = [(x + 20.0, y, z) for x, y, z in near]
        vertices = make_vertices(near + far)
        tree = build_octree(vertices)

        # root center is (0.03, 0.03, 0.03); far y and z straddle it
        assert np.allclose(tree.center(), [0.03, 0.03, 0.03])
        assert set(tree.outers) == {Octant.RDO, Octant.RUO, Octant.RDI, Octant.RUI}
        assert sorted(tree.outers[Octant.RDO].inners) == [5, 6]
        assert list(tree.outers[Octant.RUO].inners) == [7]
        assert list(tree.outers[Octant.RDI].inners) == [8]
        assert list(tree.outers[Octant.RUI].inners) == [9]

        # vertex 7 sees node [5, 6] as two masses at a nearby center
        approx = tree.estimate(vertices[7], np.zeros(3), repel)
        exact = exact_repulsion(vertices, vertices[7])
        assert not np.allclose(approx, exact, rtol=1e-3, atol=1e-3)
