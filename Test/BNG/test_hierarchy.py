import sys
import unittest

import networkx as nx

from bngkit.BNG.exceptions import CompartmentHierarchyError, UnknownCompartmentError
from bngkit.BNG.hierarchy import compartment_graph, order_compartments
from bngkit.BNG.model import BNGData, Compartment


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def build_chain() -> BNGData:
    """A (root) > B > C, declared in reverse order."""
    a = Compartment(0, "A", volume_or_area=10.0, children_ids=[1])
    b = Compartment(1, "B", is_3d=False, volume_or_area=5.0, parent_id=0, children_ids=[2])
    c = Compartment(2, "C", volume_or_area=1.0, parent_id=1)
    return BNGData(compartments=[c, b, a])


def build_two_trees() -> BNGData:
    """
    EC
    ├── PM
    │   └── CP
    └── PM2
        └── CP2
    default
    """
    data = BNGData()
    data.add_child_compartment(None, Compartment(0, "EC", volume_or_area=100.0))
    data.add_child_compartment(0, Compartment(1, "PM", is_3d=False, volume_or_area=6.0))
    data.add_child_compartment(0, Compartment(2, "PM2", is_3d=False, volume_or_area=3.0))
    data.add_child_compartment(1, Compartment(3, "CP", volume_or_area=1.0))
    data.add_child_compartment(2, Compartment(4, "CP2", volume_or_area=0.5))
    data.add_child_compartment(None, Compartment(5, "default"))
    return data


def names(compartments) -> list:
    return [c.name for c in compartments]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestOrderCompartments(unittest.TestCase):
    def test_chain_order(self):
        ordered = order_compartments(build_chain().get_compartments())
        self.assertEqual(names(ordered), ["A", "B", "C"])

    def test_children_in_insertion_order(self):
        ordered = order_compartments(build_two_trees().get_compartments())
        self.assertEqual(names(ordered), ["EC", "PM", "CP", "PM2", "CP2", "default"])

    def test_parent_always_first(self):
        data = build_two_trees()
        ordered = order_compartments(data.get_compartments())
        position = {c.id: i for i, c in enumerate(ordered)}
        for c in ordered:
            if c.parent_id is not None:
                self.assertLess(position[c.parent_id], position[c.id])

    def test_empty(self):
        self.assertEqual(order_compartments([]), [])

    def test_deep_hierarchy_does_not_recurse(self):
        depth = sys.getrecursionlimit() + 100
        comps = []
        for i in range(depth):
            comps.append(
                Compartment(
                    i,
                    f"c{i}",
                    parent_id=i - 1 if i else None,
                    children_ids=[i + 1] if i + 1 < depth else [],
                )
            )
        ordered = order_compartments(comps)
        self.assertEqual(len(ordered), depth)
        self.assertEqual(ordered[-1].name, f"c{depth - 1}")

    def test_cycle_raises(self):
        a = Compartment(0, "A", parent_id=1, children_ids=[1])
        b = Compartment(1, "B", parent_id=0, children_ids=[0])
        with self.assertRaises(CompartmentHierarchyError):
            order_compartments([a, b])

    def test_orphan_raises(self):
        a = Compartment(0, "A")
        b = Compartment(1, "B", parent_id=0)  # A does not list B
        with self.assertRaises(CompartmentHierarchyError):
            order_compartments([a, b])

    def test_inconsistent_child_raises(self):
        a = Compartment(0, "A", children_ids=[2])
        b = Compartment(1, "B", children_ids=[2])
        c = Compartment(2, "C", parent_id=0)
        with self.assertRaises(CompartmentHierarchyError):
            order_compartments([a, b, c])

    def test_unknown_child_raises(self):
        with self.assertRaises(CompartmentHierarchyError):
            order_compartments([Compartment(0, "A", children_ids=[7])])

    def test_duplicate_id_raises(self):
        with self.assertRaises(CompartmentHierarchyError):
            order_compartments([Compartment(0, "A"), Compartment(0, "B")])


class TestAddChildCompartment(unittest.TestCase):
    def test_links_both_sides(self):
        data = build_two_trees()
        pm = data.find_compartment_by_name("PM")
        self.assertEqual(pm.parent_id, 0)
        self.assertEqual(pm.children_ids, [3])
        self.assertEqual(data.get_compartment(0).children_ids, [1, 2])

    def test_find_by_name(self):
        data = build_two_trees()
        self.assertEqual(data.find_compartment_by_name("CP2").id, 4)
        self.assertIsNone(data.find_compartment_by_name("missing"))

    def test_unknown_parent_raises(self):
        data = BNGData()
        with self.assertRaises(UnknownCompartmentError):
            data.add_child_compartment(9, Compartment(1, "X"))
        with self.assertRaises(KeyError):
            data.add_child_compartment(9, Compartment(1, "X"))
        # nothing was added
        self.assertEqual(data.get_compartments(), [])


class TestCompartmentGraph(unittest.TestCase):
    def test_graph_is_forest(self):
        G = compartment_graph(build_two_trees().get_compartments())
        self.assertIsInstance(G, nx.DiGraph)
        self.assertEqual(G.number_of_nodes(), 6)
        self.assertEqual(G.number_of_edges(), 4)
        self.assertTrue(nx.is_forest(G))
        self.assertEqual(list(G.successors(0)), [1, 2])
        self.assertEqual(G.nodes[1]["name"], "PM")
        self.assertFalse(G.nodes[1]["is_3d"])


if __name__ == "__main__":
    unittest.main()
