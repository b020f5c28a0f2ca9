from __future__ import annotations

from typing import Dict, List, Sequence, Set

import networkx as nx

from .exceptions import CompartmentHierarchyError
from .model import Compartment


__all__ = ["order_compartments", "compartment_graph"]


def _index_by_id(compartments: Sequence[Compartment]) -> Dict[int, Compartment]:
    index: Dict[int, Compartment] = {}
    for comp in compartments:
        if comp.id in index:
            raise CompartmentHierarchyError(
                f"Duplicate compartment id {comp.id} "
                f"({index[comp.id].name!r} and {comp.name!r})."
            )
        index[comp.id] = comp
    return index


def order_compartments(compartments: Sequence[Compartment]) -> List[Compartment]:
    """
    Order compartments so that every parent precedes its descendants.

    Roots are taken in input order; below each root the traversal is a
    depth-first pre-order where children follow the order of
    ``children_ids``. An explicit stack is used, so deep hierarchies do not
    hit the recursion limit.

    :param compartments: All compartments of a model.
    :type compartments: Sequence[Compartment]
    :returns: The same compartments in emission order.
    :rtype: List[Compartment]
    :raises CompartmentHierarchyError: If ids are duplicated, a child id is
        unknown, parent and children links disagree, or some compartments
        are not reachable from a root (cycle or orphan).
    """
    index = _index_by_id(compartments)

    ordered: List[Compartment] = []
    visited: Set[int] = set()

    for root in compartments:
        if root.has_parent or root.id in visited:
            continue

        stack = [root.id]
        while stack:
            comp_id = stack.pop()
            if comp_id in visited:
                continue
            comp = index[comp_id]
            visited.add(comp_id)
            ordered.append(comp)

            for child_id in comp.children_ids:
                child = index.get(child_id)
                if child is None:
                    raise CompartmentHierarchyError(
                        f"Compartment {comp.name!r} references unknown child id {child_id}."
                    )
                if child.parent_id != comp.id:
                    raise CompartmentHierarchyError(
                        f"Compartment {child.name!r} is listed as a child of "
                        f"{comp.name!r} but its parent id is {child.parent_id}."
                    )
            # reversed so that the first child is popped first
            stack.extend(reversed(comp.children_ids))

    if not (len(ordered) == len(visited) == len(compartments)):
        unreachable = sorted(c.name for c in compartments if c.id not in visited)
        raise CompartmentHierarchyError(
            "Compartments do not form a forest; not reachable from any root: "
            f"{unreachable}."
        )
    return ordered


def compartment_graph(compartments: Sequence[Compartment]) -> nx.DiGraph:
    """
    Build a directed parent -> child graph of the compartment forest.

    Nodes are compartment ids with ``name``, ``is_3d`` and ``volume_or_area``
    attributes; edges follow ``children_ids`` in insertion order.

    :param compartments: All compartments of a model.
    :returns: Directed graph of the hierarchy.
    :rtype: networkx.DiGraph
    """
    G = nx.DiGraph()
    for comp in compartments:
        G.add_node(
            comp.id,
            name=comp.name,
            is_3d=comp.is_3d,
            volume_or_area=comp.volume_or_area,
        )
    for comp in compartments:
        for child_id in comp.children_ids:
            G.add_edge(comp.id, child_id)
    return G
