from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .exceptions import UnknownCompartmentError
from .names import DEFAULT_COMPARTMENT_NAME


@dataclass(frozen=True)
class ComponentType:
    """
    Component of a molecule type together with its allowed states.

    :param name: Component name.
    :type name: str
    :param states: Allowed state labels, empty for a stateless component.
    :type states: Tuple[str, ...]
    """

    name: str
    states: Tuple[str, ...] = ()

    def to_str(self) -> str:
        if self.states:
            return "~".join((self.name,) + tuple(self.states))
        return self.name


@dataclass(frozen=True)
class MoleculeType:
    """
    Elementary molecule type template.

    :param name: Molecule type name.
    :type name: str
    :param diffusion_constant: Diffusion constant (um^2/s for volume types,
        um^2/s in the membrane plane for surface types).
    :type diffusion_constant: float
    :param components: Structural signature of the type.
    :type components: Tuple[ComponentType, ...]
    :param is_surf: True for molecules that live in a 2D compartment.
    :type is_surf: bool
    :param is_reactive_surface: True for the pseudo type backing a reactive
        surface (surface class); such types have no BNGL counterpart.
    :type is_reactive_surface: bool
    """

    name: str
    diffusion_constant: float = 0.0
    components: Tuple[ComponentType, ...] = ()
    is_surf: bool = False
    is_reactive_surface: bool = False

    @property
    def is_vol(self) -> bool:
        return not self.is_surf and not self.is_reactive_surface

    def to_str(self) -> str:
        """Render as a BNGL molecule type declaration, e.g. ``A(s~0~1,b)``."""
        return f"{self.name}({','.join(c.to_str() for c in self.components)})"


@dataclass
class Compartment:
    """
    Nested 3D (volume) or 2D (surface) region.

    :param id: Compartment id, unique within a model.
    :type id: int
    :param name: Compartment name.
    :type name: str
    :param is_3d: True for volume compartments, False for surfaces.
    :type is_3d: bool
    :param volume_or_area: Volume in um^3 (3D) or area in um^2 (2D).
    :type volume_or_area: float
    :param parent_id: Id of the enclosing compartment, ``None`` for roots.
    :type parent_id: Optional[int]
    :param children_ids: Ids of directly nested compartments, in insertion order.
    :type children_ids: List[int]
    """

    id: int
    name: str
    is_3d: bool = True
    volume_or_area: float = 0.0
    parent_id: Optional[int] = None
    children_ids: List[int] = field(default_factory=list)

    @property
    def is_default(self) -> bool:
        return self.name == DEFAULT_COMPARTMENT_NAME

    @property
    def has_parent(self) -> bool:
        return self.parent_id is not None


@dataclass(frozen=True)
class ReactionRule:
    """
    Reaction rule as seen by the exporter.

    The pattern itself is opaque here: participants are referenced by
    molecule type name and only used to classify the rule.

    :param name: Optional rule name.
    :type name: str
    :param base_rate_constant: Rate constant in the spatial simulator's units
        (1/s for unimolecular, M^-1 s^-1 for volume bimolecular and
        um^2 N^-1 s^-1 for surface bimolecular rules).
    :type base_rate_constant: float
    :param reactants: Molecule type names of the reactants.
    :type reactants: Tuple[str, ...]
    :param products: Molecule type names of the products.
    :type products: Tuple[str, ...]
    :param pattern: BNGL rendering of the rule; generated from the
        participants when omitted.
    :type pattern: Optional[str]
    """

    name: str = ""
    base_rate_constant: float = 0.0
    reactants: Tuple[str, ...] = ()
    products: Tuple[str, ...] = ()
    pattern: Optional[str] = None

    @property
    def num_reactants(self) -> int:
        return len(self.reactants)

    def to_str(self) -> str:
        if self.pattern is not None:
            return self.pattern
        left = " + ".join(f"{r}()" for r in self.reactants) or "0"
        right = " + ".join(f"{p}()" for p in self.products) or "0"
        return f"{left} -> {right}"

    def __repr__(self) -> str:
        return f"ReactionRule({self.to_str()!r}, k={self.base_rate_constant})"


class BNGData:
    """
    Model store: molecule types, compartments and reaction rules.

    The store is filled once while the model is built and only read
    afterwards by :class:`~bngkit.BNG.engine.BNGEngine`.

    :param elem_mol_types: Molecule types in declaration order.
    :param compartments: Compartments in declaration order.
    :param rxn_rules: Reaction rules in declaration order.
    """

    def __init__(
        self,
        elem_mol_types: Optional[List[MoleculeType]] = None,
        compartments: Optional[List[Compartment]] = None,
        rxn_rules: Optional[List[ReactionRule]] = None,
    ) -> None:
        self._elem_mol_types: List[MoleculeType] = list(elem_mol_types or [])
        self._compartments: List[Compartment] = list(compartments or [])
        self._rxn_rules: List[ReactionRule] = list(rxn_rules or [])

    # -------------------------
    # Construction
    # -------------------------
    def add_elem_mol_type(self, mt: MoleculeType) -> MoleculeType:
        self._elem_mol_types.append(mt)
        return mt

    def add_rxn_rule(self, rule: ReactionRule) -> ReactionRule:
        self._rxn_rules.append(rule)
        return rule

    def add_compartment(self, comp: Compartment) -> Compartment:
        """Append a compartment as is; links are taken from the object."""
        self._compartments.append(comp)
        return comp

    def add_child_compartment(
        self, parent_id: Optional[int], comp: Compartment
    ) -> Compartment:
        """
        Append ``comp`` and link it under ``parent_id`` (``None`` for a root).

        Both sides of the link are updated, so the parent's children list
        and the child's parent id stay consistent.

        :raises UnknownCompartmentError: If ``parent_id`` is not in the model.
        """
        if parent_id is not None:
            parent = self.get_compartment(parent_id)
            parent.children_ids.append(comp.id)
        comp.parent_id = parent_id
        self._compartments.append(comp)
        return comp

    # -------------------------
    # Queries
    # -------------------------
    def get_elem_mol_types(self) -> List[MoleculeType]:
        return self._elem_mol_types

    def get_compartments(self) -> List[Compartment]:
        return self._compartments

    def get_rxn_rules(self) -> List[ReactionRule]:
        return self._rxn_rules

    def find_elem_mol_type(self, name: str) -> Optional[MoleculeType]:
        for mt in self._elem_mol_types:
            if mt.name == name:
                return mt
        return None

    def get_compartment(self, compartment_id: int) -> Compartment:
        for comp in self._compartments:
            if comp.id == compartment_id:
                return comp
        raise UnknownCompartmentError(f"Unknown compartment id {compartment_id}.")

    def find_compartment_by_name(self, name: str) -> Optional[Compartment]:
        for comp in self._compartments:
            if comp.name == name:
                return comp
        return None

    def compartment_index(self) -> Dict[int, Compartment]:
        return {c.id: c for c in self._compartments}

    def __repr__(self) -> str:
        return (
            f"BNGData(n_mol_types={len(self._elem_mol_types)}, "
            f"n_compartments={len(self._compartments)}, "
            f"n_rxn_rules={len(self._rxn_rules)})"
        )
