from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from .model import BNGData, ReactionRule
from .species import Species

logger = logging.getLogger(__name__)


class RxnClass(Enum):
    """Geometric/arity classification of a reaction rule."""

    UNIMOL = "unimol"
    BIMOL_VOL = "bimol_vol"
    BIMOL_SURF = "bimol_surf"
    REACTIVE_SURFACE = "reactive_surface"
    OTHER = "other"

    @property
    def is_exportable(self) -> bool:
        return self in (RxnClass.UNIMOL, RxnClass.BIMOL_VOL, RxnClass.BIMOL_SURF)


def classify_rule(rule: ReactionRule, data: BNGData) -> RxnClass:
    """
    Classify ``rule`` from the molecule types of its reactants.

    Reactive-surface participation wins over arity; rules that reference
    unknown molecule types or have no reactants or more than two are
    :attr:`RxnClass.OTHER`.

    :param rule: Rule to classify.
    :type rule: ReactionRule
    :param data: Model store used to look up molecule types.
    :type data: BNGData
    :returns: Classification of the rule.
    :rtype: RxnClass
    """
    mol_types = [data.find_elem_mol_type(name) for name in rule.reactants]

    if any(mt is not None and mt.is_reactive_surface for mt in mol_types):
        return RxnClass.REACTIVE_SURFACE
    if any(mt is None for mt in mol_types):
        return RxnClass.OTHER

    if len(mol_types) == 1:
        return RxnClass.UNIMOL
    if len(mol_types) == 2:
        if any(mt.is_vol for mt in mol_types):
            return RxnClass.BIMOL_VOL
        return RxnClass.BIMOL_SURF
    return RxnClass.OTHER


class RxnContainer:
    """
    Registry of finalized reaction rules.

    Every rule is classified once when it is added, and the classification
    is cached next to it. Rules with the same (sorted) reactants share a
    reaction class; species that can take part in the same set of rules
    share a reactant class.

    :param data: Model store the rules belong to.
    :type data: BNGData
    """

    def __init__(self, data: BNGData) -> None:
        self.data = data
        self._rules: List[ReactionRule] = []
        self._rxn_class_of_rule: List[RxnClass] = []
        self._rule_class_ids: Dict[Tuple[str, ...], int] = {}
        self._reactant_class_ids: Dict[FrozenSet[int], int] = {}

    def add_and_finalize(self, rule: ReactionRule) -> int:
        """
        Register ``rule`` and cache its classification.

        :returns: Index of the rule in :meth:`get_rxn_rules_vector`.
        """
        rxn_class = classify_rule(rule, self.data)
        key = tuple(sorted(rule.reactants))
        if key not in self._rule_class_ids:
            self._rule_class_ids[key] = len(self._rule_class_ids)

        self._rules.append(rule)
        self._rxn_class_of_rule.append(rxn_class)
        logger.debug("Registered rule %r as %s", rule.to_str(), rxn_class.value)
        return len(self._rules) - 1

    # -------------------------
    # Queries
    # -------------------------
    def get_rxn_rules_vector(self) -> List[ReactionRule]:
        return self._rules

    def get_rxn_class(self, rule_index: int) -> RxnClass:
        return self._rxn_class_of_rule[rule_index]

    def get_num_rxn_classes(self) -> int:
        return len(self._rule_class_ids)

    def get_num_existing_reactant_classes(self) -> int:
        return len(self._reactant_class_ids)

    def get_or_assign_reactant_class(self, species: Species) -> Optional[int]:
        """
        Compute the reactant class of ``species`` and store it on the species.

        :returns: Reactant class id, or ``None`` if the species is not a
            reactant of any registered rule.
        """
        names = set(species.cplx.molecule_types)
        rule_ids = frozenset(
            i for i, rule in enumerate(self._rules) if names.intersection(rule.reactants)
        )
        if not rule_ids:
            species.set_reactant_class_id(None)
            return None

        if rule_ids not in self._reactant_class_ids:
            self._reactant_class_ids[rule_ids] = len(self._reactant_class_ids)
        class_id = self._reactant_class_ids[rule_ids]
        species.set_reactant_class_id(class_id)
        return class_id

    def __len__(self) -> int:
        return len(self._rules)
