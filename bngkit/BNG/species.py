from __future__ import annotations

import copy
import operator
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from .exceptions import UnknownSpeciesError


class Orientation(IntEnum):
    """Orientation of a surface complex relative to its membrane."""

    DOWN = -1
    NONE = 0
    UP = 1


@dataclass
class Cplx:
    """
    Complex instance: molecule types plus the spatial attributes of one copy.

    :param molecule_types: Names of the elementary molecules in the complex.
    :type molecule_types: Tuple[str, ...]
    :param orientation: Orientation for surface complexes.
    :type orientation: Orientation
    :param compartment_id: Compartment the complex is located in, if any.
    :type compartment_id: Optional[int]
    """

    molecule_types: Tuple[str, ...] = ()
    orientation: Orientation = Orientation.NONE
    compartment_id: Optional[int] = None

    def set_orientation(self, orientation: Orientation) -> None:
        self.orientation = Orientation(orientation)

    def set_compartment_id(self, compartment_id: Optional[int]) -> None:
        self.compartment_id = compartment_id

    def copy(self) -> "Cplx":
        return copy.deepcopy(self)

    def to_str(self) -> str:
        return ".".join(f"{m}()" for m in self.molecule_types)


@dataclass
class Species:
    """
    Canonical species template held by the :class:`SpeciesContainer`.

    :param id: Dense index of the species in the registry.
    :type id: int
    :param cplx: Structure shared by every instance of the species.
    :type cplx: Cplx
    :param name: Display name, defaults to the complex rendering.
    :type name: str
    """

    id: int
    cplx: Cplx
    name: str = ""
    instantiated: bool = False
    reactant_class_id: Optional[int] = None

    def was_instantiated(self) -> bool:
        return self.instantiated

    def set_was_instantiated(self, value: bool = True) -> None:
        self.instantiated = value

    def has_valid_reactant_class_id(self) -> bool:
        return self.reactant_class_id is not None

    def get_reactant_class_id(self) -> Optional[int]:
        return self.reactant_class_id

    def set_reactant_class_id(self, reactant_class_id: Optional[int]) -> None:
        self.reactant_class_id = reactant_class_id


class SpeciesContainer:
    """
    Registry of species with stable, dense integer ids.

    Species are never removed, so an id stays valid for the lifetime of the
    container.
    """

    def __init__(self) -> None:
        self._species: List[Optional[Species]] = []
        self._by_key: Dict[Tuple[Tuple[str, ...], Orientation, Optional[int]], int] = {}

    @staticmethod
    def _key(cplx: Cplx) -> Tuple[Tuple[str, ...], Orientation, Optional[int]]:
        return (tuple(cplx.molecule_types), cplx.orientation, cplx.compartment_id)

    def find_or_add(self, cplx: Cplx, name: Optional[str] = None) -> int:
        """
        Return the id of the species with this structure, registering it if new.

        :param cplx: Structure of the species; the registry keeps its own copy.
        :param name: Optional display name.
        :returns: Species id.
        """
        key = self._key(cplx)
        existing = self._by_key.get(key)
        if existing is not None:
            return existing

        species_id = len(self._species)
        stored = cplx.copy()
        self._species.append(
            Species(id=species_id, cplx=stored, name=name or stored.to_str())
        )
        self._by_key[key] = species_id
        return species_id

    def _index(self, species_id: object) -> Optional[int]:
        """Dense index for ``species_id``, or None if it names no species."""
        if isinstance(species_id, bool):
            return None
        try:
            idx = operator.index(species_id)
        except TypeError:
            return None
        if idx < 0 or idx >= len(self._species) or self._species[idx] is None:
            return None
        return idx

    def get(self, species_id: int) -> Species:
        """
        Return the species with ``species_id``.

        Any integer type is accepted (including numpy integers); ``bool`` is not.

        :raises UnknownSpeciesError: If the id was never assigned.
        """
        idx = self._index(species_id)
        if idx is None:
            raise UnknownSpeciesError(f"Unknown species id {species_id!r}.")
        return self._species[idx]

    def get_species_vector(self) -> List[Optional[Species]]:
        return self._species

    def __len__(self) -> int:
        return len(self._species)

    def __contains__(self, species_id: object) -> bool:
        return self._index(species_id) is not None
