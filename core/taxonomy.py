#!/usr/bin/env python3
"""
OntoUML stereotype taxonomy.

Closed vocabularies of class and association stereotypes together with the
meta-properties the validator reasons about (rigidity, identity) and the table
of legal direct subtyping. Parsing is total: unknown text maps to ``None``.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional


# ---------- Class stereotypes ----------
class ClassStereotype(Enum):
    # Sortals
    KIND = "kind"
    SUBKIND = "subkind"
    PHASE = "phase"
    ROLE = "role"
    COLLECTIVE = "collective"
    QUANTITY = "quantity"
    RELATOR = "relator"
    # Non-sortals
    CATEGORY = "category"
    PHASE_MIXIN = "phaseMixin"
    ROLE_MIXIN = "roleMixin"
    MIXIN = "mixin"
    # Aspects
    MODE = "mode"
    QUALITY = "quality"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["ClassStereotype"]:
        """Classify a stereotype literal; empty or unknown text yields None."""
        return _CLASS_LITERALS.get((text or "").strip())

    @property
    def is_identity_provider(self) -> bool:
        return self in IDENTITY_PROVIDERS

    @property
    def requires_identity(self) -> bool:
        return self not in NON_SORTALS

    @property
    def is_rigid(self) -> bool:
        return self in RIGID

    @property
    def is_anti_rigid(self) -> bool:
        return self in ANTI_RIGID

    def can_specialize(self, parent: "ClassStereotype") -> bool:
        """Whether a class of this stereotype may directly specialize ``parent``."""
        return parent in LEGAL_SUBTYPING[self]

    def __str__(self) -> str:
        return self.value


# ---------- Association stereotypes ----------
class AssociationStereotype(Enum):
    NONE = ""
    FORMAL = "formal"
    MEDIATION = "mediation"
    CHARACTERIZATION = "characterization"
    STRUCTURATION = "structuration"
    COMPONENT_OF = "componentOf"
    CONTAINMENT = "containment"
    MEMBER_OF = "memberOf"
    SUBCOLLECTION_OF = "subcollectionOf"
    SUBQUANTITY_OF = "subquantityOf"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["AssociationStereotype"]:
        """Classify an association stereotype; empty text is a plain association."""
        return _ASSOCIATION_LITERALS.get((text or "").strip())

    def __str__(self) -> str:
        return self.value


_CLASS_LITERALS: Dict[str, ClassStereotype] = {s.value: s for s in ClassStereotype}
_ASSOCIATION_LITERALS: Dict[str, AssociationStereotype] = {s.value: s for s in AssociationStereotype}

_S = ClassStereotype

IDENTITY_PROVIDERS: FrozenSet[ClassStereotype] = frozenset({
    _S.KIND, _S.COLLECTIVE, _S.QUANTITY, _S.RELATOR, _S.QUALITY, _S.MODE,
})
NON_SORTALS: FrozenSet[ClassStereotype] = frozenset({
    _S.CATEGORY, _S.MIXIN, _S.PHASE_MIXIN, _S.ROLE_MIXIN,
})
RIGID: FrozenSet[ClassStereotype] = frozenset({
    _S.KIND, _S.SUBKIND, _S.COLLECTIVE, _S.QUANTITY, _S.RELATOR,
    _S.CATEGORY, _S.MODE, _S.QUALITY,
})
ANTI_RIGID: FrozenSet[ClassStereotype] = frozenset({
    _S.ROLE, _S.PHASE, _S.PHASE_MIXIN, _S.ROLE_MIXIN,
})
ASPECTS: FrozenSet[ClassStereotype] = frozenset({_S.MODE, _S.QUALITY})

# Types that may be wholes or parts of functional complexes
FUNCTIONAL: FrozenSet[ClassStereotype] = frozenset({
    _S.KIND, _S.SUBKIND, _S.PHASE, _S.ROLE, _S.RELATOR,
    _S.CATEGORY, _S.MIXIN, _S.PHASE_MIXIN, _S.ROLE_MIXIN,
})

_MIXIN_PARENTS = frozenset({_S.CATEGORY, _S.MIXIN})
_SORTAL_PARENTS = frozenset({
    _S.KIND, _S.SUBKIND, _S.COLLECTIVE, _S.QUANTITY, _S.RELATOR,
    _S.CATEGORY, _S.MIXIN, _S.MODE, _S.QUALITY,
})

# child stereotype -> stereotypes it may directly specialize
LEGAL_SUBTYPING: Dict[ClassStereotype, FrozenSet[ClassStereotype]] = {
    _S.KIND: _MIXIN_PARENTS,
    _S.COLLECTIVE: _MIXIN_PARENTS,
    _S.QUANTITY: _MIXIN_PARENTS,
    _S.RELATOR: _MIXIN_PARENTS,
    _S.QUALITY: _MIXIN_PARENTS,
    _S.MODE: _MIXIN_PARENTS,
    _S.CATEGORY: _MIXIN_PARENTS,
    _S.MIXIN: _MIXIN_PARENTS,
    _S.SUBKIND: _SORTAL_PARENTS,
    _S.PHASE: _SORTAL_PARENTS | {_S.PHASE, _S.PHASE_MIXIN},
    _S.ROLE: _SORTAL_PARENTS | {_S.ROLE, _S.ROLE_MIXIN},
    _S.PHASE_MIXIN: frozenset({_S.MIXIN, _S.PHASE_MIXIN, _S.CATEGORY}),
    _S.ROLE_MIXIN: frozenset({_S.MIXIN, _S.ROLE_MIXIN, _S.CATEGORY, _S.PHASE_MIXIN}),
}


def valid_subtyping(child: ClassStereotype, parent: ClassStereotype) -> bool:
    return child.can_specialize(parent)


__all__ = [
    "ClassStereotype", "AssociationStereotype",
    "IDENTITY_PROVIDERS", "NON_SORTALS", "RIGID", "ANTI_RIGID", "ASPECTS",
    "FUNCTIONAL", "LEGAL_SUBTYPING", "valid_subtyping",
]
