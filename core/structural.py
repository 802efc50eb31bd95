#!/usr/bin/env python3
"""
Structural (well-formedness) validation of OntoUML models.

A first pass visits elements in traversal order, checking stereotypes,
subtyping legality, multiplicities and relation endpoints while accumulating
identity intervals and mediation bounds per class. A second pass over the
classes turns the accumulated figures into identity, role, relator, phase,
mixin and aspect errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Set

from uml_types import ElementId
from core.uml_model import UmlClass, UmlGeneralization, UmlAssociation
from core.graph import ModelGraph, ClassInfo, GeneralizationInfo, AssociationInfo
from core.multiplicity import Multiplicity
from core.taxonomy import (
    ClassStereotype, AssociationStereotype,
    ASPECTS, FUNCTIONAL, NON_SORTALS,
)
from core.problems import ValidationError, ValidationProblem, ErrorKind, RelationDefect

logger = logging.getLogger(__name__)

_S = ClassStereotype
_A = AssociationStereotype


# ---------- Relation rules ----------
class EndShape(Enum):
    ANY = "any"
    AT_LEAST_ONE = "at least one"
    EXACTLY_ONE = "exactly one"

    def accepts(self, mult: Multiplicity) -> bool:
        if self is EndShape.AT_LEAST_ONE:
            return mult.lower >= 1
        if self is EndShape.EXACTLY_ONE:
            return mult.is_exactly_one
        return True


@dataclass(frozen=True)
class RelationRule:
    source_stereotypes: Optional[FrozenSet[ClassStereotype]] = None  # None: classes or instances
    target_stereotypes: Optional[FrozenSet[ClassStereotype]] = None
    source_shape: EndShape = EndShape.ANY
    target_shape: EndShape = EndShape.ANY


_ANY_CLASS = frozenset(ClassStereotype)

RELATION_RULES: Dict[AssociationStereotype, RelationRule] = {
    _A.MEDIATION: RelationRule(
        source_shape=EndShape.AT_LEAST_ONE, target_shape=EndShape.AT_LEAST_ONE),
    _A.CHARACTERIZATION: RelationRule(
        source_stereotypes=_ANY_CLASS, target_stereotypes=ASPECTS,
        source_shape=EndShape.EXACTLY_ONE, target_shape=EndShape.AT_LEAST_ONE),
    _A.STRUCTURATION: RelationRule(
        source_stereotypes=frozenset({_S.QUALITY}), target_stereotypes=ASPECTS,
        target_shape=EndShape.EXACTLY_ONE),
    _A.COMPONENT_OF: RelationRule(
        source_stereotypes=FUNCTIONAL, target_stereotypes=FUNCTIONAL,
        target_shape=EndShape.AT_LEAST_ONE),
    _A.MEMBER_OF: RelationRule(
        source_stereotypes=frozenset({_S.COLLECTIVE}),
        target_stereotypes=FUNCTIONAL | {_S.COLLECTIVE},
        target_shape=EndShape.AT_LEAST_ONE),
    _A.SUBCOLLECTION_OF: RelationRule(
        source_stereotypes=frozenset({_S.COLLECTIVE}),
        target_stereotypes=frozenset({_S.COLLECTIVE}),
        target_shape=EndShape.EXACTLY_ONE),
    _A.CONTAINMENT: RelationRule(
        source_stereotypes=FUNCTIONAL, target_stereotypes=frozenset({_S.QUANTITY}),
        target_shape=EndShape.AT_LEAST_ONE),
    _A.SUBQUANTITY_OF: RelationRule(
        source_stereotypes=frozenset({_S.QUANTITY}),
        target_stereotypes=frozenset({_S.QUANTITY}),
        source_shape=EndShape.EXACTLY_ONE, target_shape=EndShape.EXACTLY_ONE),
}


# ---------- Identity interval ----------
@dataclass
class IdentityInterval:
    """Bounds on the number of identity providers a class inherits."""
    minimum: int = 0
    maximum: int = 0

    def add(self, minimum: int, maximum: int) -> None:
        self.minimum += minimum
        self.maximum += maximum

    @property
    def is_exactly_one(self) -> bool:
        return self.minimum == 1 and self.maximum == 1

    def __str__(self) -> str:
        return f"{self.minimum}..{self.maximum}"


def generalization_identity_weight(targets: List[Optional[ClassStereotype]],
                                   is_disjoint: bool, is_covering: bool,
                                   is_singleton: bool) -> IdentityInterval:
    """Identity providers one generalization passes on to each of its sources."""
    providers = sum(
        1 for st in targets
        if st is not None and (st.is_identity_provider or st.requires_identity)
    )
    if is_disjoint or is_singleton:
        all_provide = bool(targets) and providers == len(targets)
        return IdentityInterval(1 if all_provide else 0, min(providers, 1))
    if is_covering:
        return IdentityInterval(min(providers, 1), providers)
    return IdentityInterval(0, providers + 1)


# ---------- Validator ----------
class StructuralValidator:
    def __init__(self, graph: ModelGraph) -> None:
        self.graph = graph
        self.problems: List[ValidationProblem] = []
        self.identity: Dict[ElementId, IdentityInterval] = {}
        self.mediation_bounds: Dict[ElementId, int] = {}
        self.characterized: Set[ElementId] = set()

    def validate(self) -> List[ValidationProblem]:
        self.problems = []
        self.identity = {class_id: IdentityInterval() for class_id in self.graph.classes}
        self.mediation_bounds = {class_id: 0 for class_id in self.graph.classes}
        self.characterized = set()

        for element in self.graph.model.walk():
            if isinstance(element, UmlClass):
                self._check_class(self.graph.classes[element.id])
            elif isinstance(element, UmlGeneralization):
                self._check_generalization(self.graph.generalizations[element.id])
            elif isinstance(element, UmlAssociation):
                self._check_association(self.graph.associations[element.id])

        for info in self.graph.classes.values():
            self._check_classifier(info)

        logger.debug("Structural validation found %d errors", len(self.problems))
        return self.problems

    def _error(self, element_id: ElementId, kind: ErrorKind, message: str,
               defect: Optional[RelationDefect] = None) -> None:
        self.problems.append(ValidationError(element_id, kind, message, defect))

    # ---------- First pass ----------
    def _check_class(self, info: ClassInfo) -> None:
        if info.stereotype is None:
            text = info.element.stereotype.strip()
            if text:
                message = f"«{text}» is not a valid class stereotype"
            else:
                message = "class has no stereotype"
            self._error(info.id, ErrorKind.INVALID_STEREOTYPE, message)
            return
        if info.stereotype.is_identity_provider:
            self.identity[info.id].add(1, 1)

    def _check_generalization(self, info: GeneralizationInfo) -> None:
        if info.dangling:
            self._error(info.id, ErrorKind.DANGLING_REFERENCE,
                        f"generalization references missing classes: {', '.join(info.dangling)}")

        for source in info.sources:
            source_st = self.graph.stereotype_of(source)
            for target in info.targets:
                target_st = self.graph.stereotype_of(target)
                if source_st is None or target_st is None:
                    continue
                if not source_st.can_specialize(target_st):
                    self._error(info.id, ErrorKind.INVALID_SUBTYPING,
                                f"«{source_st}» cannot be subtype of «{target_st}»")

        weight = generalization_identity_weight(
            [self.graph.stereotype_of(t) for t in info.targets],
            info.is_disjoint, info.is_covering, info.is_singleton,
        )
        for source in info.sources:
            self.identity[source].add(weight.minimum, weight.maximum)

    def _check_association(self, info: AssociationInfo) -> None:
        if info.dangling:
            self._error(info.id, ErrorKind.DANGLING_REFERENCE,
                        f"association references missing classifiers: {', '.join(info.dangling)}")

        if info.stereotype is None:
            self._error(info.id, ErrorKind.INVALID_STEREOTYPE,
                        f"«{info.element.stereotype.strip()}» is not a valid association stereotype")
            return

        ends_valid = True
        for end, text, mult in (
            ("source", info.element.source_multiplicity, info.source_multiplicity),
            ("target", info.element.target_multiplicity, info.target_multiplicity),
        ):
            if mult is None:
                ends_valid = False
                if text.strip():
                    message = f"{end} multiplicity '{text.strip()}' cannot be parsed"
                else:
                    message = f"{end} multiplicity is missing"
                self._error(info.id, ErrorKind.INVALID_RELATION, message, RelationDefect.MULTIPLICITIES)
            elif not mult.is_consistent:
                ends_valid = False
                self._error(info.id, ErrorKind.INVALID_RELATION,
                            f"{end} multiplicity upper bound is lower than its lower bound ({text.strip()})",
                            RelationDefect.MULTIPLICITIES)

        rule = RELATION_RULES.get(info.stereotype)
        if rule is not None:
            if ends_valid:
                self._check_shapes(info, rule)
            if not info.dangling:
                self._check_endpoints(info, rule)

        if info.stereotype == _A.MEDIATION:
            source_lower = info.source_multiplicity.lower if info.source_multiplicity else 0
            target_lower = info.target_multiplicity.lower if info.target_multiplicity else 0
            if info.source_is_class:
                self.mediation_bounds[info.source] += target_lower
            if info.target_is_class:
                self.mediation_bounds[info.target] += source_lower
        elif info.stereotype == _A.CHARACTERIZATION and info.target_is_class:
            self.characterized.add(info.target)

    def _check_shapes(self, info: AssociationInfo, rule: RelationRule) -> None:
        for end, shape, mult in (
            ("source", rule.source_shape, info.source_multiplicity),
            ("target", rule.target_shape, info.target_multiplicity),
        ):
            if not shape.accepts(mult):
                self._error(info.id, ErrorKind.INVALID_RELATION,
                            f"«{info.stereotype}» requires {shape.value} on the {end} end (found {mult})",
                            RelationDefect.MULTIPLICITIES)

    def _check_endpoints(self, info: AssociationInfo, rule: RelationRule) -> None:
        for end, allowed, end_id, is_class in (
            ("source", rule.source_stereotypes, info.source, info.source_is_class),
            ("target", rule.target_stereotypes, info.target, info.target_is_class),
        ):
            if allowed is None:
                continue
            if is_class and self.graph.has_stereotype_in_lineage(end_id, allowed):
                continue
            found = self.graph.stereotype_of(end_id) if is_class else None
            expected = ", ".join(sorted(f"«{s}»" for s in allowed))
            self._error(info.id, ErrorKind.INVALID_RELATION,
                        f"«{info.stereotype}» {end} must be one of {expected} (found «{found or ''}»)",
                        RelationDefect.ENDPOINTS)

    # ---------- Second pass ----------
    def _check_classifier(self, info: ClassInfo) -> None:
        st = info.stereotype
        if st is None:
            return

        interval = self.identity[info.id]
        if st.requires_identity and not interval.is_exactly_one:
            self._error(info.id, ErrorKind.INVALID_IDENTITY,
                        f"element does not have exactly one identity provider (found {interval})")

        if st == _S.ROLE and self.mediation_lower_bound(info.id) == 0:
            self._error(info.id, ErrorKind.INVALID_ROLE,
                        "role is not bound to any relator through a mediation")

        if (not info.is_abstract
                and self.graph.has_stereotype_in_lineage(info.id, frozenset({_S.RELATOR}))):
            bound = self.mediation_lower_bound(info.id)
            if bound < 2:
                self._error(info.id, ErrorKind.INVALID_RELATOR,
                            f"relator must mediate at least two individuals (found {bound})")

        if st == _S.PHASE and not any(
            self.graph.generalizations[g].is_disjoint and self.graph.generalizations[g].is_covering
            for g in info.parent_generalizations
        ):
            self._error(info.id, ErrorKind.INVALID_PHASE,
                        "phase is not part of a disjoint and complete generalization set")

        if st in NON_SORTALS and not info.is_abstract:
            self._error(info.id, ErrorKind.INVALID_NONABSTRACT_MIXIN,
                        f"«{st}» must be abstract")

        if st in ASPECTS and info.id not in self.characterized:
            self._error(info.id, ErrorKind.INVALID_MISSING_CHARACTERIZATION,
                        f"«{st}» does not characterize any type")

    def mediation_lower_bound(self, class_id: ElementId) -> int:
        """Sum of opposing mediation lower bounds, own and inherited."""
        return self._mediation_lower_bound(class_id, set())

    def _mediation_lower_bound(self, class_id: ElementId, visited: Set[ElementId]) -> int:
        visited.add(class_id)
        try:
            total = self.mediation_bounds.get(class_id, 0)
            for gen_id in self.graph.classes[class_id].parent_generalizations:
                gen = self.graph.generalizations[gen_id]
                values = [
                    self._mediation_lower_bound(t, visited)
                    for t in gen.targets if t not in visited
                ]
                if not values:
                    continue
                total += min(values) if gen.is_disjoint else sum(values)
            return total
        finally:
            visited.discard(class_id)


def validate_structure(graph: ModelGraph) -> List[ValidationProblem]:
    return StructuralValidator(graph).validate()


__all__ = [
    "EndShape", "RelationRule", "RELATION_RULES", "IdentityInterval",
    "generalization_identity_weight", "StructuralValidator", "validate_structure",
]
