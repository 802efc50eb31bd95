#!/usr/bin/env python3
"""
OntoUML anti-pattern detection.

Each detector is an independent read-only pass over a shared ``ModelGraph``
and reports warnings in traversal order. Detectors never depend on each
other's results, so any subset can be enabled.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Set

from uml_types import ElementId
from core.graph import ModelGraph
from core.taxonomy import ClassStereotype, AssociationStereotype, NON_SORTALS
from core.problems import AntiPattern, AntiPatternKind, ValidationProblem

logger = logging.getLogger(__name__)

_S = ClassStereotype
_A = AssociationStereotype
_RELATOR = frozenset({_S.RELATOR})

Detector = Callable[["AntiPatternValidator"], List[AntiPattern]]


class AntiPatternValidator:
    def __init__(self, graph: ModelGraph,
                 enabled: Optional[Iterable[AntiPatternKind]] = None) -> None:
        self.graph = graph
        self.enabled = set(enabled) if enabled is not None else set(AntiPatternKind)

    def validate(self) -> List[ValidationProblem]:
        problems: List[ValidationProblem] = []
        for kind, detector in DETECTORS.items():
            if kind not in self.enabled:
                continue
            found = detector(self)
            if found:
                logger.debug("%s: %d occurrence(s)", kind.value, len(found))
            problems.extend(found)
        return problems

    # ---------- Detectors ----------
    def detect_bin_over(self) -> List[AntiPattern]:
        """Binary relation whose ends may share instances."""
        found: List[AntiPattern] = []
        g = self.graph
        for assoc in g.associations.values():
            if not (assoc.source_is_class and assoc.target_is_class):
                continue
            s, t = assoc.source, assoc.target
            if s == t or g.is_subtype_of(s, t) or g.is_subtype_of(t, s):
                found.append(AntiPattern(assoc.id, AntiPatternKind.BIN_OVER))
                continue
            s_st, t_st = g.stereotype_of(s), g.stereotype_of(t)
            if s_st is None or t_st is None:
                continue
            if s_st in NON_SORTALS or t_st in NON_SORTALS:
                overlapping = not (g.are_disjoint_upwards(s, t) and g.are_disjoint_downwards(s, t))
            else:
                overlapping = not g.are_disjoint_upwards(s, t)
            if overlapping:
                found.append(AntiPattern(assoc.id, AntiPatternKind.BIN_OVER))
        return found

    def detect_dec_int(self) -> List[AntiPattern]:
        """Deceiving intersection: subtype of more than one classification axis."""
        weights: Dict[ElementId, int] = {class_id: 0 for class_id in self.graph.classes}
        for gen in self.graph.generalizations.values():
            if gen.is_disjoint:
                weight = 1
            else:
                weight = sum(1 for t in gen.targets if not self.graph.classes[t].is_abstract)
            for source in gen.sources:
                weights[source] += weight
        return [AntiPattern(class_id, AntiPatternKind.DEC_INT)
                for class_id, weight in weights.items() if weight > 1]

    def detect_dep_phase(self) -> List[AntiPattern]:
        """Phase defined by a relational dependency."""
        mediations = self.graph.count_associations(_A.MEDIATION)
        return [AntiPattern(info.id, AntiPatternKind.DEP_PHASE)
                for info in self.graph.classes_with([_S.PHASE]) if mediations[info.id] >= 1]

    def detect_free_role(self) -> List[AntiPattern]:
        mediations = self.graph.count_associations(_A.MEDIATION)
        return [AntiPattern(info.id, AntiPatternKind.FREE_ROLE)
                for info in self.graph.classes_with([_S.ROLE]) if mediations[info.id] == 0]

    def detect_gs_rig(self) -> List[AntiPattern]:
        """Generalization set mixing rigid and anti-rigid subtypes."""
        found: List[AntiPattern] = []
        for gen in self.graph.generalizations.values():
            stereotypes = [self.graph.stereotype_of(s) for s in gen.sources]
            rigid = any(st is not None and st.is_rigid for st in stereotypes)
            anti_rigid = any(st is not None and st.is_anti_rigid for st in stereotypes)
            if rigid and anti_rigid:
                found.append(AntiPattern(gen.id, AntiPatternKind.GS_RIG))
        return found

    def detect_het_coll(self) -> List[AntiPattern]:
        """Heterogeneous collective."""
        members = self.graph.count_associations(_A.MEMBER_OF, source_only=True)
        return [AntiPattern(info.id, AntiPatternKind.HET_COLL)
                for info in self.graph.classes_with([_S.COLLECTIVE]) if members[info.id] > 1]

    def detect_homo_func(self) -> List[AntiPattern]:
        """Homogeneous functional complex."""
        components = self.graph.count_associations(_A.COMPONENT_OF, source_only=True)
        return [AntiPattern(class_id, AntiPatternKind.HOMO_FUNC)
                for class_id, count in components.items() if count == 1]

    def detect_mix_rig(self) -> List[AntiPattern]:
        found: List[AntiPattern] = []
        for info in self.graph.classes_with([_S.MIXIN]):
            children = [self.graph.stereotype_of(c) for c in self.graph.direct_children(info.id)]
            rigid = any(st is not None and st.is_rigid for st in children)
            anti_rigid = any(st is not None and st.is_anti_rigid for st in children)
            if rigid != anti_rigid:
                found.append(AntiPattern(info.id, AntiPatternKind.MIX_RIG))
        return found

    def detect_mult_dep(self) -> List[AntiPattern]:
        """Type mediated by more than one relator."""
        found: List[AntiPattern] = []
        for class_id in self.graph.classes:
            relators: Set[ElementId] = set()
            for assoc in self.graph.associations_of(class_id, _A.MEDIATION):
                other = assoc.target if assoc.source == class_id else assoc.source
                if other == class_id or other not in self.graph.classes:
                    continue
                if self.graph.has_stereotype_in_lineage(other, _RELATOR):
                    relators.add(other)
            if len(relators) > 1:
                found.append(AntiPattern(class_id, AntiPatternKind.MULT_DEP))
        return found

    def detect_rel_rig(self) -> List[AntiPattern]:
        """Relator mediating a rigid type."""
        found: List[AntiPattern] = []
        for class_id in self.graph.classes:
            if not self.graph.has_stereotype_in_lineage(class_id, _RELATOR):
                continue
            for assoc in self.graph.associations_of(class_id, _A.MEDIATION):
                other = assoc.target if assoc.source == class_id else assoc.source
                if other == class_id:
                    continue
                other_st = self.graph.stereotype_of(other)
                if other_st is not None and other_st.is_rigid:
                    found.append(AntiPattern(class_id, AntiPatternKind.REL_RIG))
                    break
        return found

    def detect_undef_formal(self) -> List[AntiPattern]:
        """Formal relation between types without intrinsic properties."""
        found: List[AntiPattern] = []
        for assoc in self.graph.associations.values():
            if assoc.stereotype != _A.FORMAL:
                continue
            if any(not self.graph.has_intrinsic_properties(end) for end in assoc.class_endpoints):
                found.append(AntiPattern(assoc.id, AntiPatternKind.UNDEF_FORMAL))
        return found

    def detect_undef_phase(self) -> List[AntiPattern]:
        """Phase partition of a type that has no intrinsic properties to change."""
        found: List[AntiPattern] = []
        for info in self.graph.classes_with([_S.PHASE]):
            phased: List[ElementId] = []
            for gen_id in info.parent_generalizations:
                phased.extend(self.graph.generalizations[gen_id].targets)
            if not any(self.graph.has_intrinsic_properties(t) for t in phased):
                found.append(AntiPattern(info.id, AntiPatternKind.UNDEF_PHASE))
        return found


DETECTORS: Dict[AntiPatternKind, Detector] = {
    AntiPatternKind.BIN_OVER: AntiPatternValidator.detect_bin_over,
    AntiPatternKind.DEC_INT: AntiPatternValidator.detect_dec_int,
    AntiPatternKind.DEP_PHASE: AntiPatternValidator.detect_dep_phase,
    AntiPatternKind.FREE_ROLE: AntiPatternValidator.detect_free_role,
    AntiPatternKind.GS_RIG: AntiPatternValidator.detect_gs_rig,
    AntiPatternKind.HET_COLL: AntiPatternValidator.detect_het_coll,
    AntiPatternKind.HOMO_FUNC: AntiPatternValidator.detect_homo_func,
    AntiPatternKind.MIX_RIG: AntiPatternValidator.detect_mix_rig,
    AntiPatternKind.MULT_DEP: AntiPatternValidator.detect_mult_dep,
    AntiPatternKind.REL_RIG: AntiPatternValidator.detect_rel_rig,
    AntiPatternKind.UNDEF_FORMAL: AntiPatternValidator.detect_undef_formal,
    AntiPatternKind.UNDEF_PHASE: AntiPatternValidator.detect_undef_phase,
}


def validate_antipatterns(graph: ModelGraph,
                          enabled: Optional[Iterable[AntiPatternKind]] = None) -> List[ValidationProblem]:
    return AntiPatternValidator(graph, enabled).validate()


__all__ = ["AntiPatternValidator", "DETECTORS", "validate_antipatterns"]
