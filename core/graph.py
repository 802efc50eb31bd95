#!/usr/bin/env python3
"""
Aggregate view of an OntoUML model used by every validation pass.

``ModelGraph.build`` walks the package tree once for classifiers and once for
relationships, resolving references into per-element info records. All
closure queries (subtyping, bounds, disjointness) run against those records
and carry a visited set so that cyclic generalization graphs terminate.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from uml_types import ElementId, ElementKind
from core.uml_model import (
    UmlModel, UmlClass, UmlInstance, UmlGeneralization, UmlAssociation,
)
from core.taxonomy import ClassStereotype, AssociationStereotype
from core.multiplicity import Multiplicity, parse_multiplicity

logger = logging.getLogger(__name__)


# ---------- Info records ----------
@dataclass
class ClassInfo:
    element: UmlClass
    stereotype: Optional[ClassStereotype]
    parent_generalizations: List[ElementId] = field(default_factory=list)
    child_generalizations: List[ElementId] = field(default_factory=list)
    associations: List[ElementId] = field(default_factory=list)

    @property
    def id(self) -> ElementId:
        return self.element.id

    @property
    def is_abstract(self) -> bool:
        return self.element.is_abstract


@dataclass
class GeneralizationInfo:
    element: UmlGeneralization
    sources: List[ElementId] = field(default_factory=list)  # resolved classes only
    targets: List[ElementId] = field(default_factory=list)
    dangling: List[ElementId] = field(default_factory=list)

    @property
    def id(self) -> ElementId:
        return self.element.id

    @property
    def is_disjoint(self) -> bool:
        return self.element.is_disjoint

    @property
    def is_covering(self) -> bool:
        return self.element.is_covering

    @property
    def is_singleton(self) -> bool:
        return self.element.is_singleton


@dataclass
class AssociationInfo:
    element: UmlAssociation
    stereotype: Optional[AssociationStereotype]
    source_multiplicity: Optional[Multiplicity]
    target_multiplicity: Optional[Multiplicity]
    source_is_class: bool = False
    target_is_class: bool = False
    dangling: List[ElementId] = field(default_factory=list)

    @property
    def id(self) -> ElementId:
        return self.element.id

    @property
    def source(self) -> ElementId:
        return self.element.source

    @property
    def target(self) -> ElementId:
        return self.element.target

    @property
    def class_endpoints(self) -> List[ElementId]:
        ends: List[ElementId] = []
        if self.source_is_class:
            ends.append(self.source)
        if self.target_is_class and self.target not in ends:
            ends.append(self.target)
        return ends


# ---------- Graph ----------
@dataclass
class ModelGraph:
    model: UmlModel
    classes: Dict[ElementId, ClassInfo] = field(default_factory=dict)
    instances: Dict[ElementId, UmlInstance] = field(default_factory=dict)
    generalizations: Dict[ElementId, GeneralizationInfo] = field(default_factory=dict)
    associations: Dict[ElementId, AssociationInfo] = field(default_factory=dict)

    @classmethod
    def build(cls, model: UmlModel) -> "ModelGraph":
        graph = cls(model=model)
        for element in model.classes():
            graph.classes[element.id] = ClassInfo(
                element=element,
                stereotype=ClassStereotype.parse(element.stereotype),
            )
        for element in model.get_elements_by_kind(ElementKind.INSTANCE):
            graph.instances[element.id] = element
        for gen in model.generalizations():
            graph._collect_generalization(gen)
        for assoc in model.associations():
            graph._collect_association(assoc)
        logger.debug(
            "Collected %d classes, %d generalizations, %d associations from %s",
            len(graph.classes), len(graph.generalizations), len(graph.associations), model.name,
        )
        return graph

    def _collect_generalization(self, gen: UmlGeneralization) -> None:
        info = GeneralizationInfo(element=gen)
        for end_ids, resolved in ((gen.sources, info.sources), (gen.targets, info.targets)):
            for end_id in end_ids:
                if end_id in self.classes:
                    if end_id not in resolved:
                        resolved.append(end_id)
                else:
                    info.dangling.append(end_id)
        for source in info.sources:
            self.classes[source].parent_generalizations.append(gen.id)
        for target in info.targets:
            self.classes[target].child_generalizations.append(gen.id)
        if info.dangling:
            logger.warning("Generalization %s references unknown classes: %s", gen.id, info.dangling)
        self.generalizations[gen.id] = info

    def _collect_association(self, assoc: UmlAssociation) -> None:
        info = AssociationInfo(
            element=assoc,
            stereotype=AssociationStereotype.parse(assoc.stereotype),
            source_multiplicity=parse_multiplicity(assoc.source_multiplicity),
            target_multiplicity=parse_multiplicity(assoc.target_multiplicity),
            source_is_class=assoc.source in self.classes,
            target_is_class=assoc.target in self.classes,
        )
        for end_id in assoc.endpoints:
            if end_id not in self.classes and end_id not in self.instances:
                info.dangling.append(end_id)
        for end_id in info.class_endpoints:
            self.classes[end_id].associations.append(assoc.id)
        if info.dangling:
            logger.warning("Association %s references unknown classifiers: %s", assoc.id, info.dangling)
        self.associations[assoc.id] = info

    # ---------- Direct neighbourhood ----------
    def stereotype_of(self, class_id: ElementId) -> Optional[ClassStereotype]:
        info = self.classes.get(class_id)
        return info.stereotype if info else None

    def classes_with(self, stereotypes: Iterable[ClassStereotype]) -> List[ClassInfo]:
        wanted = frozenset(stereotypes)
        return [info for info in self.classes.values() if info.stereotype in wanted]

    def direct_parents(self, class_id: ElementId) -> List[ElementId]:
        parents: List[ElementId] = []
        info = self.classes.get(class_id)
        if info is None:
            return parents
        for gen_id in info.parent_generalizations:
            for target in self.generalizations[gen_id].targets:
                if target not in parents:
                    parents.append(target)
        return parents

    def direct_children(self, class_id: ElementId) -> List[ElementId]:
        children: List[ElementId] = []
        info = self.classes.get(class_id)
        if info is None:
            return children
        for gen_id in info.child_generalizations:
            for source in self.generalizations[gen_id].sources:
                if source not in children:
                    children.append(source)
        return children

    def associations_of(self, class_id: ElementId,
                        stereotype: Optional[AssociationStereotype] = None) -> List[AssociationInfo]:
        info = self.classes.get(class_id)
        if info is None:
            return []
        found: List[AssociationInfo] = []
        for assoc_id in info.associations:
            assoc = self.associations[assoc_id]
            if stereotype is None or assoc.stereotype == stereotype:
                found.append(assoc)
        return found

    def count_associations(self, stereotype: AssociationStereotype,
                           source_only: bool = False) -> Dict[ElementId, int]:
        """Annotate every class with the number of ``stereotype`` associations it takes part in."""
        counts: Dict[ElementId, int] = {class_id: 0 for class_id in self.classes}
        for assoc in self.associations.values():
            if assoc.stereotype != stereotype:
                continue
            if source_only:
                ends = [assoc.source] if assoc.source_is_class else []
            else:
                ends = assoc.class_endpoints
            for end_id in ends:
                counts[end_id] += 1
        return counts

    # ---------- Closures ----------
    def is_subtype_of(self, a: ElementId, b: ElementId) -> bool:
        """True when ``b`` is reachable from ``a`` through one or more generalizations."""
        return self._reaches(a, b, set())

    def _reaches(self, a: ElementId, b: ElementId, visited: Set[ElementId]) -> bool:
        visited.add(a)
        try:
            for parent in self.direct_parents(a):
                if parent == b:
                    return True
                if parent not in visited and self._reaches(parent, b, visited):
                    return True
            return False
        finally:
            visited.discard(a)

    def is_same_or_subtype_of(self, a: ElementId, b: ElementId) -> bool:
        return a == b or self.is_subtype_of(a, b)

    def ancestors(self, class_id: ElementId) -> List[ElementId]:
        """All supertypes, nearest first."""
        return self._breadth_first(class_id, self.direct_parents)

    def descendants(self, class_id: ElementId) -> List[ElementId]:
        """All subtypes, nearest first."""
        return self._breadth_first(class_id, self.direct_children)

    @staticmethod
    def _breadth_first(start: ElementId, step) -> List[ElementId]:
        order: List[ElementId] = []
        visited: Set[ElementId] = {start}
        queue = deque(step(start))
        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            order.append(current)
            queue.extend(n for n in step(current) if n not in visited)
        return order

    def least_upper_bound(self, a: ElementId, b: ElementId) -> Optional[ElementId]:
        if a not in self.classes or b not in self.classes:
            return None
        for candidate in [a] + self.ancestors(a):
            if self.is_same_or_subtype_of(b, candidate):
                return candidate
        return None

    def greatest_lower_bound(self, a: ElementId, b: ElementId) -> Optional[ElementId]:
        if a not in self.classes or b not in self.classes:
            return None
        for candidate in [b] + self.descendants(b):
            if self.is_same_or_subtype_of(candidate, a):
                return candidate
        return None

    def are_disjoint_upwards(self, a: ElementId, b: ElementId) -> bool:
        bound = self.least_upper_bound(a, b)
        if bound is None:
            return True
        for gen_id in self.classes[bound].child_generalizations:
            gen = self.generalizations[gen_id]
            if not gen.is_disjoint:
                continue
            branches_a = {s for s in gen.sources if self.is_same_or_subtype_of(a, s)}
            branches_b = {s for s in gen.sources if self.is_same_or_subtype_of(b, s)}
            if branches_a and branches_b and not branches_a & branches_b:
                return True
        return False

    def are_disjoint_downwards(self, a: ElementId, b: ElementId) -> bool:
        bound = self.greatest_lower_bound(a, b)
        if bound is None:
            return True
        for gen_id in self.classes[bound].parent_generalizations:
            gen = self.generalizations[gen_id]
            if not gen.is_disjoint:
                continue
            branches_a = {t for t in gen.targets if self.is_same_or_subtype_of(t, a)}
            branches_b = {t for t in gen.targets if self.is_same_or_subtype_of(t, b)}
            if branches_a and branches_b and not branches_a & branches_b:
                return True
        return False

    # ---------- Lineage queries ----------
    def has_stereotype_in_lineage(self, class_id: ElementId,
                                  stereotypes: FrozenSet[ClassStereotype]) -> bool:
        """The class or any of its supertypes carries one of ``stereotypes``."""
        if self.stereotype_of(class_id) in stereotypes:
            return True
        return any(self.stereotype_of(a) in stereotypes for a in self.ancestors(class_id))

    def has_intrinsic_properties(self, class_id: ElementId) -> bool:
        """Own attributes or a characterizing aspect, on the class or any supertype."""
        if class_id not in self.classes:
            return False
        for candidate in [class_id] + self.ancestors(class_id):
            info = self.classes[candidate]
            if info.element.has_properties:
                return True
            for assoc in self.associations_of(candidate, AssociationStereotype.CHARACTERIZATION):
                if assoc.source == candidate:
                    return True
        return False


__all__ = ["ClassInfo", "GeneralizationInfo", "AssociationInfo", "ModelGraph"]
