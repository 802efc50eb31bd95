#!/usr/bin/env python3
"""
OntoUML class-diagram model.

Elements are stored in a flat arena keyed by element id; containment and
edges are id lists. The model is owned by the caller (editor, loader) and the
validator only ever reads it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set, Union

from uml_types import (
    ElementId, ElementName, StereotypeText, MultiplicityText,
    ElementKind, AggregationType, Navigability,
    TypedList, TypedDict,
)

logger = logging.getLogger(__name__)


# ---------- Classifiers ----------
@dataclass
class UmlClass:
    id: ElementId
    name: ElementName
    stereotype: StereotypeText = StereotypeText("")
    is_abstract: bool = False
    properties: str = ""  # free text, one property per line
    functions: str = ""
    comment: str = ""

    @property
    def kind(self) -> ElementKind:
        return ElementKind.CLASS

    @property
    def has_properties(self) -> bool:
        return bool(self.properties.strip())


@dataclass
class UmlInstance:
    id: ElementId
    name: ElementName
    instance_type: str = ""
    slots: str = ""
    comment: str = ""

    @property
    def kind(self) -> ElementKind:
        return ElementKind.INSTANCE


# ---------- Relationships ----------
@dataclass
class UmlGeneralization:
    """N-ary generalization: every source specializes every target."""
    id: ElementId
    sources: List[ElementId] = field(default_factory=list)
    targets: List[ElementId] = field(default_factory=list)
    set_name: str = ""
    is_disjoint: bool = False
    is_covering: bool = False
    comment: str = ""

    @property
    def kind(self) -> ElementKind:
        return ElementKind.GENERALIZATION

    @property
    def is_singleton(self) -> bool:
        return len(self.sources) == 1 and len(self.targets) == 1


@dataclass
class UmlAssociation:
    id: ElementId
    source: ElementId
    target: ElementId
    stereotype: StereotypeText = StereotypeText("")
    source_multiplicity: MultiplicityText = MultiplicityText("")
    target_multiplicity: MultiplicityText = MultiplicityText("")
    source_role: str = ""
    target_role: str = ""
    source_reading: str = ""
    target_reading: str = ""
    source_navigability: Navigability = Navigability.UNSPECIFIED
    target_navigability: Navigability = Navigability.UNSPECIFIED
    source_aggregation: AggregationType = AggregationType.NONE
    target_aggregation: AggregationType = AggregationType.NONE
    comment: str = ""

    @property
    def kind(self) -> ElementKind:
        return ElementKind.ASSOCIATION

    @property
    def endpoints(self) -> List[ElementId]:
        return [self.source, self.target]


@dataclass
class UmlDependency:
    id: ElementId
    source: ElementId
    target: ElementId
    stereotype: StereotypeText = StereotypeText("")
    target_arrow_open: bool = False
    comment: str = ""

    @property
    def kind(self) -> ElementKind:
        return ElementKind.DEPENDENCY


# ---------- Containers and annotations ----------
@dataclass
class UmlPackage:
    id: ElementId
    name: ElementName
    contained: List[ElementId] = field(default_factory=list)
    comment: str = ""

    @property
    def kind(self) -> ElementKind:
        return ElementKind.PACKAGE


@dataclass
class UmlComment:
    id: ElementId
    text: str = ""

    @property
    def kind(self) -> ElementKind:
        return ElementKind.COMMENT


@dataclass
class UmlCommentLink:
    id: ElementId
    source: ElementId  # the comment
    target: ElementId  # any annotated element

    @property
    def kind(self) -> ElementKind:
        return ElementKind.COMMENT_LINK


UmlElement = Union[
    UmlPackage, UmlClass, UmlInstance, UmlGeneralization,
    UmlAssociation, UmlDependency, UmlComment, UmlCommentLink,
]


# ---------- Model (element arena) ----------
@dataclass
class UmlModel:
    name: ElementName = ElementName("OntoUML model")
    elements: TypedDict[ElementId, UmlElement] = field(default_factory=TypedDict)
    contained: TypedList[ElementId] = field(default_factory=TypedList)  # root elements, in order

    def add(self, element: UmlElement, parent: Optional[ElementId] = None) -> UmlElement:
        """Register an element and place it in the root or in a package."""
        if element.id in self.elements:
            raise ValueError(f"Duplicate element id: {element.id}")
        if parent is None:
            self.contained.append(element.id)
        else:
            package = self.elements.get(parent)
            if not isinstance(package, UmlPackage):
                raise ValueError(f"Parent {parent} is not a package of this model")
            package.contained.append(element.id)
        self.elements[element.id] = element
        return element

    def get(self, element_id: ElementId) -> Optional[UmlElement]:
        return self.elements.get(element_id)

    def walk(self) -> Iterator[UmlElement]:
        """Depth-first traversal in containment order.

        Packages are yielded before their content. An element listed by more
        than one container is yielded once; ids without an element are skipped.
        """
        seen: Set[ElementId] = set()
        yield from self._walk_ids(self.contained, seen)

    def _walk_ids(self, ids: List[ElementId], seen: Set[ElementId]) -> Iterator[UmlElement]:
        for element_id in ids:
            if element_id in seen:
                continue
            element = self.elements.get(element_id)
            if element is None:
                logger.warning("Contained element %s does not exist in model %s", element_id, self.name)
                continue
            seen.add(element_id)
            yield element
            if isinstance(element, UmlPackage):
                yield from self._walk_ids(element.contained, seen)

    def get_elements_by_kind(self, kind: ElementKind) -> List[UmlElement]:
        """Get all reachable elements of a specific kind, in traversal order."""
        return [elem for elem in self.walk() if elem.kind == kind]

    def classes(self) -> List[UmlClass]:
        return [elem for elem in self.walk() if isinstance(elem, UmlClass)]

    def generalizations(self) -> List[UmlGeneralization]:
        return [elem for elem in self.walk() if isinstance(elem, UmlGeneralization)]

    def associations(self) -> List[UmlAssociation]:
        return [elem for elem in self.walk() if isinstance(elem, UmlAssociation)]


__all__ = [
    "UmlClass", "UmlInstance", "UmlGeneralization", "UmlAssociation",
    "UmlDependency", "UmlPackage", "UmlComment", "UmlCommentLink",
    "UmlElement", "UmlModel",
]
