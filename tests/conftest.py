import os
import sys
from typing import List, Optional

import pytest

# Ensure project root is first on sys.path so local packages like `core` are used
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from core.uml_model import (  # noqa: E402
    UmlModel, UmlClass, UmlGeneralization, UmlAssociation, UmlPackage, UmlInstance,
)
from uml_types import ElementId, ElementName, StereotypeText, MultiplicityText  # noqa: E402


class ModelFactory:
    """Small builder for test models; ids double as names."""

    def __init__(self) -> None:
        self.model = UmlModel(name=ElementName("test"))

    def package(self, pid: str, parent: Optional[str] = None) -> UmlPackage:
        return self.model.add(UmlPackage(id=ElementId(pid), name=ElementName(pid)), parent)

    def cls(self, cid: str, stereotype: str, abstract: bool = False, properties: str = "",
            parent: Optional[str] = None) -> UmlClass:
        return self.model.add(UmlClass(
            id=ElementId(cid), name=ElementName(cid), stereotype=StereotypeText(stereotype),
            is_abstract=abstract, properties=properties,
        ), parent)

    def instance(self, iid: str, parent: Optional[str] = None) -> UmlInstance:
        return self.model.add(UmlInstance(id=ElementId(iid), name=ElementName(iid)), parent)

    def gen(self, gid: str, sources: List[str], targets: List[str], disjoint: bool = False,
            covering: bool = False, parent: Optional[str] = None) -> UmlGeneralization:
        return self.model.add(UmlGeneralization(
            id=ElementId(gid), sources=[ElementId(s) for s in sources],
            targets=[ElementId(t) for t in targets], is_disjoint=disjoint, is_covering=covering,
        ), parent)

    def assoc(self, aid: str, stereotype: str, source: str, target: str,
              source_mult: str = "1", target_mult: str = "1",
              parent: Optional[str] = None) -> UmlAssociation:
        return self.model.add(UmlAssociation(
            id=ElementId(aid), source=ElementId(source), target=ElementId(target),
            stereotype=StereotypeText(stereotype),
            source_multiplicity=MultiplicityText(source_mult),
            target_multiplicity=MultiplicityText(target_mult),
        ), parent)


@pytest.fixture
def factory() -> ModelFactory:
    return ModelFactory()
