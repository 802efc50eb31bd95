"""
Reader for OntoUML models stored as JSON or YAML documents.

A document is a mapping with a ``name`` and a list of ``elements``; packages
nest their own ``elements`` list. Each element carries a ``type``::

    name: Marriage
    elements:
      - {type: class, id: person, name: Person, stereotype: kind}
      - {type: generalization, sources: [man, woman], targets: [person],
         disjoint: true, covering: true}
      - {type: association, stereotype: mediation, source: marriage, target: husband,
         source_multiplicity: "1..*", target_multiplicity: "1"}

References are kept as plain ids: an unknown reference is left for the
validator to report, only structural problems of the document itself raise.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional

import yaml

from uml_types import (
    ElementId, ElementName, StereotypeText, MultiplicityText,
    AggregationType, Navigability,
)
from core.uml_model import (
    UmlModel, UmlElement, UmlClass, UmlInstance, UmlGeneralization,
    UmlAssociation, UmlDependency, UmlPackage, UmlComment, UmlCommentLink,
)
from utils.ids import stable_id
from utils.xml import xml_bool
from adapters.errors import ModelLoadError

logger = logging.getLogger(__name__)

RawElement = Dict[str, Any]


class ModelDocumentParser:
    def __init__(self, source: str = "<document>") -> None:
        self.source = source
        self._builders: Dict[str, Callable[[RawElement, ElementId], UmlElement]] = {
            "class": self._class,
            "instance": self._instance,
            "generalization": self._generalization,
            "association": self._association,
            "dependency": self._dependency,
            "comment": self._comment,
            "commentlink": self._comment_link,
        }

    def parse(self, data: Any) -> UmlModel:
        if not isinstance(data, dict):
            raise ModelLoadError("document root must be a mapping", path=self.source)
        model = UmlModel(name=ElementName(str(data.get("name") or "OntoUML model")))
        self._add_elements(model, self._element_list(data, "<root>"), parent=None, trail="root")
        logger.debug("Parsed %d elements from %s", len(model.elements), self.source)
        return model

    def _element_list(self, data: RawElement, owner: str) -> List[RawElement]:
        elements = data.get("elements") or []
        if not isinstance(elements, list):
            raise ModelLoadError("'elements' must be a list", path=self.source, element_id=owner)
        return elements

    def _add_elements(self, model: UmlModel, raw_elements: List[RawElement],
                      parent: Optional[ElementId], trail: str) -> None:
        for index, raw in enumerate(raw_elements):
            if not isinstance(raw, dict):
                raise ModelLoadError(f"element #{index} of {trail} is not a mapping", path=self.source)
            kind = str(raw.get("type") or "").strip().lower()
            element_id = ElementId(str(raw.get("id") or stable_id(trail, str(index), kind, str(raw.get("name", "")))))

            if kind == "package":
                package = UmlPackage(id=element_id, name=ElementName(str(raw.get("name") or "")),
                                     comment=str(raw.get("comment") or ""))
                self._add(model, package, parent)
                self._add_elements(model, self._element_list(raw, element_id), element_id, f"{trail}/{element_id}")
                continue

            builder = self._builders.get(kind)
            if builder is None:
                raise ModelLoadError(f"unknown element type '{raw.get('type')}'",
                                     path=self.source, element_id=element_id)
            self._add(model, builder(raw, element_id), parent)

    def _add(self, model: UmlModel, element: UmlElement, parent: Optional[ElementId]) -> None:
        try:
            model.add(element, parent)
        except ValueError as e:
            raise ModelLoadError(str(e), path=self.source, element_id=element.id) from e

    # ---------- Element builders ----------
    def _class(self, raw: RawElement, element_id: ElementId) -> UmlClass:
        return UmlClass(
            id=element_id,
            name=ElementName(str(raw.get("name") or "")),
            stereotype=StereotypeText(str(raw.get("stereotype") or "")),
            is_abstract=xml_bool(raw.get("abstract")),
            properties=_text_block(raw.get("properties")),
            functions=_text_block(raw.get("functions")),
            comment=str(raw.get("comment") or ""),
        )

    def _instance(self, raw: RawElement, element_id: ElementId) -> UmlInstance:
        return UmlInstance(
            id=element_id,
            name=ElementName(str(raw.get("name") or "")),
            instance_type=str(raw.get("instance_type") or ""),
            slots=_text_block(raw.get("slots")),
            comment=str(raw.get("comment") or ""),
        )

    def _generalization(self, raw: RawElement, element_id: ElementId) -> UmlGeneralization:
        return UmlGeneralization(
            id=element_id,
            sources=_id_list(raw, "sources", "source"),
            targets=_id_list(raw, "targets", "target"),
            set_name=str(raw.get("set_name") or ""),
            is_disjoint=xml_bool(raw.get("disjoint")),
            is_covering=xml_bool(raw.get("covering")),
            comment=str(raw.get("comment") or ""),
        )

    def _association(self, raw: RawElement, element_id: ElementId) -> UmlAssociation:
        return UmlAssociation(
            id=element_id,
            source=ElementId(str(raw.get("source") or "")),
            target=ElementId(str(raw.get("target") or "")),
            stereotype=StereotypeText(str(raw.get("stereotype") or "")),
            source_multiplicity=MultiplicityText(_multiplicity(raw.get("source_multiplicity"))),
            target_multiplicity=MultiplicityText(_multiplicity(raw.get("target_multiplicity"))),
            source_role=str(raw.get("source_role") or ""),
            target_role=str(raw.get("target_role") or ""),
            source_reading=str(raw.get("source_reading") or ""),
            target_reading=str(raw.get("target_reading") or ""),
            source_navigability=self._enum(Navigability, raw, "source_navigability", element_id),
            target_navigability=self._enum(Navigability, raw, "target_navigability", element_id),
            source_aggregation=self._enum(AggregationType, raw, "source_aggregation", element_id),
            target_aggregation=self._enum(AggregationType, raw, "target_aggregation", element_id),
            comment=str(raw.get("comment") or ""),
        )

    def _dependency(self, raw: RawElement, element_id: ElementId) -> UmlDependency:
        return UmlDependency(
            id=element_id,
            source=ElementId(str(raw.get("source") or "")),
            target=ElementId(str(raw.get("target") or "")),
            stereotype=StereotypeText(str(raw.get("stereotype") or "")),
            target_arrow_open=xml_bool(raw.get("target_arrow_open")),
            comment=str(raw.get("comment") or ""),
        )

    def _comment(self, raw: RawElement, element_id: ElementId) -> UmlComment:
        return UmlComment(id=element_id, text=str(raw.get("text") or ""))

    def _comment_link(self, raw: RawElement, element_id: ElementId) -> UmlCommentLink:
        return UmlCommentLink(
            id=element_id,
            source=ElementId(str(raw.get("source") or "")),
            target=ElementId(str(raw.get("target") or "")),
        )

    def _enum(self, enum_type, raw: RawElement, key: str, element_id: ElementId):
        value = raw.get(key)
        if value is None or value == "":
            return next(iter(enum_type))
        try:
            return enum_type(str(value).strip().lower())
        except ValueError as e:
            raise ModelLoadError(f"invalid {key} '{value}'", path=self.source, element_id=element_id) from e


def _text_block(value: Any) -> str:
    # properties may be given as one text block or as a list of lines
    if value is None:
        return ""
    if isinstance(value, list):
        return "\n".join(str(v) for v in value)
    return str(value)


def _multiplicity(value: Any) -> str:
    # YAML reads a bare 1 as an int
    return "" if value is None else str(value)


def _id_list(raw: RawElement, plural: str, singular: str) -> List[ElementId]:
    values = raw.get(plural)
    if values is None:
        values = [raw[singular]] if raw.get(singular) else []
    elif not isinstance(values, list):
        values = [values]
    return [ElementId(str(v)) for v in values]


def _read_document(path: str) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        if path.lower().endswith(('.yml', '.yaml')):
            return yaml.safe_load(f) or {}
        return json.load(f)


def load_model_document(path: str) -> UmlModel:
    if not os.path.isfile(path):
        raise ModelLoadError("model file not found", path=path)
    try:
        data = _read_document(path)
    except UnicodeDecodeError as e:
        raise ModelLoadError(f"document is not valid UTF-8: {e}", path=path) from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ModelLoadError(f"cannot parse document: {e}", path=path) from e
    except OSError as e:
        raise ModelLoadError(f"cannot read document: {e}", path=path) from e
    return ModelDocumentParser(source=path).parse(data)


__all__ = ["ModelDocumentParser", "load_model_document"]
