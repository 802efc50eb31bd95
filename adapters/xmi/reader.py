#!/usr/bin/env python3
"""
UML2 XMI reader for OntoUML class diagrams.

Reads the subset of UML the validator understands:

- ``uml:Package`` (nested), ``uml:Class``, ``uml:InstanceSpecification``
- ``generalization`` children of classes; generalizations grouped by a
  ``uml:GeneralizationSet`` become one n-ary generalization carrying the set's
  ``isDisjoint`` / ``isCovering`` flags, the others stay binary
- ``uml:Association``: source and target are the types of the first and
  second ``memberEnd``; ends may be ``ownedEnd`` of the association or
  ``ownedAttribute`` of a class
- ``uml:Dependency`` and ``ownedComment``

OntoUML stereotypes are read from ``eAnnotations`` details
(``<details key="stereotype" value="kind"/>``).
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from lxml import etree

from uml_types import (
    ElementId, ElementName, StereotypeText, MultiplicityText,
    AggregationType, Navigability,
)
from core.uml_model import (
    UmlModel, UmlElement, UmlClass, UmlInstance, UmlGeneralization,
    UmlAssociation, UmlDependency, UmlPackage, UmlComment, UmlCommentLink,
)
from meta import DEFAULT_META, MetaBundle
from utils.ids import stable_id
from utils.xml import xml_text, xml_bool
from adapters.errors import ModelLoadError

logger = logging.getLogger(__name__)


def _local(el: etree._Element) -> str:
    return etree.QName(el).localname if isinstance(el.tag, str) else ""


def _children(el: etree._Element, localname: str) -> List[etree._Element]:
    return [ch for ch in el if isinstance(ch.tag, str) and _local(ch) == localname]


class XmiModelReader:
    def __init__(self, meta: Optional[MetaBundle] = None) -> None:
        self.meta = meta or DEFAULT_META
        self.source = "<xmi>"
        self._use_namespace(self.meta.xml.xmi_ns)
        self._ids: Dict[str, etree._Element] = {}
        self._gen_to_set: Dict[str, str] = {}
        self._model: UmlModel = UmlModel()

    # ---------- Entry points ----------
    def read(self, path: str) -> UmlModel:
        self.source = path
        parser = etree.XMLParser(remove_blank_text=True)
        try:
            tree = etree.parse(path, parser)
        except OSError as e:
            raise ModelLoadError(f"cannot read file: {e}", path=path) from e
        except etree.XMLSyntaxError as e:
            raise ModelLoadError(f"XML parse error: {e}", path=path) from e
        return self.read_tree(tree.getroot())

    def read_tree(self, root: etree._Element) -> UmlModel:
        self._use_namespace(self._detect_xmi_namespace(root))
        model_el = self._find_model(root)
        if model_el is None:
            raise ModelLoadError("no uml:Model element found", path=self.source)

        self._ids = {}
        for el in root.iter():
            v = el.get(self._id_attr) if isinstance(el.tag, str) else None
            if v:
                self._ids[v] = el
        self._gen_to_set = {}
        for el in root.iter():
            if self._type_of(el) == self.meta.uml.generalization_set_type:
                for gen_id in self._refs(el, "generalization"):
                    self._gen_to_set.setdefault(gen_id, self._id_of(el))

        self._model = UmlModel(name=ElementName(xml_text(model_el.get("name")) or "OntoUML model"))
        self._read_container(model_el, None)
        logger.debug("Read %d elements from %s", len(self._model.elements), self.source)
        return self._model

    # ---------- XMI plumbing ----------
    def _detect_xmi_namespace(self, root: etree._Element) -> str:
        declared = set(root.nsmap.values())
        for ns in self.meta.xml.xmi_ns_aliases:
            if ns in declared:
                return ns
        return self.meta.xml.xmi_ns

    def _use_namespace(self, xmi_ns: str) -> None:
        xml = self.meta.xml
        self._id_attr = xml.xmi_id(xmi_ns)
        self._type_attr = xml.xmi_type(xmi_ns)
        self._idref_attr = xml.xmi_idref(xmi_ns)

    def _find_model(self, root: etree._Element) -> Optional[etree._Element]:
        if _local(root) == "Model":
            return root
        for el in root:
            if _local(el) == "Model":
                return el
        return None

    def _type_of(self, el: etree._Element) -> str:
        if not isinstance(el.tag, str):
            return ""
        t = el.get(self._type_attr)
        if t:
            return t
        if _local(el) in ("Model", "Package", "Class"):
            return f"uml:{_local(el)}"
        return ""

    def _id_of(self, el: etree._Element) -> ElementId:
        v = el.get(self._id_attr)
        if v:
            return ElementId(v)
        path = el.getroottree().getpath(el)
        return ElementId(stable_id(self.source, path))

    def _refs(self, el: etree._Element, name: str) -> List[str]:
        """Id references given either as an attribute list or as child idrefs."""
        refs = xml_text(el.get(name)).split()
        for ch in _children(el, name):
            ref = ch.get(self._idref_attr) or ch.get("href", "").rpartition("#")[2]
            if ref:
                refs.append(ref)
        return refs

    def _stereotype(self, el: etree._Element) -> StereotypeText:
        uml = self.meta.uml
        for ann in _children(el, "eAnnotations"):
            if ann.get("source") not in (None, uml.stereotype_annotation_source):
                continue
            for det in _children(ann, "details"):
                if det.get("key") == uml.stereotype_detail_key:
                    return StereotypeText(xml_text(det.get("value")))
        return StereotypeText(xml_text(el.get("stereotype")))

    def _name_of_ref(self, ref: Optional[str]) -> str:
        if not ref:
            return ""
        target = self._ids.get(ref)
        return xml_text(target.get("name")) if target is not None else ref

    def _add(self, element: UmlElement, parent: Optional[ElementId]) -> None:
        try:
            self._model.add(element, parent)
        except ValueError as e:
            raise ModelLoadError(str(e), path=self.source, element_id=element.id) from e

    # ---------- Containers ----------
    def _read_container(self, container: etree._Element, parent: Optional[ElementId]) -> None:
        uml = self.meta.uml
        self._read_comments(container, parent)
        for el in _children(container, "packagedElement"):
            t = self._type_of(el)
            if t in (uml.package_type, uml.model_type):
                package = UmlPackage(id=self._id_of(el), name=ElementName(xml_text(el.get("name"))))
                self._add(package, parent)
                self._read_container(el, package.id)
            elif t == uml.class_type:
                self._read_class(el, parent)
            elif t == uml.instance_type:
                self._add(UmlInstance(
                    id=self._id_of(el),
                    name=ElementName(xml_text(el.get("name"))),
                    instance_type=", ".join(self._name_of_ref(r) for r in self._refs(el, "classifier")),
                ), parent)
            elif t == uml.association_type:
                self._read_association(el, parent)
            elif t == uml.generalization_set_type:
                self._read_generalization_set(el, parent)
            elif t == uml.dependency_type:
                clients, suppliers = self._refs(el, "client"), self._refs(el, "supplier")
                self._add(UmlDependency(
                    id=self._id_of(el),
                    source=ElementId(clients[0] if clients else ""),
                    target=ElementId(suppliers[0] if suppliers else ""),
                    stereotype=self._stereotype(el),
                ), parent)
            else:
                logger.debug("Skipping unsupported element %s (%s)", el.get(self._id_attr), t)

    def _read_comments(self, owner: etree._Element, parent: Optional[ElementId]) -> None:
        for el in _children(owner, "ownedComment"):
            comment = UmlComment(id=self._id_of(el), text=self._comment_body(el))
            self._add(comment, parent)
            for index, target in enumerate(self._refs(el, "annotatedElement")):
                link_id = ElementId(stable_id(comment.id, "link", str(index)))
                self._add(UmlCommentLink(id=link_id, source=comment.id, target=ElementId(target)), parent)

    @staticmethod
    def _comment_body(el: etree._Element) -> str:
        body = el.get("body")
        if body is not None:
            return body
        bodies = _children(el, "body")
        return xml_text(bodies[0].text) if bodies else ""

    # ---------- Classes and generalizations ----------
    def _read_class(self, el: etree._Element, parent: Optional[ElementId]) -> None:
        properties: List[str] = []
        for attr in _children(el, "ownedAttribute"):
            if attr.get("association"):
                continue
            type_name = self._name_of_ref(attr.get("type"))
            name = xml_text(attr.get("name"))
            properties.append(f"{name}: {type_name}" if type_name else name)
        functions = [f"{xml_text(op.get('name'))}()" for op in _children(el, "ownedOperation")]
        comments = [self._comment_body(c) for c in _children(el, "ownedComment")]

        cls = UmlClass(
            id=self._id_of(el),
            name=ElementName(xml_text(el.get("name"))),
            stereotype=self._stereotype(el),
            is_abstract=xml_bool(el.get("isAbstract")),
            properties="\n".join(p for p in properties if p),
            functions="\n".join(functions),
            comment="\n".join(comments),
        )
        self._add(cls, parent)

        for gen in _children(el, "generalization"):
            gen_id = self._id_of(gen)
            if gen_id in self._gen_to_set:
                continue
            self._add(UmlGeneralization(
                id=gen_id,
                sources=[cls.id],
                targets=[ElementId(r) for r in self._refs(gen, "general")],
            ), parent)

    def _read_generalization_set(self, el: etree._Element, parent: Optional[ElementId]) -> None:
        sources: List[ElementId] = []
        targets: List[ElementId] = []
        for gen_id in self._refs(el, "generalization"):
            gen = self._ids.get(gen_id)
            if gen is None:
                logger.warning("Generalization set %s references unknown generalization %s",
                               el.get(self._id_attr), gen_id)
                continue
            specific = gen.get("specific") or xml_text(gen.getparent().get(self._id_attr))
            if specific and specific not in sources:
                sources.append(ElementId(specific))
            for general in self._refs(gen, "general"):
                if general not in targets:
                    targets.append(ElementId(general))
        self._add(UmlGeneralization(
            id=self._id_of(el),
            sources=sources,
            targets=targets,
            set_name=xml_text(el.get("name")),
            is_disjoint=xml_bool(el.get("isDisjoint")),
            is_covering=xml_bool(el.get("isCovering")),
        ), parent)

    # ---------- Associations ----------
    def _read_association(self, el: etree._Element, parent: Optional[ElementId]) -> None:
        assoc_id = self._id_of(el)
        ends = [self._ids.get(ref) for ref in self._refs(el, "memberEnd")]
        if len(ends) < 2:
            ends = _children(el, "ownedEnd")
        ends = (ends + [None, None])[:2]

        (source, source_mult, source_role, source_nav, source_agg) = self._read_end(ends[0], el)
        (target, target_mult, target_role, target_nav, target_agg) = self._read_end(ends[1], el)
        self._add(UmlAssociation(
            id=assoc_id,
            source=source,
            target=target,
            stereotype=self._stereotype(el),
            source_multiplicity=source_mult,
            target_multiplicity=target_mult,
            source_role=source_role,
            target_role=target_role,
            source_navigability=source_nav,
            target_navigability=target_nav,
            source_aggregation=source_agg,
            target_aggregation=target_agg,
        ), parent)

    def _read_end(self, end: Optional[etree._Element],
                  assoc: etree._Element) -> Tuple[ElementId, MultiplicityText, str, Navigability, AggregationType]:
        if end is None:
            return ElementId(""), MultiplicityText(""), "", Navigability.UNSPECIFIED, AggregationType.NONE
        owned_by_class = end.getparent() is not assoc
        navigability = Navigability.NAVIGABLE if owned_by_class else Navigability.UNSPECIFIED
        try:
            aggregation = AggregationType(xml_text(end.get("aggregation")) or "none")
        except ValueError:
            logger.warning("Unknown aggregation '%s' on %s", end.get("aggregation"), end.get(self._id_attr))
            aggregation = AggregationType.NONE
        return (
            ElementId(xml_text(end.get("type"))),
            self._multiplicity(end),
            xml_text(end.get("name")),
            navigability,
            aggregation,
        )

    def _multiplicity(self, end: etree._Element) -> MultiplicityText:
        lowers, uppers = _children(end, "lowerValue"), _children(end, "upperValue")
        if not lowers and not uppers:
            return MultiplicityText("")
        # LiteralInteger / LiteralUnlimitedNatural without a value attribute default to 0,
        # a missing lowerValue or upperValue to the UML default of 1
        lower = (xml_text(lowers[0].get("value")) or "0") if lowers else "1"
        upper = (xml_text(uppers[0].get("value")) or "0") if uppers else "1"
        if upper in ("-1", self.meta.uml.unlimited_multiplicity):
            upper = self.meta.uml.unlimited_multiplicity
        if upper == lower:
            return MultiplicityText(lower)
        return MultiplicityText(f"{lower}..{upper}")


def read_xmi_model(path: str) -> UmlModel:
    return XmiModelReader().read(path)


__all__ = ["XmiModelReader", "read_xmi_model"]
