#!/usr/bin/env python3
"""
Integration tests loading OntoUML models from JSON and YAML documents.
"""

import json

import pytest

from adapters import ModelLoadError, load_model
from adapters.model_document import ModelDocumentParser, load_model_document
from core.problems import ErrorKind
from core.uml_model import UmlAssociation, UmlGeneralization, UmlPackage
from core.validator import validate
from uml_types import AggregationType, Navigability

MARRIAGE_YAML = """\
name: Marriage
elements:
  - type: package
    id: people
    name: People
    elements:
      - {type: class, id: person, name: Person, stereotype: kind, properties: ["name: String"]}
      - {type: class, id: man, name: Man, stereotype: subkind}
      - {type: class, id: woman, name: Woman, stereotype: subkind}
      - {type: generalization, id: gender, sources: [man, woman], target: person,
         set_name: gender, disjoint: true, covering: true}
  - {type: class, id: husband, name: Husband, stereotype: role}
  - {type: class, id: wife, name: Wife, stereotype: role}
  - {type: class, id: marriage, name: Marriage, stereotype: relator}
  - {type: generalization, id: g_husband, source: husband, target: man}
  - {type: generalization, id: g_wife, source: wife, target: woman}
  - type: association
    id: m_husband
    stereotype: mediation
    source: marriage
    target: husband
    source_multiplicity: "1..*"
    target_multiplicity: 1
    target_navigability: navigable
    source_aggregation: Composite
  - {type: association, id: m_wife, stereotype: mediation, source: marriage, target: wife,
     source_multiplicity: "1..*", target_multiplicity: 1}
  - {type: comment, id: note, text: A married couple}
  - {type: commentLink, id: note_link, source: note, target: marriage}
"""


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_yaml_document(tmp_path):
    model = load_model(_write(tmp_path, "marriage.yaml", MARRIAGE_YAML))

    assert model.name == "Marriage"
    assert isinstance(model.get("people"), UmlPackage)
    assert model.get("people").contained == ["person", "man", "woman", "gender"]
    assert model.get("person").properties == "name: String"

    gender = model.get("gender")
    assert isinstance(gender, UmlGeneralization)
    assert (gender.sources, gender.targets) == (["man", "woman"], ["person"])
    assert gender.is_disjoint and gender.is_covering

    assoc = model.get("m_husband")
    assert isinstance(assoc, UmlAssociation)
    assert (assoc.source_multiplicity, assoc.target_multiplicity) == ("1..*", "1")
    assert assoc.target_navigability is Navigability.NAVIGABLE
    assert assoc.source_navigability is Navigability.UNSPECIFIED
    assert assoc.source_aggregation is AggregationType.COMPOSITE

    assert validate(model, check_antipatterns=False) == []


def test_json_document(tmp_path):
    doc = {
        "name": "Students",
        "elements": [
            {"type": "class", "id": "person", "stereotype": "kind"},
            {"type": "class", "id": "student", "stereotype": "role"},
            {"type": "generalization", "sources": ["student"], "targets": ["person"]},
        ],
    }
    model = load_model_document(_write(tmp_path, "students.json", json.dumps(doc)))

    problems = validate(model)
    assert [(p.element_id, p.kind) for p in problems] == [("student", ErrorKind.INVALID_ROLE)]


def test_generated_ids_are_stable():
    doc = {"elements": [{"type": "class", "name": "Person", "stereotype": "kind"}]}

    first = ModelDocumentParser().parse(doc)
    second = ModelDocumentParser().parse(doc)
    assert list(first.elements) == list(second.elements)
    assert list(first.elements)[0].startswith("id_")


def test_missing_association_end_is_reported(tmp_path):
    doc = {"elements": [
        {"type": "class", "id": "person", "stereotype": "kind"},
        {"type": "association", "id": "r", "source": "person"},
    ]}
    model = ModelDocumentParser().parse(doc)

    kinds = [(p.element_id, p.kind) for p in validate(model)]
    assert ("r", ErrorKind.DANGLING_REFERENCE) in kinds


@pytest.mark.parametrize("doc,message", [
    ([], "mapping"),
    ({"elements": {"type": "class"}}, "must be a list"),
    ({"elements": ["class"]}, "not a mapping"),
    ({"elements": [{"type": "actor", "id": "a"}]}, "unknown element type"),
    ({"elements": [{"type": "class", "id": "a"}, {"type": "class", "id": "a"}]}, "Duplicate element id"),
    ({"elements": [{"type": "association", "id": "r", "source_navigability": "sideways"}]},
     "invalid source_navigability"),
])
def test_malformed_documents(doc, message):
    with pytest.raises(ModelLoadError, match=message):
        ModelDocumentParser().parse(doc)


def test_unparseable_yaml(tmp_path):
    path = _write(tmp_path, "broken.yaml", "elements: [unclosed\n")

    with pytest.raises(ModelLoadError, match="cannot parse"):
        load_model(path)


def test_unparseable_json(tmp_path):
    path = _write(tmp_path, "broken.json", "{\"elements\": ")

    with pytest.raises(ModelLoadError, match="cannot parse"):
        load_model(path)


def test_missing_document(tmp_path):
    with pytest.raises(ModelLoadError, match="not found"):
        load_model(str(tmp_path / "absent.yaml"))


def test_document_not_utf8(tmp_path):
    path = tmp_path / "latin.json"
    path.write_bytes(b'{"name": "\xff\xfe"}')

    with pytest.raises(ModelLoadError, match="not valid UTF-8"):
        load_model(str(path))


def test_quoted_flags():
    doc = {"elements": [
        {"type": "class", "id": "a", "stereotype": "kind", "abstract": "false"},
        {"type": "class", "id": "b", "stereotype": "subkind", "abstract": "true"},
        {"type": "generalization", "id": "g", "sources": ["b"], "targets": ["a"],
         "disjoint": "false", "covering": "True"},
    ]}
    model = ModelDocumentParser().parse(doc)

    assert not model.get("a").is_abstract
    assert model.get("b").is_abstract
    assert not model.get("g").is_disjoint
    assert model.get("g").is_covering
