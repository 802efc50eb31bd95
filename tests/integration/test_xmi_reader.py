#!/usr/bin/env python3
"""
Integration tests reading OntoUML models from UML2 XMI files.
"""

import pytest

from adapters import ModelLoadError, load_model
from adapters.xmi import XmiModelReader, read_xmi_model
from core.uml_model import UmlAssociation, UmlComment, UmlCommentLink, UmlGeneralization
from core.validator import validate
from uml_types import Navigability

MARRIAGE_XMI = """<?xml version="1.0" encoding="UTF-8"?>
<xmi:XMI xmi:version="20131001"
         xmlns:xmi="http://www.omg.org/spec/XMI/20131001"
         xmlns:uml="http://www.eclipse.org/uml2/5.0.0/UML">
  <uml:Model xmi:id="model" name="Marriage">
    <ownedComment xmi:id="note" body="Marriage example" annotatedElement="marriage"/>
    <packagedElement xmi:type="uml:Package" xmi:id="pkg" name="people">
      <packagedElement xmi:type="uml:Class" xmi:id="person" name="Person">
        <eAnnotations source="ontouml"><details key="stereotype" value="kind"/></eAnnotations>
        <ownedAttribute xmi:id="person_name" name="name" type="string_t"/>
      </packagedElement>
      <packagedElement xmi:type="uml:Class" xmi:id="man" name="Man">
        <eAnnotations source="ontouml"><details key="stereotype" value="subkind"/></eAnnotations>
        <generalization xmi:id="gen_man" general="person"/>
      </packagedElement>
      <packagedElement xmi:type="uml:Class" xmi:id="woman" name="Woman">
        <eAnnotations source="ontouml"><details key="stereotype" value="subkind"/></eAnnotations>
        <generalization xmi:id="gen_woman" general="person"/>
      </packagedElement>
      <packagedElement xmi:type="uml:GeneralizationSet" xmi:id="gender" name="gender"
                       isDisjoint="true" isCovering="true" generalization="gen_man gen_woman"/>
    </packagedElement>
    <packagedElement xmi:type="uml:Class" xmi:id="husband" name="Husband" stereotype="role">
      <generalization xmi:id="gen_husband" general="man"/>
    </packagedElement>
    <packagedElement xmi:type="uml:Class" xmi:id="wife" name="Wife" stereotype="role">
      <generalization xmi:id="gen_wife" general="woman"/>
    </packagedElement>
    <packagedElement xmi:type="uml:Class" xmi:id="marriage" name="Marriage">
      <eAnnotations source="ontouml"><details key="stereotype" value="relator"/></eAnnotations>
    </packagedElement>
    <packagedElement xmi:type="uml:Association" xmi:id="m_husband" memberEnd="m_husband_src m_husband_dst">
      <eAnnotations source="ontouml"><details key="stereotype" value="mediation"/></eAnnotations>
      <ownedEnd xmi:id="m_husband_src" type="marriage">
        <lowerValue xmi:type="uml:LiteralInteger" value="1"/>
        <upperValue xmi:type="uml:LiteralUnlimitedNatural" value="*"/>
      </ownedEnd>
      <ownedEnd xmi:id="m_husband_dst" type="husband">
        <lowerValue xmi:type="uml:LiteralInteger" value="1"/>
        <upperValue xmi:type="uml:LiteralUnlimitedNatural" value="1"/>
      </ownedEnd>
    </packagedElement>
    <packagedElement xmi:type="uml:Association" xmi:id="m_wife" memberEnd="m_wife_src m_wife_dst">
      <eAnnotations source="ontouml"><details key="stereotype" value="mediation"/></eAnnotations>
      <ownedEnd xmi:id="m_wife_src" type="marriage">
        <lowerValue xmi:type="uml:LiteralInteger" value="1"/>
        <upperValue xmi:type="uml:LiteralUnlimitedNatural" value="-1"/>
      </ownedEnd>
      <ownedEnd xmi:id="m_wife_dst" type="wife">
        <lowerValue xmi:type="uml:LiteralInteger" value="1"/>
        <upperValue xmi:type="uml:LiteralUnlimitedNatural" value="1"/>
      </ownedEnd>
    </packagedElement>
    <packagedElement xmi:type="uml:PrimitiveType" xmi:id="string_t" name="String"/>
  </uml:Model>
</xmi:XMI>
"""

CLASS_OWNED_END_XMI = """<?xml version="1.0" encoding="UTF-8"?>
<uml:Model xmlns:xmi="http://www.omg.org/XMI" xmlns:uml="http://www.eclipse.org/uml2/5.0.0/UML"
           xmi:id="m" name="Garage">
  <packagedElement xmi:type="uml:Class" xmi:id="A" name="Garage" stereotype="kind">
    <ownedAttribute xmi:id="a_end" name="cars" type="B" association="r">
      <lowerValue xmi:type="uml:LiteralInteger"/>
      <upperValue xmi:type="uml:LiteralUnlimitedNatural" value="-1"/>
    </ownedAttribute>
  </packagedElement>
  <packagedElement xmi:type="uml:Class" xmi:id="B" name="Car" stereotype="kind" isAbstract="true"/>
  <packagedElement xmi:type="uml:Association" xmi:id="r" memberEnd="b_end a_end">
    <ownedEnd xmi:id="b_end" type="A" aggregation="shared"/>
  </packagedElement>
</uml:Model>
"""


@pytest.fixture
def marriage_path(tmp_path):
    path = tmp_path / "marriage.uml"
    path.write_text(MARRIAGE_XMI, encoding="utf-8")
    return str(path)


def test_reads_classes_and_stereotypes(marriage_path):
    model = read_xmi_model(marriage_path)

    assert model.name == "Marriage"
    stereotypes = {c.id: c.stereotype for c in model.classes()}
    assert stereotypes == {
        "person": "kind", "man": "subkind", "woman": "subkind",
        "husband": "role", "wife": "role", "marriage": "relator",
    }
    assert model.get("person").properties == "name: String"


def test_packages_keep_containment(marriage_path):
    model = read_xmi_model(marriage_path)

    assert model.contained[0] == "note"
    assert model.contained[2:] == [
        "pkg", "husband", "gen_husband", "wife", "gen_wife", "marriage", "m_husband", "m_wife",
    ]
    assert model.get("pkg").contained == ["person", "man", "woman", "gender"]


def test_generalization_sets(marriage_path):
    model = read_xmi_model(marriage_path)

    gender = model.get("gender")
    assert isinstance(gender, UmlGeneralization)
    assert gender.sources == ["man", "woman"]
    assert gender.targets == ["person"]
    assert gender.set_name == "gender"
    assert gender.is_disjoint and gender.is_covering
    assert model.get("gen_man") is None

    husband = model.get("gen_husband")
    assert (husband.sources, husband.targets) == (["husband"], ["man"])
    assert husband.is_singleton


def test_association_ends(marriage_path):
    model = read_xmi_model(marriage_path)

    assoc = model.get("m_wife")
    assert isinstance(assoc, UmlAssociation)
    assert (assoc.source, assoc.target) == ("marriage", "wife")
    assert assoc.stereotype == "mediation"
    assert (assoc.source_multiplicity, assoc.target_multiplicity) == ("1..*", "1")
    assert model.get("m_husband").source_multiplicity == "1..*"


def test_comments(marriage_path):
    model = read_xmi_model(marriage_path)

    comment = model.get("note")
    assert isinstance(comment, UmlComment)
    assert comment.text == "Marriage example"
    links = [e for e in model.elements.values() if isinstance(e, UmlCommentLink)]
    assert [(link.source, link.target) for link in links] == [("note", "marriage")]


def test_marriage_is_valid(marriage_path):
    assert validate(load_model(marriage_path), check_errors=True) == []


def test_class_owned_ends(tmp_path):
    path = tmp_path / "garage.xmi"
    path.write_text(CLASS_OWNED_END_XMI, encoding="utf-8")

    model = XmiModelReader().read(str(path))
    garage = model.get("A")
    assert garage.properties == ""
    assert model.get("B").is_abstract

    assoc = model.get("r")
    assert (assoc.source, assoc.target) == ("A", "B")
    assert assoc.source_multiplicity == ""
    assert assoc.target_multiplicity == "0..*"
    assert assoc.target_role == "cars"
    assert assoc.target_navigability is Navigability.NAVIGABLE
    assert assoc.source_navigability is Navigability.UNSPECIFIED
    assert assoc.source_aggregation.value == "shared"


@pytest.mark.parametrize("bounds,expected", [
    ('<lowerValue xmi:type="uml:LiteralInteger" value="0"/>', "0..1"),
    ('<lowerValue xmi:type="uml:LiteralInteger" value="1"/>', "1"),
    ('<upperValue xmi:type="uml:LiteralUnlimitedNatural" value="*"/>', "1..*"),
])
def test_missing_bound_defaults_to_one(tmp_path, bounds, expected):
    path = tmp_path / "bounds.xmi"
    path.write_text(
        '<uml:Model xmlns:xmi="http://www.omg.org/XMI" xmlns:uml="http://www.eclipse.org/uml2/5.0.0/UML"'
        ' xmi:id="m" name="Bounds">'
        '<packagedElement xmi:type="uml:Class" xmi:id="A" name="A" stereotype="kind"/>'
        '<packagedElement xmi:type="uml:Association" xmi:id="r" memberEnd="a_end b_end">'
        f'<ownedEnd xmi:id="a_end" type="A">{bounds}</ownedEnd>'
        '<ownedEnd xmi:id="b_end" type="A"/>'
        '</packagedElement>'
        '</uml:Model>',
        encoding="utf-8",
    )

    assert read_xmi_model(str(path)).get("r").source_multiplicity == expected


def test_malformed_xml(tmp_path):
    path = tmp_path / "broken.xmi"
    path.write_text("<xmi:XMI", encoding="utf-8")

    with pytest.raises(ModelLoadError, match="XML parse error"):
        read_xmi_model(str(path))


def test_missing_model_element(tmp_path):
    path = tmp_path / "empty.xmi"
    path.write_text('<xmi:XMI xmlns:xmi="http://www.omg.org/XMI"/>', encoding="utf-8")

    with pytest.raises(ModelLoadError, match="no uml:Model"):
        read_xmi_model(str(path))


def test_missing_file(tmp_path):
    with pytest.raises(ModelLoadError):
        load_model(str(tmp_path / "absent.uml"))
