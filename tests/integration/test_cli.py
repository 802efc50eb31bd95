#!/usr/bin/env python3
"""
End-to-end tests for the ontouml-validate command line.
"""

import json

import pytest

from app.cli import EXIT_OK, EXIT_PROBLEMS, EXIT_UNUSABLE, build_parser, main, resolve_config
from core.problems import AntiPatternKind

VALID_YAML = """\
name: People
elements:
  - {type: class, id: person, name: Person, stereotype: kind, properties: "name: String"}
  - {type: class, id: man, name: Man, stereotype: subkind}
  - {type: class, id: woman, name: Woman, stereotype: subkind}
  - {type: generalization, id: gender, sources: [man, woman], target: person,
     disjoint: true, covering: true}
"""

FREE_ROLE_YAML = """\
name: Students
elements:
  - {type: class, id: person, name: Person, stereotype: kind}
  - {type: class, id: student, name: Student, stereotype: role}
  - {type: generalization, id: g, source: student, target: person}
"""


@pytest.fixture
def valid_model(tmp_path):
    path = tmp_path / "people.yaml"
    path.write_text(VALID_YAML, encoding="utf-8")
    return str(path)


@pytest.fixture
def free_role_model(tmp_path):
    path = tmp_path / "students.yaml"
    path.write_text(FREE_ROLE_YAML, encoding="utf-8")
    return str(path)


def test_clean_model(valid_model, capsys):
    assert main([valid_model, "--antipatterns"]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "No problems found"


def test_problems_exit_status(free_role_model, capsys):
    assert main([free_role_model]) == EXIT_PROBLEMS

    out = capsys.readouterr().out
    assert "InvalidRole" in out
    assert "Student (student)" in out
    assert "1 error(s), 0 anti-pattern(s)" in out


def test_json_output(free_role_model, capsys):
    assert main([free_role_model, "--no-errors", "--only", "FreeRole", "--format", "json"]) == EXIT_PROBLEMS

    rows = json.loads(capsys.readouterr().out)
    assert rows == [{
        "category": "Anti-Pattern",
        "code": "FreeRole",
        "element_id": "student",
        "element": "Student (student)",
        "text": "FreeRole",
    }]


def test_nothing_selected(free_role_model, capsys):
    assert main([free_role_model, "--no-errors"]) == EXIT_OK
    assert "No problems found" in capsys.readouterr().out


def test_config_file(free_role_model, tmp_path, capsys):
    config = tmp_path / "validator.yaml"
    config.write_text("check_errors: false\ncheck_antipatterns: true\noutput_format: json\n",
                      encoding="utf-8")

    assert main([free_role_model, "--config", str(config)]) == EXIT_PROBLEMS
    codes = [row["code"] for row in json.loads(capsys.readouterr().out)]
    assert codes == ["FreeRole"]


def test_missing_model(tmp_path):
    assert main([str(tmp_path / "absent.yaml")]) == EXIT_UNUSABLE


def test_unreadable_xmi(tmp_path):
    path = tmp_path / "broken.uml"
    path.write_text("<not-closed", encoding="utf-8")

    assert main([str(path)]) == EXIT_UNUSABLE


def test_invalid_config(free_role_model, tmp_path):
    config = tmp_path / "validator.yaml"
    config.write_text("antipatterns: [Overlap]\n", encoding="utf-8")

    assert main([free_role_model, "--config", str(config)]) == EXIT_UNUSABLE


def test_resolve_config_overrides():
    args = build_parser().parse_args(["model.yaml", "--only", "binover", "--only", "HetColl", "--verbose"])
    cfg = resolve_config(args)

    assert cfg.check_errors is True
    assert cfg.check_antipatterns is True
    assert cfg.antipattern_kinds() == [AntiPatternKind.BIN_OVER, AntiPatternKind.HET_COLL]
    assert cfg.log_level == "DEBUG"
    assert cfg.output_format == "table"


def test_unknown_only_name_rejected(free_role_model):
    assert main([free_role_model, "--only", "Nope"]) == EXIT_UNUSABLE


def test_unknown_log_level_in_config(free_role_model, tmp_path):
    config = tmp_path / "validator.yaml"
    config.write_text("log_level: LOUD\n", encoding="utf-8")

    assert main([free_role_model, "--config", str(config)]) == EXIT_UNUSABLE


def test_model_not_utf8(tmp_path):
    path = tmp_path / "model.json"
    path.write_bytes(b'{"name": "\xff\xfe"}')

    assert main([str(path)]) == EXIT_UNUSABLE
