#!/usr/bin/env python3
"""
CLI entrypoint for the OntoUML validator.

Usage:
  python -m app.cli <model.(json|yaml|uml|xmi)> [flags]

Flags:
  --config PATH            YAML/JSON validator configuration
  --no-errors              skip structural validation
  --antipatterns           run anti-pattern detection
  --only NAME              restrict anti-patterns (repeatable, implies --antipatterns)
  --format table|json
  --verbose

Exit status: 0 no problems, 1 problems found, 2 model or configuration unusable.
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from app.config import DEFAULT_CONFIG, OUTPUT_FORMATS, ValidatorConfig, load_config
from app.report import ValidationReport
from adapters import ModelLoadError, load_model
from core.validator import validate
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PROBLEMS = 1
EXIT_UNUSABLE = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ontouml-validate", description="Validate an OntoUML class diagram")
    ap.add_argument("model")
    ap.add_argument("--config")
    ap.add_argument("--no-errors", dest="check_errors", action="store_false", default=None)
    ap.add_argument("--antipatterns", dest="check_antipatterns", action="store_true", default=None)
    ap.add_argument("--only", action="append", metavar="NAME")
    ap.add_argument("--format", dest="output_format", choices=OUTPUT_FORMATS)
    ap.add_argument("--verbose", action="store_true")
    return ap


def resolve_config(args: argparse.Namespace) -> ValidatorConfig:
    cfg = load_config(args.config) if args.config else dataclasses.replace(DEFAULT_CONFIG)
    overrides = {}
    if args.check_errors is not None:
        overrides["check_errors"] = args.check_errors
    if args.check_antipatterns is not None:
        overrides["check_antipatterns"] = args.check_antipatterns
    if args.only:
        overrides["check_antipatterns"] = True
        overrides["antipatterns"] = args.only
    if args.output_format:
        overrides["output_format"] = args.output_format
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return dataclasses.replace(cfg, **overrides)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv if argv is not None else sys.argv[1:])

    try:
        cfg = resolve_config(args)
    except (OSError, ValueError) as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        return EXIT_UNUSABLE
    configure_logging(cfg.log_level)

    try:
        model = load_model(args.model)
    except ModelLoadError as e:
        logger.error("Cannot load model: %s", e)
        return EXIT_UNUSABLE

    problems = validate(
        model,
        check_errors=cfg.check_errors,
        check_antipatterns=cfg.check_antipatterns,
        antipatterns=cfg.antipattern_kinds(),
    )
    report = ValidationReport.from_problems(problems, model)
    if cfg.output_format == "json":
        print(report.to_json())
    else:
        print(report.render_table())
    return EXIT_OK if report.is_empty else EXIT_PROBLEMS


if __name__ == "__main__":
    raise SystemExit(main())
