#!/usr/bin/env python3
"""
Entry point of OntoUML validation.

Each run builds a fresh ``ModelGraph`` from the model, runs the selected
phases and returns the problems: structural errors first, then anti-patterns.
Nothing is cached between runs.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from core.uml_model import UmlModel
from core.graph import ModelGraph
from core.structural import validate_structure
from core.antipatterns import validate_antipatterns
from core.problems import AntiPatternKind, ValidationProblem

logger = logging.getLogger(__name__)


class OntoUmlValidator:
    def __init__(self, model: UmlModel, check_errors: bool = True,
                 check_antipatterns: bool = False,
                 antipatterns: Optional[Iterable[AntiPatternKind]] = None) -> None:
        self.model = model
        self.check_errors = check_errors
        self.check_antipatterns = check_antipatterns
        self.antipatterns = list(antipatterns) if antipatterns is not None else None

    def validate(self) -> List[ValidationProblem]:
        problems: List[ValidationProblem] = []
        if not (self.check_errors or self.check_antipatterns):
            return problems

        graph = ModelGraph.build(self.model)
        if self.check_errors:
            problems.extend(validate_structure(graph))
        if self.check_antipatterns:
            problems.extend(validate_antipatterns(graph, self.antipatterns))

        logger.info("Validated %s: %d problem(s)", self.model.name, len(problems))
        return problems


def validate(model: UmlModel, check_errors: bool = True, check_antipatterns: bool = False,
             antipatterns: Optional[Iterable[AntiPatternKind]] = None) -> List[ValidationProblem]:
    return OntoUmlValidator(model, check_errors, check_antipatterns, antipatterns).validate()


__all__ = ["OntoUmlValidator", "validate"]
