#!/usr/bin/env python3
"""
Validation problems produced by the structural and anti-pattern passes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from uml_types import ElementId


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


class ErrorKind(Enum):
    INVALID_STEREOTYPE = "InvalidStereotype"
    INVALID_SUBTYPING = "InvalidSubtyping"
    INVALID_RELATION = "InvalidRelation"
    INVALID_IDENTITY = "InvalidIdentity"
    INVALID_ROLE = "InvalidRole"
    INVALID_RELATOR = "InvalidRelator"
    INVALID_PHASE = "InvalidPhase"
    INVALID_NONABSTRACT_MIXIN = "InvalidNonabstractMixin"
    INVALID_MISSING_CHARACTERIZATION = "InvalidMissingCharacterization"
    DANGLING_REFERENCE = "DanglingReference"


class RelationDefect(Enum):
    """Refines ``InvalidRelation``."""
    MULTIPLICITIES = "Multiplicities"
    ENDPOINTS = "Endpoints"


class AntiPatternKind(Enum):
    BIN_OVER = "BinOver"
    DEC_INT = "DecInt"
    DEP_PHASE = "DepPhase"
    FREE_ROLE = "FreeRole"
    GS_RIG = "GSRig"
    HET_COLL = "HetColl"
    HOMO_FUNC = "HomoFunc"
    MIX_RIG = "MixRig"
    MULT_DEP = "MultDep"
    REL_RIG = "RelRig"
    UNDEF_FORMAL = "UndefFormal"
    UNDEF_PHASE = "UndefPhase"

    @classmethod
    def from_name(cls, name: str) -> "AntiPatternKind":
        for kind in cls:
            if kind.value.lower() == name.strip().lower():
                return kind
        raise ValueError(f"Unknown anti-pattern: {name}")


@dataclass(frozen=True)
class ValidationError:
    element_id: ElementId
    kind: ErrorKind
    message: str
    defect: Optional[RelationDefect] = None

    @property
    def severity(self) -> Severity:
        return Severity.ERROR

    @property
    def code(self) -> str:
        if self.defect is not None:
            return f"{self.kind.value}({self.defect.value})"
        return self.kind.value


@dataclass(frozen=True)
class AntiPattern:
    element_id: ElementId
    kind: AntiPatternKind

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def code(self) -> str:
        return self.kind.value


ValidationProblem = Union[ValidationError, AntiPattern]


__all__ = [
    "Severity", "ErrorKind", "RelationDefect", "AntiPatternKind",
    "ValidationError", "AntiPattern", "ValidationProblem",
]
