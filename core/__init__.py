#!/usr/bin/env python3
"""
Core OntoUML model and validation.
"""

from .uml_model import (
    UmlModel, UmlClass, UmlInstance, UmlGeneralization, UmlAssociation,
    UmlDependency, UmlPackage, UmlComment, UmlCommentLink,
)
from .taxonomy import ClassStereotype, AssociationStereotype
from .multiplicity import Multiplicity, parse_multiplicity
from .problems import (
    ValidationError, AntiPattern, ValidationProblem,
    ErrorKind, RelationDefect, AntiPatternKind, Severity,
)
from .graph import ModelGraph
from .validator import OntoUmlValidator, validate

__all__ = [
    'UmlModel', 'UmlClass', 'UmlInstance', 'UmlGeneralization', 'UmlAssociation',
    'UmlDependency', 'UmlPackage', 'UmlComment', 'UmlCommentLink',
    'ClassStereotype', 'AssociationStereotype',
    'Multiplicity', 'parse_multiplicity',
    'ValidationError', 'AntiPattern', 'ValidationProblem',
    'ErrorKind', 'RelationDefect', 'AntiPatternKind', 'Severity',
    'ModelGraph', 'OntoUmlValidator', 'validate',
]
