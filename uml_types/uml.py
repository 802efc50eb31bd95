#!/usr/bin/env python3
"""
UML-specific types and enums for the OntoUML class-diagram model.
"""

from typing import NewType
from enum import Enum

# ---------- Type aliases for UML elements ----------
ElementId = NewType('ElementId', str)
ElementName = NewType('ElementName', str)
StereotypeText = NewType('StereotypeText', str)
MultiplicityText = NewType('MultiplicityText', str)

# ---------- Enums for UML elements ----------
class ElementKind(Enum):
    PACKAGE = "package"
    CLASS = "class"
    INSTANCE = "instance"
    GENERALIZATION = "generalization"
    ASSOCIATION = "association"
    DEPENDENCY = "dependency"
    COMMENT = "comment"
    COMMENT_LINK = "commentLink"

class AggregationType(Enum):
    NONE = "none"
    SHARED = "shared"
    COMPOSITE = "composite"

class Navigability(Enum):
    """Navigability marker of one association end."""
    UNSPECIFIED = "unspecified"
    NAVIGABLE = "navigable"
    NON_NAVIGABLE = "non-navigable"
