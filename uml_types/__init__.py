#!/usr/bin/env python3
"""
Types module for the OntoUML validator.
Centralized type definitions organized by domain.
"""

# Public types export
from .base import (
    TypedList, TypedDict,
    XmlValue, HashString
)

from .uml import (
    ElementId, ElementName, StereotypeText, MultiplicityText,
    ElementKind, AggregationType, Navigability
)

__all__ = [
    # Base types
    'TypedList', 'TypedDict', 'XmlValue', 'HashString',

    # UML types
    'ElementId', 'ElementName', 'StereotypeText', 'MultiplicityText',
    'ElementKind', 'AggregationType', 'Navigability',
]
