"""
Adapters turning model files into an in-memory UmlModel.

- model_document: JSON / YAML documents
- xmi: UML2 XMI with OntoUML stereotypes in eAnnotations
"""

import os

from core.uml_model import UmlModel
from .errors import ModelLoadError
from .model_document import load_model_document
from .xmi import read_xmi_model

_XMI_SUFFIXES = (".uml", ".xmi", ".xml")


def load_model(path: str) -> UmlModel:
    """Load a model, choosing the adapter by file extension."""
    if path.lower().endswith(_XMI_SUFFIXES):
        return read_xmi_model(path)
    if not os.path.isfile(path):
        raise ModelLoadError("model file not found", path=path)
    return load_model_document(path)


__all__ = ["ModelLoadError", "load_model", "load_model_document", "read_xmi_model"]
