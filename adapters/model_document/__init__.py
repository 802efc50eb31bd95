"""
JSON / YAML model documents.
"""

from .parser import ModelDocumentParser, load_model_document

__all__ = ["ModelDocumentParser", "load_model_document"]
