"""
UML2 XMI input.
"""

from .reader import XmiModelReader, read_xmi_model

__all__ = ["XmiModelReader", "read_xmi_model"]
