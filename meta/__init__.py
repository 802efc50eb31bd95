"""
XMI/UML vocabulary used when reading OntoUML models from XMI files.
"""

from dataclasses import dataclass

from .xml_meta import XmlMetaModel
from .uml_meta import UmlMetaModel


@dataclass
class MetaBundle:
    xml: XmlMetaModel
    uml: UmlMetaModel


DEFAULT_META = MetaBundle(xml=XmlMetaModel(), uml=UmlMetaModel())

__all__ = [
    "XmlMetaModel",
    "UmlMetaModel",
    "MetaBundle",
    "DEFAULT_META",
]
