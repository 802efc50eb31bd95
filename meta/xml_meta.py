from dataclasses import dataclass, field
from typing import Tuple

Namespace = str
AttributeName = str


@dataclass
class XmlMetaModel:
    xmi_ns: Namespace = "http://www.omg.org/XMI"
    # Tools differ in the XMI version they declare
    xmi_ns_aliases: Tuple[Namespace, ...] = field(default_factory=lambda: (
        "http://www.omg.org/XMI",
        "http://www.omg.org/spec/XMI/20131001",
        "http://www.omg.org/spec/XMI/20110701",
    ))

    def xmi_id(self, xmi_ns: Namespace) -> AttributeName:
        return f"{{{xmi_ns}}}id"

    def xmi_idref(self, xmi_ns: Namespace) -> AttributeName:
        return f"{{{xmi_ns}}}idref"

    def xmi_type(self, xmi_ns: Namespace) -> AttributeName:
        return f"{{{xmi_ns}}}type"
