from __future__ import annotations

import hashlib

from uml_types import HashString


def stable_id(*parts: str) -> HashString:
    """Deterministic element id for documents that omit one."""
    s = "/".join(parts)
    return HashString("id_" + hashlib.sha1(s.encode("utf-8")).hexdigest()[:16])


__all__ = ["stable_id"]
