#!/usr/bin/env python3
"""
Association-end multiplicity parsing.

Grammar: ``*``, ``n``, ``l..u`` and ``l..*``. Parsing never raises; text that
does not match yields ``None`` and callers report it as a diagnostic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_RANGE_RE = re.compile(r'^(\d+)\s*\.\.\s*(\d+|\*)$')
_SINGLE_RE = re.compile(r'^\d+$')


@dataclass(frozen=True)
class Multiplicity:
    lower: int
    upper: Optional[int]  # None means unbounded

    @property
    def is_consistent(self) -> bool:
        return self.upper is None or self.upper >= self.lower

    @property
    def is_exactly_one(self) -> bool:
        return self.lower == 1 and self.upper == 1

    @property
    def is_unbounded(self) -> bool:
        return self.upper is None

    def __str__(self) -> str:
        upper = "*" if self.upper is None else str(self.upper)
        if self.upper == self.lower:
            return upper
        return f"{self.lower}..{upper}"


def parse_multiplicity(text: Optional[str]) -> Optional[Multiplicity]:
    s = (text or "").strip()
    if not s:
        return None
    if s == "*":
        return Multiplicity(0, None)
    if _SINGLE_RE.match(s):
        n = int(s)
        return Multiplicity(n, n)
    m = _RANGE_RE.match(s)
    if not m:
        return None
    lower = int(m.group(1))
    upper = None if m.group(2) == "*" else int(m.group(2))
    return Multiplicity(lower, upper)


__all__ = ["Multiplicity", "parse_multiplicity"]
