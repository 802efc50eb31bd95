from __future__ import annotations

from typing import Optional


class ModelLoadError(ValueError):
    """A model document could not be read or is not a model."""

    def __init__(self, message: str, path: Optional[str] = None, element_id: Optional[str] = None) -> None:
        self.path = path
        self.element_id = element_id
        where = ""
        if path:
            where += f"{path}: "
        if element_id:
            where += f"[{element_id}] "
        super().__init__(f"{where}{message}")


__all__ = ["ModelLoadError"]
