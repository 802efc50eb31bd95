from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

import yaml

from core.problems import AntiPatternKind

OUTPUT_FORMATS = ("table", "json")


@dataclass
class ValidatorConfig:
    # Phases
    check_errors: bool = True
    check_antipatterns: bool = False
    antipatterns: Optional[List[str]] = None   # None = every detector, else names like "BinOver"

    # Output
    output_format: str = "table"               # "table", "json"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.output_format}")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        # Fail early on unknown detector names
        self.antipattern_kinds()

    def antipattern_kinds(self) -> Optional[List[AntiPatternKind]]:
        if self.antipatterns is None:
            return None
        return [AntiPatternKind.from_name(name) for name in self.antipatterns]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidatorConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


DEFAULT_CONFIG = ValidatorConfig()


def load_config(path: str) -> ValidatorConfig:
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        if path.lower().endswith(('.yml', '.yaml')):
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Cannot parse configuration {path}: {e}") from e
        else:
            data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration must be a mapping: {path}")
    return ValidatorConfig.from_dict(data)


__all__ = [
    "OUTPUT_FORMATS",
    "ValidatorConfig",
    "DEFAULT_CONFIG",
    "load_config",
]
