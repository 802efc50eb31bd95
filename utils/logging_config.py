import logging
from typing import Optional, Union


def configure_logging(level: Union[int, str] = logging.INFO, fmt: Optional[str] = None) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")
    if fmt is None:
        fmt = '%(levelname)s:%(name)s:%(message)s'
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    root.setLevel(level)
