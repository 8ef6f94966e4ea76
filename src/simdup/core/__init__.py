"""Configuration, logging and file helpers used around the simdup core."""

from .config import Config, load_config
from .io import read_texts, write_jsonl
from .log import get_logger

__all__ = [
    "Config",
    "load_config",
    "read_texts",
    "write_jsonl",
    "get_logger",
]
