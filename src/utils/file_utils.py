"""File I/O and path utilities."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def ensure_directory(path: str | Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_yaml(path: str | Path) -> Any:
    """Load a YAML file and return its contents."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_json(path: str | Path) -> Any:
    """Load a JSON file and return its contents."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"JSON file not found: {path}")
    with open(path) as f:
        return json.load(f)


def load_data(path: str | Path) -> Any:
    """Load a YAML or JSON file, chosen by extension."""
    path = Path(path)
    ext = path.suffix.lower()
    if ext in (".yaml", ".yml"):
        return load_yaml(path)
    if ext == ".json":
        return load_json(path)
    raise ValueError(f"Unsupported data file format '{ext}'. Supported: .json, .yaml, .yml")


def write_text(text: str, path: str | Path) -> Path:
    """Write text to ``path``, creating parent directories."""
    path = Path(path)
    ensure_directory(path.parent)
    path.write_text(text, encoding="utf-8")
    logger.debug(f"Wrote {len(text)} chars to {path}")
    return path
