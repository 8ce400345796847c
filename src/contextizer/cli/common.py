"""
Helpers shared by CLI commands: locating the graph and parsing inputs.
"""

import importlib
import json
import sys
from pathlib import Path
from typing import Any

import typer

from contextizer.core.contextizer import Contextizer


def load_contextizer(reference: str, project_dir: Path) -> Contextizer:
    """
    Import a Contextizer from ``module:attribute``.

    The attribute may be a Contextizer instance or a zero-argument factory
    returning one. ``project_dir`` is put on the import path first.
    """
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter(f"Expected MODULE:ATTRIBUTE, got '{reference}'")

    project = str(project_dir.resolve())
    if project not in sys.path:
        sys.path.insert(0, project)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Cannot import module '{module_name}': {e}") from e

    try:
        obj = getattr(module, attr)
    except AttributeError as e:
        raise typer.BadParameter(f"Module '{module_name}' has no attribute '{attr}'") from e

    if not isinstance(obj, Contextizer) and callable(obj):
        obj = obj()
    if not isinstance(obj, Contextizer):
        raise typer.BadParameter(f"'{reference}' is not a Contextizer (got {type(obj).__name__})")
    return obj


def item_kind(item: object) -> str:
    """Short kind label for an item: input, constant or function."""
    return type(item).__name__.removesuffix("Item").lower()


def parse_inputs(pairs: list[str] | None, as_json: bool = False) -> dict[str, Any]:
    """Turn ``key=value`` pairs into an input bag, optionally JSON-decoding values."""
    inputs: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Inputs must look like key=value, got '{pair}'")
        if as_json:
            try:
                inputs[key] = json.loads(raw)
            except json.JSONDecodeError as e:
                raise typer.BadParameter(f"Input '{key}' is not valid JSON: {e}") from e
        else:
            inputs[key] = raw
    return inputs
