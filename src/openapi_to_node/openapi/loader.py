"""Loads OpenAPI documents and override files from disk.

JSON is a subset of YAML, so both go through ``yaml.safe_load``.
"""

from pathlib import Path

import yaml

from openapi_to_node.errors import DocumentLoadError


def _read(file_path: Path):
    text = file_path.read_text(encoding="utf-8")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"{file_path}: {e}") from e


def load_document(file_path: Path) -> dict:
    """Read an OpenAPI document into a plain dict."""
    doc = _read(file_path)
    if not isinstance(doc, dict):
        raise DocumentLoadError(f"{file_path}: document root must be a mapping")
    if "openapi" not in doc and "swagger" not in doc:
        raise DocumentLoadError(f"{file_path}: missing 'openapi' version marker")
    return doc


def load_overrides(file_path: Path) -> list[dict]:
    """Read a list of ``{find, replace}`` override rules."""
    data = _read(file_path)
    if data is None:
        return []
    if not isinstance(data, list):
        raise DocumentLoadError(f"{file_path}: overrides must be a list of rules")
    for index, rule in enumerate(data):
        if not isinstance(rule, dict) or "find" not in rule or "replace" not in rule:
            raise DocumentLoadError(f"{file_path}: rule #{index} needs 'find' and 'replace'")
    return data
