from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .errors import MalformedConfigurationError
from .models import MappingTable, ServiceDefinition, TrackedCall
from .normalize import normalize_catalogue, normalize_mapping_table, normalize_tracked_calls


YAML_SUFFIXES = (".yaml", ".yml")
JSON_LINES_SUFFIXES = (".jsonl", ".ndjson")


def load_document(path: str) -> Any:
    p = Path(path)
    text = p.read_text("utf-8")
    if p.suffix.lower() in YAML_SUFFIXES:
        return yaml.safe_load(text)
    return json.loads(text)


def load_catalogue(path: str) -> list[ServiceDefinition]:
    return normalize_catalogue(load_document(path))


def load_mapping_table(path: str) -> MappingTable:
    return normalize_mapping_table(load_document(path))


def parse_tracked_calls(text: str, json_lines: bool = False) -> list[TrackedCall]:
    """Parse tracked calls from a JSON list or from one JSON object per line."""
    stripped = text.strip()
    if not stripped:
        return []
    if json_lines or not stripped.startswith("["):
        records = []
        for lineno, line in enumerate(stripped.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise MalformedConfigurationError(f"invalid JSON: {e.msg}", path=f"calls line {lineno}") from e
        return normalize_tracked_calls(records)
    return normalize_tracked_calls(json.loads(stripped))


def load_tracked_calls(path: str) -> list[TrackedCall]:
    p = Path(path)
    text = p.read_text("utf-8")
    if p.suffix.lower() in YAML_SUFFIXES:
        return normalize_tracked_calls(yaml.safe_load(text) or [])
    return parse_tracked_calls(text, json_lines=p.suffix.lower() in JSON_LINES_SUFFIXES)
