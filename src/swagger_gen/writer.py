"""Serialize generated documents to JSON or YAML."""

import json
from pathlib import Path

import yaml

from swagger_gen.model.openapi import Document

FORMATS = ("json", "yaml")


def to_dict(document: Document) -> dict:
    """Plain-data form of ``document``: aliased keys, ``None`` dropped, extensions merged."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_json(document: Document, indent: int = 2) -> str:
    return json.dumps(to_dict(document), indent=indent, ensure_ascii=False)


def to_yaml(document: Document) -> str:
    return yaml.safe_dump(to_dict(document), sort_keys=False, allow_unicode=True)


def detect_format(path: Path) -> str:
    return "yaml" if path.suffix.lower() in (".yaml", ".yml") else "json"


def write_document(document: Document, path: Path, fmt: str | None = None) -> Path:
    """Write ``document`` to ``path``; the format follows the suffix unless given."""
    path = Path(path)
    fmt = fmt or detect_format(path)
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported format: {fmt}")

    text = to_yaml(document) if fmt == "yaml" else to_json(document) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
