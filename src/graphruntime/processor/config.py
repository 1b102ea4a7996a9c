"""
Runtime configuration.

Scheduling settings come from environment variables; the set of modules
comes from an optional YAML file:

    modules:
      - id: crawler
        type: crawler
        max_depth: 9
      - id: people
        type: crawler
        max_depth: 3
        label: Person

Removing an entry from the file retires that module: its record on the
anchor node is purged on the next start.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from graphruntime.crawler.crawler import DEFAULT_MAX_DEPTH
from graphruntime.crawler.module import CrawlerModule
from graphruntime.runtime.module import RuntimeModule

__all__ = ["MODULE_TYPES", "get_config", "load_modules_file", "build_modules", "default_modules"]

MODULE_TYPES = {
    "crawler": {"max_depth", "label"},
}


def get_config() -> Dict[str, Any]:
    return {
        "delay_ms": int(os.environ.get("RUNTIME_DELAY_MS", "2000")),
        "initial_delay_ms": int(os.environ.get("RUNTIME_INITIAL_DELAY_MS", "1000")),
        "poll_interval": float(os.environ.get("RUNTIME_POLL_INTERVAL", "5.0")),
        "max_depth": int(os.environ.get("CRAWL_MAX_DEPTH", str(DEFAULT_MAX_DEPTH))),
    }


def load_modules_file(path) -> List[Dict[str, Any]]:
    """
    Read and validate module definitions from a YAML file.

    Raises:
        ValueError: If the file cannot be read or parsed, or on malformed
            entries, unknown types, bad settings or duplicate ids
    """
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ValueError(f"{path}: cannot read modules file: {e}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"{path}: invalid YAML: {e}") from e
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("modules") or []
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of modules")

    seen = set()
    entries = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: module #{index} is not a mapping")

        module_id = entry.get("id")
        module_type = entry.get("type", "crawler")
        if not module_id or not isinstance(module_id, str):
            raise ValueError(f"{path}: module #{index} has no id")
        if not isinstance(module_type, str) or module_type not in MODULE_TYPES:
            raise ValueError(f"{path}: module {module_id} has unknown type {module_type!r}")
        if module_id in seen:
            raise ValueError(f"{path}: duplicate module id {module_id}")

        unknown = set(entry) - {"id", "type"} - MODULE_TYPES[module_type]
        if unknown:
            raise ValueError(f"{path}: module {module_id} has unknown settings {sorted(unknown)}")

        depth = entry.get("max_depth", 0)
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise ValueError(f"{path}: module {module_id} has non-integer max_depth {depth!r}")
        if not isinstance(entry.get("label", ""), str):
            raise ValueError(f"{path}: module {module_id} has non-string label {entry['label']!r}")

        seen.add(module_id)
        entries.append({**entry, "type": module_type})

    return entries


def build_modules(entries: List[Dict[str, Any]], max_depth: Optional[int] = None) -> List[RuntimeModule]:
    """Instantiate modules from validated entries, in file order."""
    if max_depth is None:
        max_depth = get_config()["max_depth"]

    modules = []
    for entry in entries:
        # Only crawler modules exist so far
        modules.append(CrawlerModule(
            entry["id"],
            max_depth=int(entry.get("max_depth", max_depth)),
            label=entry.get("label"),
        ))
    return modules


def default_modules(max_depth: Optional[int] = None) -> List[RuntimeModule]:
    return build_modules([{"id": "crawler", "type": "crawler"}], max_depth=max_depth)
