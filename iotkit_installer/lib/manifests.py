from __future__ import annotations

import copy
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml


def _manifest_root() -> Path:
    # iotkit_installer/lib/manifests.py -> iotkit_installer/manifests
    return Path(__file__).resolve().parents[1] / "manifests"


@lru_cache(maxsize=None)
def _parse(rel_path: str) -> Dict[str, Any]:
    p = _manifest_root() / rel_path.lstrip("/")
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest must be a mapping/dict: {p}")
    return data


def load_yaml_rel(rel_path: str) -> Dict[str, Any]:
    """Load a YAML manifest shipped with the package (manifests/...).

    Each caller gets its own copy; the parsed file is cached.
    """
    return copy.deepcopy(_parse(rel_path))


def load_profile(profile_id: str) -> Dict[str, Any]:
    return load_yaml_rel(f"profiles/{profile_id}.yaml")


def load_core_manifest() -> Dict[str, Any]:
    return load_yaml_rel("core.yaml")


def load_components_manifest() -> Dict[str, Any]:
    return load_yaml_rel("components.yaml")
