"""Layered settings for the contacts backend.

Later layers win, key by key, over earlier ones:

1. built-in defaults
2. ``~/.config/contacts/contacts.yaml`` (or an explicit path)
3. ``CONTACTS_`` environment variables, ``__`` separating nested keys,
   e.g. ``CONTACTS_COMPONENTS__SUBSTRATE__POSTGRES__POOL_SIZE=9``
4. explicit parameters from the caller
"""

from __future__ import annotations

import copy
import os
from functools import reduce
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml

from .defaults import BUILTIN_DEFAULTS
from .models import ContactsSettings

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "contacts" / "contacts.yaml"
ENV_PREFIX = "CONTACTS_"

_SCALARS = (bool, int, float, list, dict, type(None))


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
) -> ContactsSettings:
    """Resolve and validate settings from every layer."""
    return ContactsSettings.model_validate(
        load_config(cli_params=cli_params, environ=environ, config_path=config_path)
    )


def load_config(
    *,
    cli_params: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_path: str | Path | None = None,
    defaults: Mapping[str, Any] | None = None,
    env_prefix: str = ENV_PREFIX,
) -> dict[str, Any]:
    """Return the merged, unvalidated settings mapping."""
    layers = (
        BUILTIN_DEFAULTS if defaults is None else defaults,
        _read_yaml(Path(config_path) if config_path else DEFAULT_CONFIG_PATH),
        _env_tree(os.environ if environ is None else environ, env_prefix),
        cli_params or {},
    )
    return reduce(_overlay, layers, {})


def _read_yaml(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        return {}
    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    if document is None:
        return {}
    if not isinstance(document, Mapping):
        raise ValueError(f"{path} must contain a top-level mapping")
    return document


def _env_tree(environ: Mapping[str, str], prefix: str) -> dict[str, Any]:
    """Nest prefixed variables by their ``__``-separated lower-cased names."""
    tree: dict[str, Any] = {}
    for name, raw in environ.items():
        if not name.startswith(prefix):
            continue
        *parents, leaf = [part.lower() for part in name[len(prefix) :].split("__")]
        if not leaf or not all(parents):
            continue
        node = tree
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = _parse_env_value(raw)
    return tree


def _parse_env_value(raw: str) -> Any:
    """Read booleans, numbers, null and JSON-style collections; keep other text."""
    if not raw.strip():
        return raw
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    return value if isinstance(value, _SCALARS) else raw


def _overlay(base: Mapping[str, Any], top: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated by ``top``, merging nested mappings key by key."""
    merged = {str(key): copy.deepcopy(value) for key, value in base.items()}
    for key, value in top.items():
        below = merged.get(key)
        if isinstance(below, Mapping) and isinstance(value, Mapping):
            merged[key] = _overlay(below, value)
        elif isinstance(value, Mapping):
            merged[key] = _overlay({}, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
