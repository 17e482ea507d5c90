from __future__ import annotations

import os
from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..core.errors import ConfigError
from .models import ProviderConfig

ENV_PREFIX = "S3PROV_"


def _parse_scalar(value: str) -> Any:
    v = value.strip()
    if v.lower() in {"true", "false"}:
        return v.lower() == "true"
    try:
        if "." in v:
            return float(v)
        return int(v)
    except ValueError:
        return value


def _set_by_path(data: dict, path: list[str], value: Any) -> None:
    """Set a nested value, creating intermediate mappings as needed."""
    cur = data
    for key in path[:-1]:
        if not isinstance(cur.get(key), dict):
            cur[key] = {}
        cur = cur[key]
    cur[path[-1]] = value


# Path segments under these prefixes are user keys and keep their case
_CASE_SENSITIVE_PATHS = (("default_tags", "tags"),)


def _env_keypath(name: str) -> tuple[list[str], bool]:
    """Split an env var name into a config path.

    Returns the path and whether it ends inside a user-keyed mapping, where
    the key keeps its case and the value stays a string.
    """
    keypath: list[str] = []
    user_keyed = False
    for segment in (p for p in name.split("__") if p):
        user_keyed = any(tuple(keypath[: len(prefix)]) == prefix for prefix in _CASE_SENSITIVE_PATHS)
        keypath.append(segment if user_keyed else segment.lower())
    return keypath, user_keyed


def _apply_env_overrides(cfg: dict, env: Mapping[str, str]) -> None:
    for k, v in env.items():
        if not k.startswith(ENV_PREFIX):
            continue
        keypath, user_keyed = _env_keypath(k[len(ENV_PREFIX) :])
        if not keypath:
            continue
        _set_by_path(cfg, keypath, v if user_keyed else _parse_scalar(v))


def _parse_set_item(item: str) -> tuple[list[str], Any]:
    """Parse a single --set "key.path=value" string.

    The value goes through YAML so lists and mappings can be given inline.
    """
    if "=" not in item:
        raise ConfigError(f"Invalid --set override (missing '='): {item!r}")
    key, raw = item.split("=", 1)
    path = [p for p in key.strip().split(".") if p]
    if not path:
        raise ConfigError(f"Invalid --set override (empty key path): {item!r}")
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        value = _parse_scalar(raw)
    return path, value


def parse_set_overrides(sets: list[str] | None) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for item in sets or []:
        path, value = _parse_set_item(item)
        _set_by_path(result, path, value)
    return result


def _deep_merge(dst: dict, src: dict) -> dict:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _deep_merge(dst[k], v)
        else:
            dst[k] = v
    return dst


def load_config(
    path: Optional[str] = None,
    *,
    env: Mapping[str, str] | None = None,
    set_overrides: list[str] | None = None,
) -> ProviderConfig:
    """Load the provider config from YAML, then apply env and --set overrides.

    A missing ``path`` (``None``) yields the defaults plus overrides.
    """
    data: dict[str, Any] = {}
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

    _apply_env_overrides(data, os.environ if env is None else env)

    if set_overrides:
        _deep_merge(data, parse_set_overrides(set_overrides))

    try:
        return ProviderConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid provider configuration: {e}") from e


__all__ = [
    "load_config",
    "parse_set_overrides",
]
