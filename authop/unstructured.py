"""Access to nested fields of decoded JSON-style configuration."""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Optional, Sequence, Tuple

_log = logging.getLogger(__name__)


def _json_path(fields: Sequence[str]) -> str:
    return "." + ".".join(fields)


def _nested_field_no_copy(obj: Any, fields: Sequence[str]) -> Tuple[Any, bool]:
    value = obj
    for depth, name in enumerate(fields, start=1):
        if value is None:
            return None, False
        if not isinstance(value, dict):
            raise TypeError(
                f"{_json_path(fields[:depth])} accessor error: {value!r} is of the type "
                f"{type(value).__name__}, expected map[string]interface{{}}"
            )
        if name not in value:
            return None, False
        value = value[name]
    return value, True


def nested_field(obj: Any, *args: str) -> Tuple[Any, bool]:
    """Return a deep copy of the value at the path and whether it was found.

    Raises TypeError when a step along the path is not a mapping.
    """
    value, found = _nested_field_no_copy(obj, args)
    return copy.deepcopy(value), found


def nested_string(obj: Any, *args: str) -> Tuple[str, bool]:
    """Return the string at the path and whether it was found."""
    value, found = _nested_field_no_copy(obj, args)
    if not found:
        return "", False
    if not isinstance(value, str):
        raise TypeError(
            f"{_json_path(args)} accessor error: {value!r} is of the type "
            f"{type(value).__name__}, expected string"
        )
    return value, True


def set_nested_field(obj: dict, value: Any, *args: str) -> None:
    """Store a deep copy of ``value`` at the path, creating mappings on the way."""
    if not args:
        raise ValueError("a field path of at least one element is required")
    current = obj
    for depth, name in enumerate(args[:-1], start=1):
        if name not in current:
            current[name] = {}
        nxt = current[name]
        if not isinstance(nxt, dict):
            raise TypeError(
                f"value cannot be set because {_json_path(args[:depth])} "
                "is not a map[string]interface{}"
            )
        current = nxt
    current[args[-1]] = copy.deepcopy(value)


def pruned(config: Optional[dict], *args: Sequence[str]) -> Optional[dict]:
    """Return a new config that holds only the given paths of ``config``."""
    if config is None or not args:
        return config
    result: dict = {}
    for path in args:
        try:
            value, found = nested_field(config, *path)
        except TypeError as err:
            _log.debug("pruning %s skipped: %s", _json_path(path), err)
            continue
        if found:
            set_nested_field(result, value, *path)
    return result


def unstructured_config_from(observed_bytes: bytes, *args: str) -> bytes:
    """Return the JSON of the observed config's subtree under the given prefix."""
    if not args:
        return observed_bytes
    try:
        prefixed = json.loads(observed_bytes)
    except ValueError as err:
        _log.debug("decode of existing config failed with error: %s", err)
        prefixed = {}
    if not isinstance(prefixed, dict):
        _log.debug("decode of existing config failed: not an object")
        prefixed = {}
    value, _ = nested_field(prefixed, *args)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode()