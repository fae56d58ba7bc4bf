"""Command-line server arguments: parsing from config and shell-safe encoding."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

ServerArguments = Dict[str, List[str]]

_SHELL_UNSAFE = re.compile(r"[^\w@%+=:,./-]", re.ASCII)


def parse(raw: Mapping[str, Any]) -> ServerArguments:
    """Build server arguments from a decoded config mapping.

    Each value must be a string or a list of strings.
    """
    args: ServerArguments = {}
    for name, value in raw.items():
        if isinstance(value, str):
            args[name] = [value]
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            args[name] = list(value)
        else:
            raise ValueError(
                f"unable to create server arguments, incorrect value {value} "
                f"under {name} key, expected []string or string"
            )
    return args


def shell_escape(s: str) -> str:
    """Return ``s`` quoted so that a shell reads it as one token."""
    if not s:
        return "''"
    if _SHELL_UNSAFE.search(s):
        return "'" + s.replace("'", "'\"'\"'") + "'"
    return s


def encode(args: Mapping[str, List[str]]) -> str:
    """Encode arguments one per line, joined by a backslash continuation."""
    return encode_with_delimiter(args, " \\\n")


def encode_with_delimiter(args: Mapping[str, List[str]], delimiter: str) -> str:
    """Encode arguments as ``--key=value`` tokens, sorted by key."""
    return delimiter.join(
        f"--{shell_escape(key)}={shell_escape(value)}"
        for key in sorted(args)
        for value in args[key]
    )