"""Parsing and normalising of tool reference strings."""

from __future__ import annotations

import json
import re
import shlex
from typing import Any

SUFFIX = ".gpt"

_VALID_TOOL_NAME = re.compile(r"[a-zA-Z0-9]{1,64}")
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_]+")


def _index(fields: list[str], word: str) -> int:
    try:
        return fields.index(word)
    except ValueError:
        return -1


def split_arg(has_arg: str) -> tuple[str, str]:
    """Split a tool string into the tool name and the text after ``with``.

    ``name with v1 as a1`` gives ``("name", "v1 as a1")``. An alias before
    ``with`` is dropped; with no ``with`` at all an alias is returned as the
    second element, ``"as alias"``.
    """
    fields = has_arg.split()
    with_idx = _index(fields, "with")
    as_idx = _index(fields, "as")

    if with_idx == -1:
        if as_idx != -1:
            return " ".join(fields[:as_idx]), " ".join(fields[as_idx:])
        return has_arg.strip(), ""

    if as_idx != -1 and as_idx < with_idx:
        return " ".join(fields[:as_idx]), " ".join(fields[with_idx + 1:])

    return " ".join(fields[:with_idx]), " ".join(fields[with_idx + 1:])


def split_tool_ref(target_tool_name: str) -> tuple[str, str]:
    """Split ``sub from tool with args`` into ``(tool, sub)``."""
    fields = target_tool_name.split()
    idx = _index(fields, "from")
    if idx == -1:
        tool_name, sub_tool = target_tool_name.strip(), ""
    else:
        tool_name, sub_tool = " ".join(fields[idx + 1:]), " ".join(fields[:idx])
    tool_name, _ = split_arg(tool_name)
    return tool_name, sub_tool


def is_match(sub_tool: str) -> bool:
    """Return True if the sub tool name is a wildcard pattern."""
    return any(ch in sub_tool for ch in "*?[")


def to_tool_name(tool_name: str, sub_tool: str) -> str:
    """Render a tool name with an optional sub tool."""
    if not sub_tool:
        return tool_name
    return f"{sub_tool} from {tool_name}"


def tool_normalizer(tool: str) -> str:
    """Turn a tool reference into a short camelCase name fit for a model."""
    _, sub_tool = split_tool_ref(tool)
    last_tool = sub_tool or tool

    parts = last_tool.split("/")
    tool = parts[-1]
    if parts[-1] == "tool.gpt" and len(parts) > 1 and len(parts[-2]) > 2:
        tool = parts[-2]
    if tool.endswith(SUFFIX):
        tool = tool[: tool.rfind(".")]
    tool = tool.removeprefix("sys.")

    if _VALID_TOOL_NAME.fullmatch(tool):
        return tool

    tool = _INVALID_CHARS.sub("_", tool[:55])

    words = []
    for part in tool.split("_"):
        lower = part.lower()
        if not lower:
            continue
        if words:
            lower = lower[0].upper() + lower[1:]
        words.append(lower)

    return "".join(words) or "tool"


def pick_tool_name(tool_name: str, existing: set[str]) -> str:
    """Return a normalised name not yet in ``existing`` and record it there."""
    candidate = tool_normalizer(tool_name or "external")
    while candidate in existing:
        candidate += "0"
    existing.add(candidate)
    return candidate


def parse_credential_args(
    tool_name: str, input: str
) -> tuple[str, str, dict[str, Any] | None]:
    """Parse ``name [as alias] [with v1 as a1 and v2 as a2]``.

    Returns the tool name, the alias (or ``""``) and the argument map (or None
    when there are no arguments). Values of the form ``${key}`` are replaced by
    ``key`` from ``input`` when it is a JSON object holding that key.
    Raises ValueError on malformed text.
    """
    if not tool_name:
        return "", "", None

    input_map: dict[str, Any] = {}
    if input:
        # Input is not always JSON (for example in chat mode); ignore it then.
        try:
            decoded = json.loads(input)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            input_map = decoded

    try:
        fields = shlex.split(tool_name)
    except ValueError as exc:
        raise ValueError(f"invalid credential reference {tool_name!r}: {exc}") from exc

    if len(fields) == 1:
        return tool_name, "", None

    original_name, *fields = fields
    alias = ""
    if fields and fields[0] == "as":
        if len(fields) < 2:
            raise ValueError("expected alias after 'as'")
        alias = fields[1]
        fields = fields[2:]

    if not fields:
        return original_name, alias, None

    if fields[0] != "with":
        raise ValueError(f"expected 'with' but got {fields[0]}")
    fields = fields[1:]
    if not fields:
        raise ValueError("expected args after 'with'")

    args: dict[str, Any] = {}
    state = "none"
    value = ""
    for word in fields:
        if state in ("none", "and"):
            value = word
            state = "value"
        elif state == "value":
            if word != "as":
                raise ValueError(f"expected 'as' but got {word}")
            state = "as"
        elif state == "as":
            args[word] = value
            state = "name"
        elif word != "and":
            raise ValueError(f"expected 'and' but got {word}")
        else:
            state = "and"

    if state == "and":
        raise ValueError("expected arg name after 'and'")

    for key, val in args.items():
        if val.startswith("${") and val.endswith("}"):
            ref = val[2:-1]
            if isinstance(input_map.get(ref), str):
                args[key] = input_map[ref]

    return original_name, alias, args