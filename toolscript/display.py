"""Human-readable descriptions of tool calls."""

from __future__ import annotations

import json
import os
import posixpath
from typing import Any

from toolscript.tool import Tool

_SILENT_TOOLS = frozenset({
    "sys.context", "sys.stat", "sys.getenv", "sys.abort", "sys.chat.current",
    "sys.chat.finish", "sys.chat.history", "sys.echo", "sys.prompt",
    "sys.time.now", "sys.model.provider.credential",
})


def _join(*parts: str) -> str:
    present = [p for p in parts if p]
    return posixpath.normpath(posixpath.join(*present)) if present else ""


def to_display_text(tool: Tool, input: str) -> str:
    """Describe running ``tool`` with ``input``, or return "" for nothing to show."""
    interpreter = tool.interpreter()
    if not interpreter:
        return ""

    if interpreter.startswith("sys."):
        data: dict[str, str] = {}
        try:
            decoded: Any = json.loads(input)
        except ValueError:
            decoded = None
        if isinstance(decoded, dict):
            data = {k: v for k, v in decoded.items() if isinstance(v, str)}
        try:
            return to_sys_display_string(interpreter, data)
        except ValueError:
            return f"Running {interpreter}"

    repo = tool.source.repo
    if repo is not None:
        root = repo.root.removeprefix("https://").removesuffix(".git")
        name = "" if repo.name == "tool.gpt" else repo.name
        return f"Running {tool.name} from {_join(root, repo.path, name)}"

    if tool.source.location:
        return f"Running {tool.name} from {tool.source.location}"

    return ""


def to_sys_display_string(id: str, args: dict[str, str]) -> str:
    """Describe a call of a built-in tool. Raises ValueError for unknown tools."""
    a = args.get
    if id == "sys.append":
        return f"Appending to file `{a('filename', '')}`"
    if id == "sys.download":
        location = a("location", "")
        if location:
            return f"Downloading `{a('url', '')}` to `{location}`"
        return f"Downloading `{a('url', '')}` to workspace"
    if id == "sys.exec":
        return f"Running `{a('command', '')}`"
    if id == "sys.find":
        return f"Finding `{a('pattern', '')}` in `{a('directory', '') or '.'}`"
    if id in ("sys.http.get", "sys.http.html2text"):
        return f"Downloading `{a('url', '')}`"
    if id == "sys.http.post":
        return f"Sending to `{a('url', '')}`"
    if id == "sys.ls":
        return f"Listing `{a('dir', '')}`"
    if id == "sys.read":
        return f"Reading `{a('filename', '')}`"
    if id == "sys.remove":
        return f"Removing `{a('location', '')}`"
    if id == "sys.write":
        return f"Writing `{a('filename', '')}`"
    if id in _SILENT_TOOLS:
        return ""
    if id == "sys.openapi" and os.environ.get("GPTSCRIPT_OPENAPI_REVAMP") == "true" and a("operation"):
        try:
            json_args = json.loads(a("args", ""))
        except ValueError as exc:
            raise ValueError(f"invalid operation arguments: {exc}") from exc
        pretty = json.dumps(json_args, indent=2, sort_keys=True)
        return f"Running API operation `{a('operation')}` with arguments {pretty}"
    raise ValueError(f"unknown tool for display string: {id}")