"""JSON schema helpers and user prompt requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PROMPT_URL_ENV_VAR = "GPTSCRIPT_PROMPT_URL"
PROMPT_TOKEN_ENV_VAR = "GPTSCRIPT_PROMPT_TOKEN"


def object_schema(*args: str) -> dict[str, Any]:
    """Build an object schema from alternating property names and descriptions.

    Every property is a string. A trailing name without a description is ignored.
    """
    properties = {
        name: {"description": description, "type": "string"}
        for name, description in zip(args[::2], args[1::2])
    }
    return {"type": "object", "properties": properties}


@dataclass
class Prompt:
    """A request for input from the user."""

    message: str = ""
    fields: list[str] = field(default_factory=list)
    sensitive: bool = False
    metadata: dict[str, str] = field(default_factory=dict)