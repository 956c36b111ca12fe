"""Data types exchanged with a chat-completion model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CompletionMessageRoleType(str, Enum):
    """Role of a chat message."""

    USER = "user"
    SYSTEM = "system"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass
class Usage:
    """Token accounting for a completion."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class CompletionFunctionCall:
    """Name and JSON-encoded arguments of a function the model wants called."""

    name: str = ""
    arguments: str = ""


@dataclass
class CompletionToolCall:
    """A tool call requested by the model."""

    index: int | None = None
    id: str = ""
    function: CompletionFunctionCall = field(default_factory=CompletionFunctionCall)


@dataclass
class ContentPart:
    """One piece of message content: text, a tool call, or both."""

    text: str = ""
    tool_call: CompletionToolCall | None = None


@dataclass
class CompletionFunctionDefinition:
    """Description of a function offered to the model."""

    name: str
    tool_id: str = ""
    description: str = ""
    parameters: dict[str, Any] | None = None


@dataclass
class ChatCompletionTool:
    """A tool offered to the model."""

    function: CompletionFunctionDefinition


@dataclass
class CompletionMessage:
    """A single chat message.

    ``tool_call`` is set only on messages of role ``tool``; the first content
    part then holds the result of that call.
    """

    role: CompletionMessageRoleType | None = None
    content: list[ContentPart] = field(default_factory=list)
    tool_call: CompletionToolCall | None = None
    usage: Usage = field(default_factory=Usage)

    def chat_text(self) -> str:
        """Return the non-empty text parts joined by single spaces."""
        return " ".join(part.text for part in self.content if part.text)

    def is_tool_call(self) -> bool:
        """Return True if any content part carries a tool call."""
        return any(part.tool_call is not None for part in self.content)

    def __str__(self) -> str:
        lines = []
        for part in self.content:
            line = part.text
            if part.tool_call is not None:
                fn = part.tool_call.function
                line += f"<tool call> {fn.name} -> {fn.arguments}"
            lines.append(line)
        return "\n".join(lines)


@dataclass
class CompletionRequest:
    """A request for a chat completion."""

    model: str = ""
    internal_system_prompt: bool | None = None
    tools: list[ChatCompletionTool] = field(default_factory=list)
    messages: list[CompletionMessage] = field(default_factory=list)
    max_tokens: int = 0
    chat: bool = False
    temperature: float | None = None
    json_response: bool = False
    cache: bool | None = None

    def uses_cache(self) -> bool:
        """Caching is on unless explicitly disabled."""
        return True if self.cache is None else self.cache


@dataclass
class CompletionStatus:
    """Progress report for a completion in flight."""

    completion_id: str = ""
    request: Any = None
    response: Any = None
    usage: Usage = field(default_factory=Usage)
    cached: bool = False
    chunks: Any = None
    partial_response: CompletionMessage | None = None


def text(text: str) -> list[ContentPart]:
    """Return message content consisting of a single text part."""
    return [ContentPart(text=text)]