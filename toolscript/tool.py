"""Tools, programs and the resolution of references between tools."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Iterator

from toolscript.completion import ChatCompletionTool, CompletionFunctionDefinition
from toolscript.names import is_match, pick_tool_name, split_arg, split_tool_ref, tool_normalizer

log = logging.getLogger(__name__)

DAEMON_PREFIX = "#!sys.daemon"
OPENAPI_PREFIX = "#!sys.openapi"
ECHO_PREFIX = "#!sys.echo"
COMMAND_PREFIX = "#!"

DEFAULT_FILES = ("agent.gpt", "tool.gpt")


class ToolType(str, Enum):
    """Kind of a tool."""

    CONTEXT = "context"
    AGENT = "agent"
    OUTPUT = "output"
    INPUT = "input"
    TOOL = "tool"
    CREDENTIAL = "credential"
    DEFAULT = ""
    ASSISTANT = "assistant"
    PROVIDER = "provider"


class ToolNotFoundError(LookupError):
    """Raised when a tool reference cannot be resolved."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"tool not found: {tool_name}")
        self.tool_name = tool_name


@dataclass(frozen=True)
class ToolReference:
    """A resolved reference from one tool to another."""

    named: str = ""
    reference: str = ""
    arg: str = ""
    tool_id: str = ""


class ToolRefSet:
    """Insertion-ordered set of tool references keyed by name, tool and arg.

    An error met while collecting references is kept and raised when the
    result is taken.
    """

    def __init__(self) -> None:
        self._refs: dict[tuple[str, str, str], ToolReference] = {}
        self.error: Exception | None = None

    @staticmethod
    def _key(value: ToolReference) -> tuple[str, str, str]:
        return value.named, value.tool_id, value.arg

    def add(self, value: ToolReference) -> None:
        self._refs.setdefault(self._key(value), value)

    def add_all(self, values: Iterable[ToolReference]) -> None:
        for value in values:
            self.add(value)

    def _add_from(self, produce: Callable[[], list[ToolReference]]) -> None:
        try:
            self.add_all(produce())
        except (LookupError, ValueError) as exc:
            self.error = exc

    def __contains__(self, value: object) -> bool:
        return isinstance(value, ToolReference) and self._key(value) in self._refs

    def has_tool(self, tool_id: str) -> bool:
        return any(ref.tool_id == tool_id for ref in self._refs.values())

    def __iter__(self) -> Iterator[ToolReference]:
        return iter(list(self._refs.values()))

    def __len__(self) -> int:
        return len(self._refs)

    def _result(self) -> list[ToolReference]:
        if self.error is not None:
            raise self.error
        return list(self._refs.values())


@dataclass
class Repo:
    """Version-control location of a tool's source."""

    vcs: str = ""
    root: str = ""
    path: str = ""
    name: str = ""
    revision: str = ""


@dataclass
class ToolSource:
    """Where a tool was defined."""

    location: str = ""
    line_no: int = 0
    repo: Repo | None = None

    def is_git(self) -> bool:
        return self.repo is not None and self.repo.vcs == "git"

    def __str__(self) -> str:
        return f"{self.location}:{self.line_no}"


@dataclass
class Parameters:
    """Declared settings of a tool."""

    name: str = ""
    description: str = ""
    max_tokens: int = 0
    model_name: str = ""
    model_provider: bool = False
    json_response: bool = False
    chat: bool = False
    temperature: float | None = None
    cache: bool | None = None
    internal_prompt: bool | None = None
    arguments: dict[str, Any] | None = None
    tools: list[str] = field(default_factory=list)
    global_tools: list[str] = field(default_factory=list)
    global_model_name: str = ""
    context: list[str] = field(default_factory=list)
    export_context: list[str] = field(default_factory=list)
    export: list[str] = field(default_factory=list)
    agents: list[str] = field(default_factory=list)
    credentials: list[str] = field(default_factory=list)
    export_credentials: list[str] = field(default_factory=list)
    input_filters: list[str] = field(default_factory=list)
    export_input_filters: list[str] = field(default_factory=list)
    output_filters: list[str] = field(default_factory=list)
    export_output_filters: list[str] = field(default_factory=list)
    blocking: bool = False
    type: ToolType = ToolType.DEFAULT

    def _all_exports(self) -> list[str]:
        return [
            *self.export_context,
            *self.export,
            *self.export_credentials,
            *self.export_input_filters,
            *self.export_output_filters,
        ]

    def _all_references(self) -> list[str]:
        return [
            *self.global_tools,
            *self.tools,
            *self.context,
            *self.agents,
            *self.credentials,
            *self.input_filters,
            *self.output_filters,
        ]

    def tool_ref_names(self) -> list[str]:
        """Return every tool name this tool refers to."""
        return [
            *self.tools,
            *self.agents,
            *self.export,
            *self.export_context,
            *self.context,
            *self.credentials,
            *self.export_credentials,
            *self.input_filters,
            *self.export_input_filters,
            *self.output_filters,
            *self.export_output_filters,
        ]


@dataclass
class ToolDef(Parameters):
    """A tool as written in a script."""

    instructions: str = ""
    builtin_func: Callable[..., Any] | None = None
    meta_data: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        lines: list[str] = []

        def listed(label: str, values: list[str]) -> None:
            if values:
                lines.append(f"{label}: {', '.join(values)}\n")

        if self.global_model_name:
            lines.append(f"Global Model Name: {self.global_model_name}\n")
        listed("Global Tools", self.global_tools)
        if self.name:
            lines.append(f"Name: {self.name}\n")
        if self.description:
            lines.append(f"Description: {self.description}\n")
        if self.type != ToolType.DEFAULT:
            kind = self.type.value
            lines.append(f"Type: {kind[0].upper()}{kind[1:]}\n")
        listed("Agents", self.agents)
        listed("Tools", self.tools)
        listed("Share Tools", self.export)
        listed("Context", self.context)
        listed("Share Context", self.export_context)
        listed("Input Filters", self.input_filters)
        listed("Share Input Filters", self.export_input_filters)
        listed("Output Filters", self.output_filters)
        listed("Share Output Filters", self.export_output_filters)
        if self.max_tokens:
            lines.append(f"Max Tokens: {self.max_tokens}\n")
        if self.model_name:
            lines.append(f"Model: {self.model_name}\n")
        if self.model_provider:
            lines.append("Model Provider: true\n")
        if self.json_response:
            lines.append("JSON Response: true\n")
        if self.cache is not None and not self.cache:
            lines.append("Cache: false\n")
        if self.temperature is not None:
            lines.append(f"Temperature: {self.temperature:.6f}\n")
        if self.arguments is not None:
            props = self.arguments.get("properties") or {}
            for key in sorted(props):
                lines.append(f"Parameter: {key}: {props[key].get('description', '')}\n")
        if self.internal_prompt is not None:
            lines.append(f"Internal Prompt: {'true' if self.internal_prompt else 'false'}\n")
        lines.extend(f"Credential: {cred}\n" for cred in self.credentials)
        lines.extend(f"Share Credential: {cred}\n" for cred in self.export_credentials)
        if self.chat:
            lines.append("Chat: true\n")

        if self.instructions and self.builtin_func is None:
            lines.append(f"\n{self.instructions}\n")

        if self.name:
            for key in sorted(self.meta_data):
                lines.append(f"---\n!metadata:{self.name}:{key}\n{self.meta_data[key]}\n")

        return "".join(lines)


@dataclass
class Tool(ToolDef):
    """A loaded tool with its resolved references."""

    id: str = ""
    tool_mapping: dict[str, list[ToolReference]] = field(default_factory=dict)
    local_tools: dict[str, str] = field(default_factory=dict)
    source: ToolSource = field(default_factory=ToolSource)
    working_dir: str = ""

    __str__ = ToolDef.__str__

    def add_tool_mapping(self, name: str, tool: Tool) -> None:
        """Record that ``name`` resolves to ``tool``."""
        ref = name
        _, sub_tool = split_tool_ref(name)
        if is_match(sub_tool) and tool.name:
            ref = ref.replace(sub_tool, tool.name, 1)

        existing = self.tool_mapping.setdefault(name, [])
        if any(r.tool_id == tool.id and r.reference == ref for r in existing):
            return
        existing.append(ToolReference(reference=ref, tool_id=tool.id))

    def get_tool_refs_from_names(self, names: Iterable[str]) -> list[ToolReference]:
        """Resolve tool names through the tool mapping.

        Raises ToolNotFoundError for an unmapped name and ValueError when an
        alias is combined with a wildcard.
        """
        result: list[ToolReference] = []
        for tool_name in names:
            refs = self.tool_mapping.get(tool_name)
            if not refs:
                raise ToolNotFoundError(tool_name)
            _, arg = split_arg(tool_name)
            named = ""
            if arg.startswith("as "):
                named = arg[len("as "):]
                if len(refs) > 1:
                    raise ValueError(f"can not combine 'as' syntax with wildcard: {tool_name}")
            result.extend(
                ToolReference(named=named, arg=arg, reference=r.reference, tool_id=r.tool_id)
                for r in refs
            )
        return result

    def get_next_agent_group(
        self, prg: Program, agent_group: list[ToolReference], tool_id: str
    ) -> list[ToolReference]:
        """Return this tool's agents if ``tool_id`` is among them, else ``agent_group``."""
        group = ToolRefSet()
        group._add_from(lambda: self.get_tools_by_type(prg, ToolType.AGENT))
        if group.has_tool(tool_id):
            return group._result()
        return agent_group

    def _get_agents(self, prg: Program) -> list[ToolReference]:
        refs = self.get_tool_refs_from_names(self.agents)
        result = []
        for ref in refs:
            if not ref.named:
                name = prg._tool(ref.tool_id).name or ref.reference
                normed = tool_normalizer(name)
                trimmed = normed.removesuffix("Agent").removesuffix("Assistant")
                ref = dataclasses.replace(ref, named=trimmed or normed)
            result.append(ref)
        return result

    def get_tools_by_type(self, prg: Program, tool_type: ToolType) -> list[ToolReference]:
        """Return the references of the given type visible to this tool."""
        if tool_type == ToolType.AGENT:
            # Agents come only from direct references, never from shares.
            return self._get_agents(prg)

        direct_refs = {
            ToolType.CONTEXT: self.context,
            ToolType.OUTPUT: self.output_filters,
            ToolType.INPUT: self.input_filters,
            ToolType.TOOL: [],
            ToolType.CREDENTIAL: self.credentials,
        }
        if tool_type not in direct_refs:
            raise ValueError(f"unknown tool type {tool_type.value}")
        filter_types = {tool_type}
        if tool_type == ToolType.TOOL:
            filter_types |= {ToolType.DEFAULT, ToolType.AGENT}

        tool_set = ToolRefSet()
        tool_set._add_from(lambda: self.get_tool_refs_from_names(direct_refs[tool_type]))

        def add_typed(source: Tool) -> None:
            for ref in source.get_tool_refs_from_names(source.export if source is not self else self.tools):
                target = prg.tool_set.get(ref.tool_id)
                if target is not None and target.type in filter_types:
                    tool_set.add(ref)

        add_typed(self)

        for export_source in self._get_export_sources(prg):
            tool = prg._tool(export_source.tool_id)
            export_refs = {
                ToolType.CONTEXT: tool.export_context,
                ToolType.OUTPUT: tool.export_output_filters,
                ToolType.INPUT: tool.export_input_filters,
                ToolType.TOOL: [],
                ToolType.CREDENTIAL: tool.export_credentials,
            }[tool_type]
            tool_set._add_from(lambda: tool.get_tool_refs_from_names(export_refs))
            add_typed(tool)

        return tool_set._result()

    def _add_exports_recursively(self, prg: Program, tool_set: ToolRefSet) -> None:
        for ref in self.get_tool_refs_from_names(self._all_exports()):
            if ref in tool_set:
                continue
            tool_set.add(ref)
            prg._tool(ref.tool_id)._add_exports_recursively(prg, tool_set)

    def _get_export_sources(self, prg: Program) -> list[ToolReference]:
        # Start from every direct reference, then follow shares of shares.
        tool_set = ToolRefSet()
        for ref in self.get_tool_refs_from_names(self._all_references()):
            prg._tool(ref.tool_id)._add_exports_recursively(prg, tool_set)
            tool_set.add(ref)
        return tool_set._result()

    def get_chat_completion_tools(
        self,
        prg: Program,
        *agent_group: ToolReference,
        default_tool_schema: dict[str, Any],
        default_chat_schema: dict[str, Any],
    ) -> list[ChatCompletionTool]:
        """Return the tools to offer the model when this tool runs."""
        tool_set = ToolRefSet()
        tool_set._add_from(lambda: self.get_tools_by_type(prg, ToolType.TOOL))
        tool_set._add_from(lambda: self.get_tools_by_type(prg, ToolType.AGENT))

        if self.chat:
            for agent in agent_group:
                if agent.tool_id != self.id:
                    tool_set.add(agent)

        names: set[str] = set()
        result = []
        for ref in tool_set._result():
            sub_tool = prg._tool(ref.tool_id)
            sub_name = ref.named or sub_tool.name or ref.reference

            args = sub_tool.arguments
            if args is None and not sub_tool.is_command():
                args = default_chat_schema if sub_tool.chat else default_tool_schema

            if not sub_tool.instructions:
                log.debug("Skipping zero instruction tool %s (%s)", sub_name, sub_tool.id)
                continue
            result.append(
                ChatCompletionTool(
                    function=CompletionFunctionDefinition(
                        tool_id=sub_tool.id,
                        name=pick_tool_name(sub_name, names),
                        description=sub_tool.description,
                        parameters=args,
                    )
                )
            )
        return result

    def interpreter(self) -> str:
        """Return the program named on the ``#!`` line, skipping ``env``."""
        if not self.instructions.startswith(COMMAND_PREFIX):
            return ""
        words = self.instructions[len(COMMAND_PREFIX):].split()
        for word in words:
            name = word.rstrip("/").rsplit("/", 1)[-1] or "/"
            if name != "env":
                return name
        return words[0] if words else ""

    def is_noop(self) -> bool:
        return self.instructions == ""

    def is_command(self) -> bool:
        return self.instructions.startswith(COMMAND_PREFIX)

    def is_daemon(self) -> bool:
        return self.instructions.startswith(DAEMON_PREFIX)

    def is_openapi(self) -> bool:
        return self.instructions.startswith(OPENAPI_PREFIX)

    def is_agents_only(self) -> bool:
        return self.is_noop() and not self.context

    def is_echo(self) -> bool:
        return self.instructions.startswith(ECHO_PREFIX)

    def is_http(self) -> bool:
        return self.instructions.startswith(("#!http://", "#!https://"))


@dataclass
class Program:
    """A set of tools with an entry point."""

    name: str = ""
    entry_tool_id: str = ""
    tool_set: dict[str, Tool] = field(default_factory=dict)
    openapi_cache: dict[str, Any] = field(default_factory=dict)

    def _tool(self, tool_id: str) -> Tool:
        return self.tool_set.get(tool_id) or Tool()

    def is_chat(self) -> bool:
        return self._tool(self.entry_tool_id).chat

    def chat_name(self) -> str:
        if self.is_chat():
            name = self._tool(self.entry_tool_id).name
            if name:
                return name
        return self.name

    def top_level_tools(self) -> list[Tool]:
        entry = self._tool(self.entry_tool_id)
        return [self.tool_set[t] for t in entry.local_tools.values() if t in self.tool_set]

    def set_blocking(self) -> Program:
        """Return a copy whose entry tool is blocking."""
        tool = dataclasses.replace(self._tool(self.entry_tool_id), blocking=True)
        tools = dict(self.tool_set)
        tools[self.entry_tool_id] = tool
        return dataclasses.replace(self, tool_set=tools)


def first_set(*args: Any) -> Any:
    """Return the first argument that is not its type's zero value."""
    for arg in args:
        if arg:
            return arg
    return type(args[0])() if args else None