# toolscript

Building blocks for describing LLM tools and wiring them together: tool
definitions, tool references, chat-completion message types, and the helpers
that turn a program's tools into the list of functions offered to a model.
The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `toolscript.completion`: the request and message types of a chat
  completion: `CompletionRequest` (with `uses_cache()`, true unless `cache` is
  set to `False`), `CompletionMessage` (`chat_text()`, `is_tool_call()`,
  `str()`), `ContentPart`, `CompletionToolCall`, `CompletionFunctionCall`,
  `ChatCompletionTool`, `CompletionFunctionDefinition`, `Usage`,
  `CompletionStatus`, the `CompletionMessageRoleType` enum, and `text()` to
  build a content list holding one text part.
- `toolscript.schema`: `object_schema()` builds a JSON schema (a plain dict)
  for an object with string properties from name/description pairs; `Prompt`
  describes a request for input from a user. `PROMPT_URL_ENV_VAR` and
  `PROMPT_TOKEN_ENV_VAR` name the environment variables for a prompt service.
- `toolscript.names`: parsing of tool reference strings such as
  `"bar_list from ./foo.gpt"` or `"cred as alias with value1 as arg1"`
  (`split_tool_ref`, `split_arg`, `parse_credential_args`, `is_match`,
  `to_tool_name`), and `tool_normalizer` / `pick_tool_name` to turn them into
  camelCase function names a model accepts.
- `toolscript.tool`: `Parameters`, `ToolDef` (whose `str()` renders the tool
  back in script form), `Tool`, `Program`, `ToolReference`, `ToolRefSet`,
  `ToolSource`, `Repo`, the `ToolType` enum and `first_set()`. A `Tool`
  resolves its tools, context, agents, credentials and input/output filters
  through its `tool_mapping`, including shared (exported) ones reached through
  other tools (`get_tools_by_type`, `get_next_agent_group`), and
  `get_chat_completion_tools` builds the `ChatCompletionTool` list for a
  model. That method takes the default argument schemas for plain tools and
  chat tools as the keyword arguments `default_tool_schema` and
  `default_chat_schema`.
- `toolscript.display`: `to_display_text()` and `to_sys_display_string()` give
  short human-readable descriptions of a tool call, for example
  ``Reading `notes.txt` `` for `sys.read`. Descriptions of `sys.openapi`
  operations are given only when the environment variable
  `GPTSCRIPT_OPENAPI_REVAMP` is `true`.
- `toolscript.version`: `Version` (tag, commit, dirty flag, with a printable
  form) and `get()`, which returns the version of this build.

## Examples

```python
from toolscript.names import tool_normalizer, split_tool_ref, parse_credential_args

tool_normalizer("bob-tool")                 # "bobTool"
tool_normalizer("bar_list from ./foo.gpt")  # "barList"
split_tool_ref("a from b with x")           # ("b", "a")

parse_credential_args(
    "myCredentialTool as myAlias with value1 as arg1", ""
)
# ("myCredentialTool", "myAlias", {"arg1": "value1"})
```

```python
from toolscript.schema import object_schema

object_schema("arg1", "desc1", "arg2", "desc2")
# {"type": "object", "properties": {"arg1": {"description": "desc1", "type": "string"}, ...}}
```

```python
from toolscript.completion import CompletionMessage, CompletionMessageRoleType, text

msg = CompletionMessage(role=CompletionMessageRoleType.ASSISTANT, content=text("hello"))
msg.chat_text()  # "hello"
```

## Errors

Malformed reference strings raise `ValueError`, as does asking
`get_tools_by_type` for a type it does not handle. A name that does not
resolve to a tool raises `toolscript.tool.ToolNotFoundError`, a subclass of
`LookupError`.

## What this package does not do

It holds the data model and the reference resolution only. It does not read
or parse script files into a `Program`, does not call a model or run tools,
and has no command-line program: a `Program` and its tools' `tool_mapping`
must be built by the caller.