import pytest

from toolscript.schema import object_schema
from toolscript.tool import (
    Program,
    Tool,
    ToolDef,
    ToolNotFoundError,
    ToolRefSet,
    ToolReference,
    ToolSource,
    ToolType,
    first_set,
)

EXPECTED = """Global Model Name: GlobalModelSample
Global Tools: GlobalTool1, GlobalTool2
Name: Tool Sample
Description: This is a sample tool
Type: Context
Agents: Agent1, Agent2
Tools: Tool1, Tool2
Share Tools: Export1, Export2
Context: Context1, Context2
Share Context: ExportContext1, ExportContext2
Input Filters: Filter1, Filter2
Share Input Filters: SharedFilter1, SharedFilter2
Output Filters: Filter1, Filter2
Share Output Filters: SharedFilter1, SharedFilter2
Max Tokens: 1024
Model: ModelSample
Model Provider: true
JSON Response: true
Temperature: 0.800000
Parameter: arg1: desc1
Parameter: arg2: desc2
Internal Prompt: true
Credential: Credential1
Credential: Credential2
Share Credential: ExportCredential1
Share Credential: ExportCredential2
Chat: true

This is a sample instruction
---
!metadata:Tool Sample:package.json
{
// blah blah some ugly JSON
}

---
!metadata:Tool Sample:requirements.txt
requests=5
"""


def test_tool_def_string():
    tool = ToolDef(
        name="Tool Sample",
        description="This is a sample tool",
        max_tokens=1024,
        model_name="ModelSample",
        model_provider=True,
        json_response=True,
        chat=True,
        temperature=0.8,
        cache=True,
        internal_prompt=True,
        arguments=object_schema("arg1", "desc1", "arg2", "desc2"),
        tools=["Tool1", "Tool2"],
        global_tools=["GlobalTool1", "GlobalTool2"],
        global_model_name="GlobalModelSample",
        context=["Context1", "Context2"],
        export_context=["ExportContext1", "ExportContext2"],
        export=["Export1", "Export2"],
        agents=["Agent1", "Agent2"],
        credentials=["Credential1", "Credential2"],
        blocking=True,
        input_filters=["Filter1", "Filter2"],
        export_input_filters=["SharedFilter1", "SharedFilter2"],
        output_filters=["Filter1", "Filter2"],
        export_output_filters=["SharedFilter1", "SharedFilter2"],
        export_credentials=["ExportCredential1", "ExportCredential2"],
        type=ToolType.CONTEXT,
        meta_data={
            "package.json": "{\n// blah blah some ugly JSON\n}\n",
            "requirements.txt": "requests=5",
        },
        instructions="This is a sample instruction",
    )
    assert str(tool) == EXPECTED


def _program():
    main = Tool(id="main", tools=["helper"], context=["ctx"], agents=["bob-agent"], chat=True,
                instructions="hi")
    helper = Tool(id="helper", name="helper", instructions="help")
    ctx = Tool(id="ctx", name="ctx", type=ToolType.CONTEXT, instructions="c")
    agent = Tool(id="agent", name="", instructions="a")
    main.add_tool_mapping("helper", helper)
    main.add_tool_mapping("ctx", ctx)
    main.add_tool_mapping("bob-agent", agent)
    return Program(name="prog", entry_tool_id="main",
                   tool_set={t.id: t for t in (main, helper, ctx, agent)})


def test_add_tool_mapping_deduplicates():
    tool = Tool()
    other = Tool(id="x")
    tool.add_tool_mapping("a", other)
    tool.add_tool_mapping("a", other)
    assert tool.tool_mapping["a"] == [ToolReference(reference="a", tool_id="x")]


def test_refs_missing_raises():
    with pytest.raises(ToolNotFoundError, match="tool not found: nope"):
        Tool().get_tool_refs_from_names(["nope"])


def test_refs_alias_named():
    tool = Tool()
    tool.add_tool_mapping("a as b", Tool(id="x"))
    refs = tool.get_tool_refs_from_names(["a as b"])
    assert refs[0].named == "b"


def test_tools_by_type():
    prg = _program()
    main = prg.tool_set["main"]
    assert [r.tool_id for r in main.get_tools_by_type(prg, ToolType.CONTEXT)] == ["ctx"]
    assert [r.tool_id for r in main.get_tools_by_type(prg, ToolType.TOOL)] == ["helper"]
    agents = main.get_tools_by_type(prg, ToolType.AGENT)
    assert agents[0].named == "bob"


def test_share_context():
    real = Tool(id="real", type=ToolType.CONTEXT, instructions="#!sys.echo")
    share = Tool(id="share", export_context=["real"])
    share.add_tool_mapping("real", real)
    main = Tool(id="main", tools=["share"])
    main.add_tool_mapping("share", share)
    prg = Program(entry_tool_id="main", tool_set={"main": main, "share": share, "real": real})
    assert [r.tool_id for r in main.get_tools_by_type(prg, ToolType.CONTEXT)] == ["real"]


def test_chat_completion_tools():
    prg = _program()
    tools = prg.tool_set["main"].get_chat_completion_tools(
        prg, default_tool_schema={"d": 1}, default_chat_schema={"c": 1})
    names = [t.function.name for t in tools]
    assert names == ["helper", "bob"]
    assert tools[0].function.parameters == {"d": 1}


def test_next_agent_group():
    prg = _program()
    main = prg.tool_set["main"]
    assert main.get_next_agent_group(prg, [], "agent")[0].tool_id == "agent"
    assert main.get_next_agent_group(prg, [], "other") == []


def test_ref_set_order_and_contains():
    s = ToolRefSet()
    a, b = ToolReference(tool_id="a"), ToolReference(tool_id="b")
    s.add_all([a, b, a])
    assert list(s) == [a, b]
    assert len(s) == 2
    assert a in s and s.has_tool("b") and not s.has_tool("c")


def test_interpreter_and_kinds():
    assert Tool(instructions="#!/usr/bin/env python3 x").interpreter() == "python3"
    assert Tool(instructions="hello").interpreter() == ""
    assert Tool(instructions="#!sys.echo hi").is_echo()
    assert Tool(instructions="#!https://x").is_http()
    assert Tool().is_agents_only()


def test_program_helpers():
    prg = _program()
    assert prg.is_chat()
    assert prg.chat_name() == "prog"
    blocked = prg.set_blocking()
    assert blocked.tool_set["main"].blocking
    assert not prg.tool_set["main"].blocking


def test_source_and_first_set():
    assert str(ToolSource(location="f.gpt", line_no=3)) == "f.gpt:3"
    assert first_set("", "a", "b") == "a"
    assert first_set(0, 0) == 0