import pytest

from toolscript.display import to_display_text, to_sys_display_string
from toolscript.tool import Repo, Tool, ToolSource


def test_sys_strings():
    assert to_sys_display_string("sys.read", {"filename": "a.txt"}) == "Reading `a.txt`"
    assert to_sys_display_string("sys.find", {"pattern": "*.go"}) == "Finding `*.go` in `.`"
    assert to_sys_display_string("sys.echo", {}) == ""


def test_unknown_raises():
    with pytest.raises(ValueError, match="unknown tool for display string"):
        to_sys_display_string("sys.nope", {})


def test_openapi_without_revamp_raises(monkeypatch):
    monkeypatch.delenv("GPTSCRIPT_OPENAPI_REVAMP", raising=False)
    with pytest.raises(ValueError):
        to_sys_display_string("sys.openapi", {"operation": "op"})


def test_openapi_revamp(monkeypatch):
    monkeypatch.setenv("GPTSCRIPT_OPENAPI_REVAMP", "true")
    out = to_sys_display_string("sys.openapi", {"operation": "op", "args": '{"a": 1}'})
    assert out.startswith("Running API operation `op` with arguments")
    assert '"a": 1' in out


def test_display_sys_tool():
    tool = Tool(instructions="#!sys.write")
    assert to_display_text(tool, '{"filename": "f"}') == "Writing `f`"
    assert to_display_text(Tool(instructions="#!sys.bogus"), "") == "Running sys.bogus"


def test_display_repo_and_location():
    repo = Repo(vcs="git", root="https://example.com/org/repo.git", path="sub", name="tool.gpt")
    tool = Tool(name="t", instructions="#!python", source=ToolSource(repo=repo))
    assert to_display_text(tool, "") == "Running t from example.com/org/repo/sub"
    local = Tool(name="t", instructions="#!python", source=ToolSource(location="x.gpt"))
    assert to_display_text(local, "").endswith("from x.gpt")
    assert to_display_text(Tool(instructions="plain"), "") == ""