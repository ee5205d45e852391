"""Tests for fallback tool-call extraction from plain text."""

import json

import pytest

from ze_bench.agent.domain.tool_recovery import recover_tool_calls

DECLARED = frozenset({"readFile", "writeFile"})


class TestRecoveredShapes:
    """Only name plus parameters/arguments objects naming declared tools are accepted."""

    def test_single_object_with_parameters(self) -> None:
        text = json.dumps({"name": "readFile", "parameters": {"path": "a.txt"}})

        calls = recover_tool_calls(text, DECLARED)

        assert len(calls) == 1
        assert calls[0].name == "readFile"
        assert calls[0].raw_arguments == {"path": "a.txt"}
        assert calls[0].origin == "recovered"

    def test_arguments_key_accepted(self) -> None:
        text = json.dumps({"name": "writeFile", "arguments": '{"path": "b", "content": "x"}'})

        calls = recover_tool_calls(text, DECLARED)

        assert calls[0].raw_arguments == '{"path": "b", "content": "x"}'

    def test_list_of_calls(self) -> None:
        text = json.dumps(
            [
                {"name": "readFile", "parameters": {"path": "a"}},
                {"name": "writeFile", "parameters": {"path": "b", "content": ""}},
            ]
        )

        calls = recover_tool_calls(text, DECLARED)

        assert [call.name for call in calls] == ["readFile", "writeFile"]
        assert calls[0].id != calls[1].id

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        text = "\n\n  " + json.dumps({"name": "readFile", "parameters": {}}) + "  \n"

        assert len(recover_tool_calls(text, DECLARED)) == 1

    def test_fenced_block_recovered(self) -> None:
        text = 'I will read it.\n```json\n{"name": "readFile", "parameters": {"path": "a"}}\n```'

        calls = recover_tool_calls(text, DECLARED)

        assert calls[0].raw_arguments == {"path": "a"}


class TestRejectedShapes:
    """False positives are defects: anything not clearly a tool call yields []."""

    @pytest.mark.parametrize(
        "text",
        [
            "Just a normal answer.",
            json.dumps({"name": "readFile"}),
            json.dumps({"name": "unknownTool", "parameters": {}}),
            json.dumps({"parameters": {"path": "a"}}),
            json.dumps({"name": "readFile", "parameters": 42}),
            json.dumps({"status": "ok", "files": 3}),
            json.dumps([{"name": "readFile", "parameters": {}}, {"name": "nope", "parameters": {}}]),
            "[1, 2, 3]",
            "",
        ],
    )
    def test_rejected(self, text: str) -> None:
        assert recover_tool_calls(text, DECLARED) == []

    def test_no_declared_tools_recovers_nothing(self) -> None:
        text = json.dumps({"name": "readFile", "parameters": {}})

        assert recover_tool_calls(text, frozenset()) == []
