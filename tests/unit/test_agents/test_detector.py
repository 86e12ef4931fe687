"""Tests for tool-call detection."""

import pytest

from local_agent.agents.detector import StreamingToolCallDetector, detect_tool_call

CALL = '{"tool": "read_file", "arguments": {"path": "~/Documents/a.txt"}}'


class TestDetectToolCall:
    """Tests for detect_tool_call."""

    def test_fenced_block(self):
        text = f"Sure, let me look.\n```json\n{CALL}\n```"
        call = detect_tool_call(text)
        assert call.tool == "read_file"
        assert call.arguments == {"path": "~/Documents/a.txt"}

    def test_bare_json_line(self):
        call = detect_tool_call(f"Checking now\n{CALL}\n")
        assert call.tool == "read_file"

    def test_bare_json_across_lines(self):
        """A bare object may span several lines."""
        text = (
            '{"tool": "search_files",\n'
            ' "arguments": {\n  "pattern": "*.log",\n  "directory": "~"\n }\n}'
        )
        call = detect_tool_call(text)
        assert call.tool == "search_files"
        assert call.arguments == {"pattern": "*.log", "directory": "~"}

    def test_empty_arguments_are_valid(self):
        call = detect_tool_call('{"tool": "list_processes", "arguments": {}}')
        assert call.tool == "list_processes"
        assert call.arguments == {}

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Just a normal answer.",
            '{"tool": "read_file"}',
            '{"tool": "", "arguments": {}}',
            '{"tool": 5, "arguments": {}}',
            '{"tool": "read_file", "arguments": "path"}',
            '{"tool": "read_file", "arguments": {"path": ',
            '```json\n{"tool": "read_file", "arguments": {oops}}\n```',
            'Use {"tool": "x", "arguments": {}} inline',
        ],
    )
    def test_no_call(self, text):
        """Malformed or partial candidates are 'no call', never errors."""
        assert detect_tool_call(text) is None

    def test_fenced_block_preferred(self):
        text = (
            '{"tool": "list_directory", "arguments": {"path": "~"}}\n'
            '```json\n{"tool": "get_file_info", "arguments": {"path": "~"}}\n```'
        )
        assert detect_tool_call(text).tool == "get_file_info"


class TestStreamingToolCallDetector:
    """Tests for StreamingToolCallDetector."""

    def test_plain_text_streams_through(self):
        detector = StreamingToolCallDetector()
        out = [detector.feed(c) for c in ["Hello ", "there.\n", "How are ", "you?"]]
        assert "".join(out) == "Hello there.\nHow are you?"
        assert detector.finish() == ""
        assert detector.detected is False

    def test_call_is_never_released(self):
        """Nothing of a bare tool call reaches the output."""
        detector = StreamingToolCallDetector()
        out = "".join(detector.feed(CALL[i : i + 5]) for i in range(0, len(CALL), 5))
        assert out == ""
        assert detector.detected is True
        assert detector.tool_call.tool == "read_file"
        assert detector.finish() == ""

    def test_prose_before_fence_is_released(self):
        detector = StreamingToolCallDetector()
        text = f"Let me check.\n```json\n{CALL}\n```\n"
        out = "".join(detector.feed(text[i : i + 3]) for i in range(0, len(text), 3))
        assert out == "Let me check.\n"
        assert detector.detected is True

    def test_detection_is_sticky(self):
        detector = StreamingToolCallDetector()
        detector.feed(CALL + "\n")
        assert detector.feed("Anything after the call") == ""
        assert detector.tool_call.tool == "read_file"
        assert detector.text.endswith("Anything after the call")

    def test_held_text_released_on_finish(self):
        """A brace line that never becomes a call is released at the end."""
        detector = StreamingToolCallDetector()
        first = detector.feed("Here is a set:\n{1, 2, 3}\nDone")
        assert first == "Here is a set:\n"
        assert detector.finish() == "{1, 2, 3}\nDone"
        assert detector.detected is False

    def test_partial_line_is_held_until_decidable(self):
        detector = StreamingToolCallDetector()
        assert detector.feed("  ") == ""
        assert detector.feed(" Hi") == "   Hi"
