"""Tests for vardump.dumper module."""

import io
import json
import re

import pytest

import vardump
from vardump import Dumper, dumper
from vardump.dumper import HTML_CLOSE, HTML_OPEN, NO_ARGS_JSON


class FakeTTY(io.StringIO):
    def isatty(self):
        return True


class TestDumpStr:
    """Tests for text dumps."""

    def test_end_to_end(self, plain_dumper):
        assert plain_dumper.dump_str({"a": 1}) == "#dict {\n  a => 1 #int\n}\n"

    def test_several_values(self, plain_dumper):
        assert plain_dumper.dump_str(1, "x") == '1 #int\n"x" #str\n'

    def test_tracker_shared_across_values(self, plain_dumper):
        """Values in one call share the back-reference numbering."""
        items = [1]
        out = plain_dumper.dump_str(items, items)
        assert out.endswith("]\n↩ &1\n")

    def test_ids_restart_each_call(self, plain_dumper):
        items = [1]
        first = plain_dumper.dump_str([items, items])
        second = plain_dumper.dump_str([items, items])
        assert first == second
        assert "↩ &2" in first

    def test_no_values(self, plain_dumper):
        assert plain_dumper.dump_str() == ""


class TestHeader:
    """Tests for the source location header."""

    def test_points_at_caller(self):
        out = Dumper(disable_color=True).dump_str(1)
        assert re.match(r"<#dump // .*test_dumper\.py:\d+\n1 #int\n$", out)

    def test_injected_location(self):
        d = Dumper(disable_color=True)
        d._caller_fn = lambda skip: ("app/views.py", 42)
        assert d.dump_str(1) == "<#dump // app/views.py:42\n1 #int\n"

    def test_no_caller_found(self):
        d = Dumper(disable_color=True)
        d._caller_fn = lambda skip: None
        assert d.dump_str(1) == "1 #int\n"

    def test_skip_frames_forwarded(self):
        seen = []
        d = Dumper(disable_color=True, skip_stack_frames=2)
        d._caller_fn = lambda skip: seen.append(skip)
        d.dump_str(1)
        assert seen == [2]

    def test_disabled(self):
        d = Dumper(disable_color=True, disable_header=True)
        d._caller_fn = lambda skip: pytest.fail("caller lookup should be skipped")
        assert d.dump_str(1) == "1 #int\n"


class TestColorSelection:
    """Tests for per-call colorizer selection."""

    def test_plain_for_non_tty(self):
        d = Dumper(disable_header=True, writer=io.StringIO())
        assert "\033[" not in d.dump_str(1)

    def test_ansi_for_tty(self):
        d = Dumper(disable_header=True, writer=FakeTTY())
        assert d.dump_str(1) == "\033[38;5;38m1\033[0m\033[90m #int\033[0m\n"

    def test_force_color(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        d = Dumper(disable_header=True, writer=io.StringIO())
        assert "\033[" in d.dump_str(1)

    def test_no_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        d = Dumper(disable_header=True, writer=FakeTTY())
        assert "\033[" not in d.dump_str(1)

    def test_disable_color_beats_force(self, monkeypatch):
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert "\033[" not in Dumper(disable_header=True, disable_color=True).dump_str(1)


class TestWriters:
    """Tests for methods that write to the configured writer."""

    def test_dump_to_writer(self):
        buf = io.StringIO()
        Dumper(writer=buf, disable_color=True, disable_header=True).dump(1)
        assert buf.getvalue() == "1 #int\n"

    def test_dump_defaults_to_stdout(self, capsys):
        Dumper(disable_header=True).dump(1)
        assert capsys.readouterr().out == "1 #int\n"

    def test_dump_json(self):
        buf = io.StringIO()
        Dumper(writer=buf).dump_json({"a": 1})
        assert buf.getvalue() == '{\n  "a": 1\n}\n'

    def test_dd_exits_with_status_1(self, monkeypatch):
        codes = []
        monkeypatch.setattr(dumper, "exit_func", codes.append)
        buf = io.StringIO()
        Dumper(writer=buf, disable_color=True, disable_header=True).dd("bye")
        assert buf.getvalue() == '"bye" #str\n'
        assert codes == [1]


class TestHTML:
    """Tests for HTML dumps."""

    def test_plain_html(self, plain_dumper):
        assert plain_dumper.dump_html({"a": 1}) == (
            HTML_OPEN + "#dict {\n  a =&gt; 1 #int\n}\n" + HTML_CLOSE
        )

    def test_html_shell(self):
        assert HTML_OPEN == (
            "<div style='background-color:black;'><pre style=\"background-color:black; "
            "color:white; padding:5px; border-radius: 5px\">\n"
        )
        assert HTML_CLOSE == "</pre></div>"

    def test_colored_spans(self):
        out = Dumper(disable_header=True).dump_html(1)
        assert '<span style="color:#40c0ff">1</span>' in out

    def test_escapes_content(self, plain_dumper):
        out = plain_dumper.dump_html("<b>")
        assert '"&lt;b&gt;" #str' in out


class TestJSON:
    """Tests for JSON dumps."""

    def test_single_value(self, plain_dumper):
        assert plain_dumper.dump_json_str({"a": 1}) == '{\n  "a": 1\n}'

    def test_several_values_as_list(self, plain_dumper):
        assert json.loads(plain_dumper.dump_json_str(1, "x")) == [1, "x"]

    def test_no_values(self, plain_dumper):
        assert plain_dumper.dump_json_str() == NO_ARGS_JSON
        assert json.loads(NO_ARGS_JSON) == {"error": "dump_json called with no arguments"}

    def test_encoding_error_returned(self, plain_dumper):
        result = json.loads(plain_dumper.dump_json_str({1, 2}))
        assert "not JSON serializable" in result["error"]

    def test_circular_reference_returned(self, plain_dumper):
        items = []
        items.append(items)
        assert "error" in json.loads(plain_dumper.dump_json_str(items))


class TestDiff:
    """Tests for value diffs."""

    def test_changed_field(self, plain_dumper):
        assert plain_dumper.diff_str({"a": 1}, {"a": 2}) == (
            "  #dict {\n"
            "-   a => 1 #int\n"
            "+   a => 2 #int\n"
            "  }\n"
        )

    def test_equal_values(self, plain_dumper):
        assert plain_dumper.diff_str([1], [1]) == "  #list [\n    0 => 1 #int\n  ]\n"

    def test_type_mismatch(self, plain_dumper):
        assert plain_dumper.diff_str(1, "1") == (
            "- type: int\n"
            "- 1 #int\n"
            "+ type: str\n"
            '+ "1" #str\n'
        )

    def test_each_side_numbers_from_one(self, plain_dumper):
        """Identical shapes diff as equal even though they are different objects."""
        left, right = [1], [1]
        out = plain_dumper.diff_str([left, left], [right, right])
        assert all(line.startswith("  ") for line in out.splitlines())
        assert "↩ &2" in out

    def test_header(self):
        d = Dumper(disable_color=True)
        d._caller_fn = lambda skip: ("app.py", 7)
        assert d.diff_str(1, 1).startswith("<#diff // app.py:7\n")

    def test_ansi_tint(self):
        d = Dumper(disable_header=True, writer=FakeTTY())
        out = d.diff_str({"a": 1}, {"a": 2})
        assert "\033[31m-\033[0m \033[31m  a => 1 #int\033[0m\n" in out
        assert "\033[32m+\033[0m \033[32m  a => 2 #int\033[0m\n" in out

    def test_html(self):
        out = Dumper(disable_header=True).diff_html({"a": 1}, {"a": 2})
        assert out.startswith(HTML_OPEN)
        assert out.endswith(HTML_CLOSE)
        assert '<span style="color:#ff5f5f">-</span> <span style="color:#ff5f5f">  a =&gt; 1 #int</span>' in out

    def test_diff_to_writer(self):
        buf = io.StringIO()
        Dumper(writer=buf, disable_color=True, disable_header=True).diff(1, 2)
        assert buf.getvalue() == "- 1 #int\n+ 2 #int\n"


class TestModuleHelpers:
    """Tests for the helpers bound to the default dumper."""

    @pytest.fixture(autouse=True)
    def no_color(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")

    def test_dump_str(self):
        assert vardump.dump_str({"a": 1}).endswith("#dict {\n  a => 1 #int\n}\n")

    def test_dump_prints(self, capsys):
        vardump.dump(1)
        out = capsys.readouterr().out
        assert out.startswith("<#dump // ")
        assert out.endswith("1 #int\n")

    def test_fdump(self):
        buf = io.StringIO()
        vardump.fdump(buf, 1)
        assert buf.getvalue().endswith("1 #int\n")
        assert "test_dumper.py" in buf.getvalue()

    def test_json_helpers(self, capsys):
        assert vardump.dump_json_str([1]) == "[\n  1\n]"
        vardump.dump_json([1])
        assert capsys.readouterr().out == "[\n  1\n]\n"

    def test_diff_helpers(self, capsys):
        assert vardump.diff_str(1, 2).endswith("- 1 #int\n+ 2 #int\n")
        assert vardump.diff_html(1, 2).startswith(HTML_OPEN)
        vardump.diff(1, 1)
        assert capsys.readouterr().out.endswith("  1 #int\n")

    def test_dump_html(self):
        assert vardump.dump_html(1).endswith(HTML_CLOSE)

    def test_dd(self, monkeypatch, capsys):
        codes = []
        monkeypatch.setattr(dumper, "exit_func", codes.append)
        vardump.dd(1)
        assert codes == [1]
        assert capsys.readouterr().out.endswith("1 #int\n")

    def test_with_options_copies(self):
        base = Dumper()
        limited = base.with_options(max_depth=1)
        assert limited.config.max_depth == 1
        assert base.config.max_depth == 15
        assert vardump.default_dumper.config.max_depth == 15
