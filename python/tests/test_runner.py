"""Tests for the run-active-file command flow."""

import os

import pytest

from aerunner.config import Settings
from aerunner.errors import CompileFailed, ConfigNotFound, HostUnavailable
from aerunner.runner import Runner

HOST = "/opt/ae/AfterFX"


class _FakeTools:
    def __init__(self, listed=(), emitted=()):
        self.listed = [str(p) for p in listed]
        self.emitted = [str(p) for p in emitted]
        self.list_calls = 0
        self.compile_calls = 0
        self.compile_error = None

    def list_project_files(self, root):
        self.list_calls += 1
        return list(self.listed)

    def compile_and_list_outputs(self, root):
        self.compile_calls += 1
        if self.compile_error is not None:
            raise self.compile_error
        return list(self.emitted)

    def read_modification_time(self, path):
        return 1


class _FakeHost:
    def __init__(self, host_path=HOST):
        self.host_path = host_path
        self.launched = []
        self.lookups = 0

    def find_host_path(self):
        self.lookups += 1
        if self.host_path is None:
            raise HostUnavailable("Please launch After Effects.")
        return self.host_path

    def run_script(self, host_path, script_path):
        self.launched.append((host_path, script_path))


def _project(tmp_path):
    """Create a tsconfig project with src/ and out/ directories."""
    (tmp_path / "tsconfig.json").write_text("{}")
    (tmp_path / "src").mkdir()
    (tmp_path / "out").mkdir()
    return tmp_path


def test_unsupported_extension_is_skipped(tmp_path):
    host = _FakeHost()
    runner = Runner(_FakeTools(), host)
    result = runner.run_file(str(tmp_path / "notes.md"))
    assert result.action == "skipped"
    assert result.reason == "unsupported_extension"
    assert host.lookups == 0
    assert host.launched == []


def test_jsxbin_runs_directly(tmp_path):
    _project(tmp_path)
    tools = _FakeTools()
    host = _FakeHost()
    script = str(tmp_path / "src" / "tool.JSXBIN")
    result = Runner(tools, host).run_file(script)
    assert result.action == "launched"
    assert host.launched == [(HOST, script)]
    assert tools.list_calls == 0


def test_host_missing_propagates(tmp_path):
    runner = Runner(_FakeTools(), _FakeHost(host_path=None))
    with pytest.raises(HostUnavailable):
        runner.run_file(str(tmp_path / "a.ts"))


def test_plain_js_without_config_runs_directly(tmp_path, monkeypatch):
    monkeypatch.setattr("aerunner.runner.find_config", lambda path: None)
    host = _FakeHost()
    script = tmp_path / "loose" / "script.jsx"
    script.parent.mkdir()
    result = Runner(_FakeTools(), host).run_file(str(script))
    assert result.action == "launched"
    assert result.config is None
    assert host.launched == [(HOST, str(script))]


def test_ts_without_config_raises(tmp_path, monkeypatch):
    monkeypatch.setattr("aerunner.runner.find_config", lambda path: None)
    with pytest.raises(ConfigNotFound, match="Unable to find tsconfig.json"):
        Runner(_FakeTools(), _FakeHost()).run_file(str(tmp_path / "main.ts"))


def test_listed_ts_compiles_and_runs_output(tmp_path):
    root = _project(tmp_path)
    src = root / "src" / "main.ts"
    out = root / "out" / "main.js"
    tools = _FakeTools(listed=[src], emitted=[out])
    host = _FakeHost()

    result = Runner(tools, host).run_file(str(src))

    assert result.action == "launched"
    assert result.script == str(out)
    assert result.config == str(root / "tsconfig.json")
    assert host.launched == [(HOST, str(out))]


def test_best_matching_output_is_chosen(tmp_path):
    root = _project(tmp_path)
    src = root / "src" / "panel.ts"
    emitted = [root / "out" / "util.js", root / "out" / "panel.js", root / "out" / "main.js"]
    tools = _FakeTools(listed=[root / "src" / "util.ts", src], emitted=emitted)
    host = _FakeHost()

    result = Runner(tools, host).run_file(str(src))
    assert result.script == str(root / "out" / "panel.js")


def test_source_maps_are_never_launched(tmp_path):
    root = _project(tmp_path)
    src = root / "src" / "main.ts"
    emitted = [root / "out" / "main.js.map", root / "out" / "main.d.ts", root / "out" / "main.js"]
    tools = _FakeTools(listed=[src], emitted=emitted)

    result = Runner(tools, _FakeHost()).run_file(str(src))
    assert result.script == str(root / "out" / "main.js")


def test_output_ignore_setting_is_honoured(tmp_path):
    root = _project(tmp_path)
    src = root / "src" / "main.ts"
    emitted = [root / "out" / "main.js.map"]
    tools = _FakeTools(listed=[src], emitted=emitted)

    result = Runner(tools, _FakeHost(), Settings(output_ignore=[])).run_file(str(src))
    assert result.script == str(root / "out" / "main.js.map")


def test_no_outputs_is_skipped(tmp_path):
    root = _project(tmp_path)
    src = root / "src" / "main.ts"
    host = _FakeHost()
    result = Runner(_FakeTools(listed=[src]), host).run_file(str(src))
    assert result.action == "skipped"
    assert result.reason == "no_outputs"
    assert host.launched == []


def test_ts_outside_project_is_skipped(tmp_path):
    root = _project(tmp_path)
    src = root / "scratch.ts"
    tools = _FakeTools(listed=[root / "src" / "main.ts"])
    result = Runner(tools, _FakeHost()).run_file(str(src))
    assert result.action == "skipped"
    assert result.reason == "not_in_project"
    assert tools.compile_calls == 0


def test_js_outside_project_runs_directly(tmp_path):
    root = _project(tmp_path)
    script = root / "tools" / "debug.js"
    tools = _FakeTools(listed=[root / "src" / "main.ts"])
    host = _FakeHost()
    result = Runner(tools, host).run_file(str(script))
    assert result.action == "launched"
    assert host.launched == [(HOST, str(script))]
    assert tools.compile_calls == 0


def test_membership_is_cached_across_runs(tmp_path):
    root = _project(tmp_path)
    a = root / "src" / "a.ts"
    b = root / "src" / "b.ts"
    tools = _FakeTools(listed=[a, b], emitted=[root / "out" / "a.js", root / "out" / "b.js"])
    runner = Runner(tools, _FakeHost())

    runner.run_file(str(a))
    runner.run_file(str(b))
    runner.run_file(str(a))

    assert tools.list_calls == 1
    assert tools.compile_calls == 3


def test_compile_failure_propagates(tmp_path):
    root = _project(tmp_path)
    src = root / "src" / "main.ts"
    tools = _FakeTools(listed=[src])
    tools.compile_error = CompileFailed("tsc exited with code 2", returncode=2)
    host = _FakeHost()
    with pytest.raises(CompileFailed):
        Runner(tools, host).run_file(str(src))
    assert host.launched == []


def test_relative_paths_are_made_absolute(tmp_path, monkeypatch):
    root = _project(tmp_path)
    out = root / "out" / "main.js"
    monkeypatch.chdir(root)
    expected = os.path.abspath(os.path.join("src", "main.ts"))
    tools = _FakeTools(listed=[expected], emitted=[out])

    result = Runner(tools, _FakeHost()).run_file(os.path.join("src", "main.ts"))
    assert result.file == expected
    assert result.script == str(out)


def test_run_result_to_dict(tmp_path):
    result = Runner(_FakeTools(), _FakeHost()).run_file(str(tmp_path / "notes.txt"))
    assert result.to_dict() == {
        "action": "skipped",
        "file": str(tmp_path / "notes.txt"),
        "script": None,
        "config": None,
        "reason": "unsupported_extension",
    }
