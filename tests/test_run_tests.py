"""Tests for the run_tests.py helper script."""

import importlib.util
import subprocess
from pathlib import Path
from unittest import mock

RUNNER = Path(__file__).parent.parent / "run_tests.py"


def load_runner():
    spec = importlib.util.spec_from_file_location("run_tests", RUNNER)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def completed(stdout="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


def test_default_run_skips_slow_and_passes_extra_args():
    runner = load_runner()
    with mock.patch.object(runner.subprocess, "run", return_value=completed(returncode=3)) as run:
        assert runner.main(["-k", "split"]) == 3

    cmd = run.call_args[0][0]
    assert cmd[1:3] == ["-m", "pytest"]
    assert cmd[-2:] == ["-m", "not slow"]
    assert "-k" in cmd and "split" in cmd


def test_all_includes_slow():
    runner = load_runner()
    with mock.patch.object(runner.subprocess, "run", return_value=completed()) as run:
        assert runner.main(["--all"]) == 0
    assert "not slow" not in run.call_args[0][0]


def test_list_slow_reports_collected_tests(capsys):
    output = (
        "tests/test_performance.py::test_very_deep_chain\n"
        "tests/test_performance.py::test_large_bushy_tree\n"
        "\n2/150 tests collected\n"
    )
    runner = load_runner()
    with mock.patch.object(runner.subprocess, "run", return_value=completed(stdout=output)) as run:
        assert runner.main(["--list-slow"]) == 0

    assert "--collect-only" in run.call_args[0][0]
    printed = capsys.readouterr().out
    assert "2 slow test(s)" in printed
    assert "test_very_deep_chain" in printed
    assert "collected" not in printed
