#!/usr/bin/env python3
"""
Command-Line Host Tests
"""

import sys

import pytest

import main


def run_main(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["main.py", *args])
    return main.main()


class TestHeadlessOptions:
    """Tests for option handling in headless mode."""

    def test_headless_run(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "--headless", "--duration", "864000") == 0
        assert "Running headless simulation" in capsys.readouterr().out

    @pytest.mark.parametrize("extra", [
        ["--time-scale", "3600"],
        ["--paused"],
    ])
    def test_worker_only_options_rejected(self, monkeypatch, capsys, extra):
        """Clock options are refused when the engine is stepped directly."""
        with pytest.raises(SystemExit) as excinfo:
            run_main(monkeypatch, "--headless", *extra)
        assert excinfo.value.code == 2
        assert "worker mode only" in capsys.readouterr().err
