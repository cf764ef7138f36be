import argparse
import importlib.util
import logging
from pathlib import Path

import pytest

RUN_PY = Path(__file__).resolve().parents[1] / "launchers" / "run.py"


@pytest.fixture
def launcher(monkeypatch):
    spec = importlib.util.spec_from_file_location("launchers_run", RUN_PY)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    calls = {}
    monkeypatch.setattr(module, "run_game", lambda **kw: calls.setdefault("run", kw))
    monkeypatch.setattr(module, "setup_logging", lambda level, log_file=None: calls.setdefault("level", level))
    return module, calls


class TestParseScreen:
    def test_parses_size(self, launcher):
        module, _ = launcher
        assert module.parse_screen("800X600") == (800, 600)

    @pytest.mark.parametrize("value", ["big", "0x600", "800"])
    def test_rejects_bad_size(self, launcher, value):
        module, _ = launcher
        with pytest.raises(argparse.ArgumentTypeError):
            module.parse_screen(value)


class TestMain:
    def test_log_level_flag_wins_over_bad_env(self, launcher, monkeypatch, tmp_path):
        module, calls = launcher
        monkeypatch.setenv("REP_LOG_LEVEL", "chatty")
        monkeypatch.setattr("sys.argv", [
            "run.py", "--log-level", "debug", "--offline", "--env-file", str(tmp_path / "none.env")])
        module.main()
        assert calls["level"] == logging.DEBUG
        assert calls["run"]["sync_tasks"] is False
        assert calls["run"]["game_id"] == "rep-challenge"

    def test_bad_env_level_without_flag_fails(self, launcher, monkeypatch, tmp_path):
        module, _ = launcher
        monkeypatch.setenv("REP_LOG_LEVEL", "chatty")
        monkeypatch.setattr("sys.argv", ["run.py", "--env-file", str(tmp_path / "none.env")])
        with pytest.raises(ValueError):
            module.main()
