import pytest
from pydantic import ValidationError

import config
from config import (
    EngineSettings,
    LoggingSettings,
    SessionSettings,
    TethariConfig,
    get_config,
    get_engine_settings,
    get_game_rules,
    load_config_from_file,
    reset_config,
)
from tethari.engine import Game

ENV_VARS = [
    "TETHARI_DEPTH", "TETHARI_TIME_LIMIT_MS", "TETHARI_SEED",
    "TETHARI_REPETITION_LIMIT", "TETHARI_NO_EVENT_LIMIT", "TETHARI_ALLOW_UNDO",
    "TETHARI_HUMAN_SIDE", "TETHARI_LOG_LEVEL", "TETHARI_LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


def test_defaults():
    cfg = get_config()
    assert cfg.engine.default_depth == 3
    assert cfg.engine.time_limit_ms is None
    assert cfg.rules.repetition_limit == 3
    assert cfg.rules.no_event_limit == 100
    assert cfg.rules.allow_undo is True
    assert cfg.session.human_side == "white"
    assert cfg.logging.log_level == "INFO"


def test_from_env(monkeypatch):
    monkeypatch.setenv("TETHARI_DEPTH", "5")
    monkeypatch.setenv("TETHARI_SEED", "7")
    monkeypatch.setenv("TETHARI_TIME_LIMIT_MS", "250")
    monkeypatch.setenv("TETHARI_ALLOW_UNDO", "false")
    monkeypatch.setenv("TETHARI_HUMAN_SIDE", "Black")
    monkeypatch.setenv("TETHARI_LOG_LEVEL", "debug")
    reset_config()
    assert get_engine_settings().default_depth == 5
    assert get_engine_settings().seed == 7
    assert get_engine_settings().time_limit_ms == 250
    assert get_game_rules().allow_undo is False
    assert config.get_session_settings().human_side == "black"
    assert config.get_logging_settings().log_level == "DEBUG"


def test_rules_from_env_reach_game(monkeypatch):
    monkeypatch.setenv("TETHARI_REPETITION_LIMIT", "4")
    monkeypatch.setenv("TETHARI_NO_EVENT_LIMIT", "50")
    reset_config()
    game = Game()
    assert game.repetition_limit == 4
    assert game.no_event_limit == 50
    explicit = Game(repetition_limit=3, no_event_limit=100)
    assert explicit.repetition_limit == 3
    assert explicit.no_event_limit == 100


def test_save_and_load_round_trip(tmp_path):
    cfg = TethariConfig()
    cfg.engine.default_depth = 6
    cfg.session.human_side = "black"
    path = tmp_path / "tethari.json"
    cfg.save_to_file(str(path))

    loaded = load_config_from_file(str(path))
    assert loaded.engine.default_depth == 6
    assert loaded.session.human_side == "black"
    assert loaded.config_file == str(path)
    assert get_config() is loaded


def test_update_from_dict_ignores_unknown_keys():
    cfg = TethariConfig()
    cfg.update_from_dict({"engine": {"default_depth": 2, "bogus": 1}, "nope": {"x": 1}})
    assert cfg.engine.default_depth == 2
    assert not hasattr(cfg.engine, "bogus")


@pytest.mark.parametrize("factory", [
    lambda: EngineSettings(default_depth=0),
    lambda: EngineSettings(default_depth=9),
    lambda: SessionSettings(human_side="red"),
    lambda: LoggingSettings(log_level="LOUD"),
])
def test_invalid_settings_rejected(factory):
    with pytest.raises(ValidationError):
        factory()
