from subway_deal.settings import ServerSettings


def test_defaults(monkeypatch):
    monkeypatch.delenv("SUBWAY_DEAL_SEED", raising=False)
    settings = ServerSettings(_env_file=None)
    assert settings.port == 8000
    assert settings.log_level == "INFO"
    assert settings.seed is None

    config = settings.game_config()
    assert config.max_actions_per_turn == 3
    assert config.max_players == 5


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SUBWAY_DEAL_SEED", "11")
    monkeypatch.setenv("SUBWAY_DEAL_LOG_LEVEL", "debug")
    monkeypatch.setenv("SUBWAY_DEAL_MAX_PLAYERS", "4")
    settings = ServerSettings(_env_file=None)

    assert settings.log_level == "DEBUG"
    assert settings.game_config().seed == 11
    assert settings.game_config().max_players == 4
    # An explicit seed wins over the configured one
    assert settings.game_config(seed=3).seed == 3
