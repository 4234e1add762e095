from trustlens_agent.config import DEFAULT_MODEL, cors_allow_origins, load_settings


def test_defaults(monkeypatch):
    for name in (
        "GEMINI_API_KEY",
        "API_KEY",
        "GEMINI_MODEL",
        "TRUSTLENS_ENGINE",
        "TRUSTLENS_TEMPERATURE",
        "TRUSTLENS_ENGINE_TIMEOUT_S",
        "TRUSTLENS_USE_SEARCH",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings(dotenv=False)

    assert settings.api_key == ""
    assert settings.model == DEFAULT_MODEL
    assert settings.backend == "sdk"
    assert settings.temperature == 0.1
    assert settings.use_search is True


def test_env_overrides(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", " alias-key ")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
    monkeypatch.setenv("TRUSTLENS_ENGINE", "REST")
    monkeypatch.setenv("TRUSTLENS_TEMPERATURE", "not-a-number")
    monkeypatch.setenv("TRUSTLENS_ENGINE_TIMEOUT_S", "0.2")
    monkeypatch.setenv("TRUSTLENS_USE_SEARCH", "off")

    settings = load_settings(dotenv=False)

    assert settings.api_key == "alias-key"
    assert settings.model == "gemini-2.5-pro"
    assert settings.backend == "rest"
    assert settings.temperature == 0.1
    assert settings.timeout_s == 1.0
    assert settings.use_search is False


def test_cors_origins(monkeypatch):
    monkeypatch.delenv("TRUSTLENS_CORS_ORIGINS", raising=False)
    assert cors_allow_origins() == ["http://localhost:3000"]
    monkeypatch.setenv("TRUSTLENS_CORS_ORIGINS", "https://a.app, ,https://b.app")
    assert cors_allow_origins() == ["https://a.app", "https://b.app"]


def test_log_level(monkeypatch):
    import logging

    from trustlens_agent.config import log_level

    monkeypatch.setenv("TRUSTLENS_LOG_LEVEL", "debug")
    assert log_level() == logging.DEBUG
    monkeypatch.setenv("TRUSTLENS_LOG_LEVEL", "chatty")
    assert log_level() == logging.INFO


def test_project_env_file_feeds_cors_at_app_import(monkeypatch, tmp_path):
    import importlib
    import os

    from trustlens_agent import config, main

    (tmp_path / ".env").write_text("TRUSTLENS_CORS_ORIGINS=https://front.app\n")
    monkeypatch.setattr(config, "_PROJECT_ROOT", tmp_path)
    monkeypatch.delenv("TRUSTLENS_CORS_ORIGINS", raising=False)

    try:
        reloaded = importlib.reload(main)
        cors = next(m for m in reloaded.app.user_middleware if m.cls.__name__ == "CORSMiddleware")
        options = getattr(cors, "kwargs", None) or getattr(cors, "options", {})
        assert options["allow_origins"] == ["https://front.app"]
    finally:
        os.environ.pop("TRUSTLENS_CORS_ORIGINS", None)
        monkeypatch.undo()
        importlib.reload(main)
