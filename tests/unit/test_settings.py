"""Unit tests for Settings: env names, defaults and singleton reset."""
from users_backend.core.settings import Settings, get_settings, reset_settings


def test_defaults(monkeypatch):
    for name in ("PORT", "DB_HOST", "DB_PORT", "DB_POOL_SIZE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.port == 3000
    assert s.db_host == "localhost"
    assert s.db_port == 3306
    assert s.db_pool_size == 5
    assert s.log_level == "INFO"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_USER", "svc")
    monkeypatch.setenv("DB_PASSWORD", "pw")
    monkeypatch.setenv("DB_DATABASE", "accounts")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = Settings(_env_file=None)
    assert s.port == 8080
    assert (s.db_host, s.db_user, s.db_password, s.db_database) == ("db.internal", "svc", "pw", "accounts")
    assert s.log_level == "DEBUG"


def test_log_path_empty_means_stderr(monkeypatch):
    monkeypatch.setenv("LOG_FILE", "")
    assert Settings(_env_file=None).log_path is None
    monkeypatch.setenv("LOG_FILE", "logs/x.log")
    s = Settings(_env_file=None)
    assert s.log_path == s.base_dir / "logs" / "x.log"


def test_get_settings_is_cached_until_reset(monkeypatch):
    first = get_settings()
    assert get_settings() is first
    monkeypatch.setenv("PORT", "4000")
    reset_settings()
    try:
        assert get_settings().port == 4000
    finally:
        monkeypatch.delenv("PORT")
        reset_settings()
