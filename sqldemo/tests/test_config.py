import os

import pytest

from sqldemo.config import ConfigError, get_connection_config, get_env_name, read_environments


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("APP_ENV", "DEMO_DB_PATH", "DEMO_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def _write(tmp_path, text):
    p = tmp_path / "envs.yaml"
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_default_environment_is_development(clean_env):
    assert get_env_name() == "development"
    clean_env.setenv("APP_ENV", "   ")
    assert get_env_name() == "development"


def test_app_env_selects_profile(clean_env):
    clean_env.setenv("APP_ENV", "production")
    cfg = get_connection_config()
    assert cfg.client == "pg"
    assert cfg.is_postgres and not cfg.is_sqlite
    assert cfg.host == "localhost"
    assert cfg.port == 5432
    assert cfg.database == "sqldemo"


def test_unknown_environment(clean_env):
    with pytest.raises(ConfigError, match="unknown environment 'staging'; known:"):
        get_connection_config("staging")


def test_relative_sqlite_path_follows_config_file(clean_env, tmp_path):
    path = _write(tmp_path, "development:\n  client: sqlite3\n  connection:\n    database: data/x.db\n")
    cfg = get_connection_config(path=path)
    assert cfg.database == str(tmp_path / "data" / "x.db")
    assert (tmp_path / "data").is_dir()


def test_db_path_override_applies_to_sqlite_only(clean_env, tmp_path):
    target = str(tmp_path / "override.db")
    clean_env.setenv("DEMO_DB_PATH", target)
    assert get_connection_config("development").database == target
    assert get_connection_config("production").database == "sqldemo"


def test_connection_shorthand_and_debug(clean_env, tmp_path):
    path = _write(tmp_path, "development:\n  client: sqlite\n  connection: ':memory:'\n  debug: true\n")
    cfg = get_connection_config(path=path)
    assert cfg.database == ":memory:"
    assert cfg.debug is True


def test_demo_config_env_var(clean_env, tmp_path):
    path = _write(tmp_path, "qa:\n  client: postgresql\n  connection:\n    database: qa_db\n    user: qa\n    password: secret\n")
    clean_env.setenv("DEMO_CONFIG", path)
    clean_env.setenv("APP_ENV", "qa")
    cfg = get_connection_config()
    assert cfg.database == "qa_db"
    assert cfg.user == "qa"
    assert "secret" not in repr(cfg)


def test_unsupported_client(clean_env, tmp_path):
    path = _write(tmp_path, "development:\n  client: oracledb\n  connection:\n    database: x\n")
    with pytest.raises(ConfigError, match="unsupported client 'oracledb'"):
        get_connection_config(path=path)


def test_missing_database(clean_env, tmp_path):
    path = _write(tmp_path, "development:\n  client: pg\n  connection:\n    host: db\n")
    with pytest.raises(ConfigError, match="connection.database is required"):
        get_connection_config(path=path)


def test_missing_explicit_file(clean_env, tmp_path):
    with pytest.raises(ConfigError, match="config file not found"):
        read_environments(str(tmp_path / "nope.yaml"))


def test_invalid_yaml(clean_env, tmp_path):
    path = _write(tmp_path, "development: [unclosed\n")
    with pytest.raises(ConfigError, match="invalid YAML"):
        read_environments(path)


def test_non_mapping_yaml(clean_env, tmp_path):
    path = _write(tmp_path, "- development\n- production\n")
    with pytest.raises(ConfigError, match="expected a mapping"):
        read_environments(path)


def test_builtin_table_without_config_file(clean_env, tmp_path):
    clean_env.setattr("sqldemo.config._ROOT_CONFIG", str(tmp_path / "absent.yaml"))
    envs = read_environments()
    assert set(envs) == {"development", "test", "production"}
    cfg = get_connection_config()
    assert cfg.is_sqlite
    assert os.path.basename(cfg.database) == "demo.db"
