from __future__ import annotations

# sqldemo/config.py
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

import yaml

# 配置解析顺序：
# 1) 环境变量 DEMO_CONFIG 指向的 YAML（最高优先级）
# 2) 项目根 config.yaml
# 3) 兜底：DEFAULT_ENVIRONMENTS
# 环境名取自 APP_ENV，缺省为 development；DEMO_DB_PATH 覆盖 SQLite 文件路径。
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_CONFIG = os.path.join(_PROJECT_ROOT, "config.yaml")

DEFAULT_ENV = "development"

DEFAULT_ENVIRONMENTS: Dict[str, Dict[str, Any]] = {
    "development": {
        "client": "sqlite3",
        "connection": {"database": os.path.join(_PROJECT_ROOT, "demo.db")},
    },
    "test": {
        "client": "sqlite3",
        "connection": {"database": os.path.join(_PROJECT_ROOT, "demo_test.db")},
    },
    "production": {
        "client": "pg",
        "connection": {
            "host": "localhost",
            "port": 5432,
            "user": "postgres",
            "password": "postgres",
            "database": "sqldemo",
        },
    },
}

SQLITE_CLIENTS = ("sqlite3", "sqlite")
PG_CLIENTS = ("pg", "postgres", "postgresql")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ConnectionConfig:
    client: str
    database: str
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    debug: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.client in SQLITE_CLIENTS

    @property
    def is_postgres(self) -> bool:
        return self.client in PG_CLIENTS


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name, default)
    if v is None:
        return None
    v = v.strip()
    return v if v else None


def get_env_name() -> str:
    return _getenv("APP_ENV", DEFAULT_ENV) or DEFAULT_ENV


def resolve_config_path(path: str | None = None) -> Optional[str]:
    """YAML file in effect, or None when the built-in table applies."""
    explicit = path or _getenv("DEMO_CONFIG")
    if explicit:
        if not os.path.exists(explicit):
            raise ConfigError(f"config file not found: {explicit}")
        return explicit
    return _ROOT_CONFIG if os.path.exists(_ROOT_CONFIG) else None


def read_environments(path: str | None = None) -> Dict[str, Dict[str, Any]]:
    """
    读取环境配置表 {env: {client, connection, debug}}。
    未指定路径且 config.yaml 不存在时返回内置的 DEFAULT_ENVIRONMENTS。
    """
    cfg_path = resolve_config_path(path)
    if cfg_path is None:
        return DEFAULT_ENVIRONMENTS
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {cfg_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path}: expected a mapping of environment names")
    return data


def _build(env: str, entry: Dict[str, Any], base_dir: str) -> ConnectionConfig:
    client = str(entry.get("client") or "").strip().lower()
    if client not in SQLITE_CLIENTS + PG_CLIENTS:
        raise ConfigError(f"environment '{env}': unsupported client '{client}'")
    conn = entry.get("connection") or {}
    if isinstance(conn, str):
        # sqlite 简写：connection: path/to.db
        conn = {"database": conn}
    database = conn.get("database") or conn.get("filename")
    if not database:
        raise ConfigError(f"environment '{env}': connection.database is required")
    database = str(database)
    if client in SQLITE_CLIENTS and database != ":memory:" and not os.path.isabs(database):
        # 相对路径以配置文件所在目录为基准
        database = os.path.normpath(os.path.join(base_dir, database))
    port = conn.get("port")
    return ConnectionConfig(
        client=client,
        database=database,
        host=conn.get("host"),
        port=int(port) if port is not None else None,
        user=conn.get("user"),
        password=conn.get("password"),
        debug=bool(entry.get("debug", False)),
    )


def get_connection_config(env: str | None = None, path: str | None = None) -> ConnectionConfig:
    name = env or get_env_name()
    cfg_path = resolve_config_path(path)
    environments = read_environments(cfg_path)
    entry = environments.get(name)
    if not isinstance(entry, dict):
        known = ", ".join(sorted(environments)) or "(none)"
        raise ConfigError(f"unknown environment '{name}'; known: {known}")
    base_dir = os.path.dirname(os.path.abspath(cfg_path)) if cfg_path else _PROJECT_ROOT
    cfg = _build(name, entry, base_dir)

    db_path = _getenv("DEMO_DB_PATH")
    if db_path and cfg.is_sqlite:
        cfg = replace(cfg, database=db_path)
    if cfg.is_sqlite and cfg.database != ":memory:":
        # 确保目录存在
        dirn = os.path.dirname(cfg.database) or "."
        os.makedirs(dirn, exist_ok=True)
    return cfg
