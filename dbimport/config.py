from __future__ import annotations
import os
import pathlib
import typing as t
import yaml

from dbimport.constants import DEFAULT_CHUNK_SIZE, DEFAULT_ENCODING, SUPPORTED_ENCODINGS

_DEFAULT_PATH = pathlib.Path("dbimport.config.yml")


class ConfigError(RuntimeError):
    """Raised for any user‑visible configuration problem."""


class Environment:
    """
    A thin value‑object holding the attributes required to open a MariaDB /
    MySQL connection and read dump files.  Nothing here talks to the database.
    """

    def __init__(self, name: str, d: dict[str, t.Any]) -> None:
        self.name: str = name
        try:
            self.host: str = d["host"]
            self.user: str = d["user"]
        except KeyError as exc:
            raise ConfigError(f"Environment {name!r} is missing {exc.args[0]!r}") from exc
        self.port: int = int(d.get("port", 3306))
        # optional: a dump may select its own schema with USE
        self.database: str | None = d.get("database")

        # Allow `${ENV_VAR}` syntax for secrets
        raw_pwd: str = str(d.get("password", ""))
        self.password: str = (
            os.getenv(raw_pwd[2:-1], "") if raw_pwd.startswith("${") else raw_pwd
        )

        self.encoding: str = d.get("encoding", DEFAULT_ENCODING)
        if self.encoding not in SUPPORTED_ENCODINGS:
            raise ConfigError(
                f"Environment {name!r}: unsupported encoding {self.encoding!r} "
                f"(choose from {', '.join(SUPPORTED_ENCODINGS)})"
            )
        self.chunk_size: int = int(d.get("chunk_size", DEFAULT_CHUNK_SIZE))
        if self.chunk_size <= 0:
            raise ConfigError(f"Environment {name!r}: chunk_size must be positive")

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #
    def dsn(self) -> dict[str, t.Any]:
        """Return kwargs that mysql‑connector understands."""
        dsn: dict[str, t.Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
        }
        if self.database:
            dsn["database"] = self.database
        return dsn


def load(path: pathlib.Path | str | None = None, env: str | None = None) -> Environment:
    """
    Parse *path* (or the default YAML) and return an :class:`Environment`.
    """
    cfg_file = pathlib.Path(path) if path else _DEFAULT_PATH
    if not cfg_file.exists():
        raise ConfigError(f"Config file {cfg_file} not found.")

    with cfg_file.open() as fh:
        raw = yaml.safe_load(fh) or {}

    env_name = env or raw.get("default_env")
    if not env_name:
        raise ConfigError("No environment specified and no default_env in config")

    try:
        return Environment(env_name, raw["environments"][env_name])
    except KeyError as exc:
        raise ConfigError(f"Environment {env_name!r} not found in config") from exc
