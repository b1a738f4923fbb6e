from __future__ import annotations

from dataclasses import dataclass

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """DB connection factory.

    Note: We create short-lived connections per operation. One instance is
    built by the container and injected into every repository.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def target(self) -> str:
        return f"{self._config.user}@{self._config.host}:{self._config.port}/{self._config.database}"

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )
