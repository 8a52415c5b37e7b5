from __future__ import annotations

import os
from functools import cached_property
from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import Field, NonNegativeFloat, NonNegativeInt, PositiveInt, SecretStr  # noqa: TC002
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import event
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ghent.alchemy.adapter import AlchemyStorage
from ghent.alchemy.base import Base
from ghent.alchemy.models import (
    OAuthAuthorizationCode,
    OAuthAuthorizationCodeScope,
    OAuthClient,
    OAuthClientEndpoint,
    OAuthToken,
    OAuthTokenScope,
)

if TYPE_CHECKING:
    import sqlite3


class PostgresSettings(BaseSettings):
    """Connection and pool settings for a PostgreSQL token store (``GHENT_POSTGRES_*``)."""

    model_config = SettingsConfigDict(env_prefix="GHENT_POSTGRES_", extra="ignore")

    type: Literal["postgres"] = "postgres"
    host: str
    port: PositiveInt = 5432
    database: str
    username: str
    password: SecretStr
    pool_size: PositiveInt = 5
    max_overflow: NonNegativeInt = 10
    pool_timeout: NonNegativeFloat = 30.0
    pool_pre_ping: bool = True
    echo: bool = False

    def create_engine(self) -> AsyncEngine:
        url = URL.create(
            "postgresql+asyncpg",
            username=self.username,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.database,
        )
        return create_async_engine(
            url,
            echo=self.echo,
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
            pool_timeout=self.pool_timeout,
            pool_pre_ping=self.pool_pre_ping,
        )


class SqliteSettings(BaseSettings):
    """SQLite token store settings (``GHENT_SQLITE_*``).

    Token rows reference client rows and scope links reference tokens, so
    foreign keys are enforced by default. Concurrent grants write from
    separate sessions; ``busy_timeout_ms`` is how long a writer waits for the
    database lock before the write fails as a storage fault.
    """

    model_config = SettingsConfigDict(env_prefix="GHENT_SQLITE_", extra="ignore")

    type: Literal["sqlite"] = "sqlite"
    database: str
    enable_foreign_keys: bool = True
    busy_timeout_ms: NonNegativeInt = 5000
    echo: bool = False

    def create_engine(self) -> AsyncEngine:
        engine = create_async_engine(URL.create("sqlite+aiosqlite", database=self.database), echo=self.echo)
        pragmas = [f"PRAGMA busy_timeout={self.busy_timeout_ms}"]
        if self.enable_foreign_keys:
            pragmas.append("PRAGMA foreign_keys=ON")

        @event.listens_for(engine.sync_engine, "connect")
        def _apply_pragmas(dbapi_conn: sqlite3.Connection, _conn_record: object) -> None:
            cursor = dbapi_conn.cursor()
            for pragma in pragmas:
                cursor.execute(pragma)
            cursor.close()

        return engine


class DatabaseSettings(BaseSettings):
    """Database backing ``AlchemyStorage``.

    ``GHENT_DATABASE_TYPE`` selects ``sqlite`` (default) or ``postgres``; the
    dialect settings are then read from their own prefixes.

        db = DatabaseSettings.from_env()
        await db.create_tables()
        storage = db.storage()
    """

    model_config = SettingsConfigDict(env_prefix="GHENT_DATABASE_", extra="ignore")

    dialect: Annotated[PostgresSettings | SqliteSettings, Field(discriminator="type")]

    @classmethod
    def from_env(cls) -> DatabaseSettings:
        if os.getenv("GHENT_DATABASE_TYPE", "sqlite") == "postgres":
            return cls(dialect=PostgresSettings())  # type: ignore[call-arg]
        return cls(dialect=SqliteSettings())  # type: ignore[call-arg]

    @cached_property
    def engine(self) -> AsyncEngine:
        return self.dialect.create_engine()

    @cached_property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        return async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def storage(self) -> AlchemyStorage:
        """Token store over the default ``ghent.alchemy.models`` tables."""
        return AlchemyStorage(
            self.session_maker,
            client=OAuthClient,
            client_endpoint=OAuthClientEndpoint,
            token=OAuthToken,
            token_scope=OAuthTokenScope,
            authorization_code=OAuthAuthorizationCode,
            authorization_code_scope=OAuthAuthorizationCodeScope,
        )
