"""Shared fixtures: a seeded in-memory store, a scope catalog and a SQLite-backed store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ghent.alchemy import AlchemyStorage, Base
from ghent.alchemy.models import (
    OAuthAuthorizationCode,
    OAuthAuthorizationCodeScope,
    OAuthClient,
    OAuthClientEndpoint,
    OAuthToken,
    OAuthTokenScope,
)
from ghent.alchemy.settings import SqliteSettings
from ghent.core.entities import Scope
from ghent.core.orchestrator import GrantOrchestrator
from ghent.core.scopes import ScopeValidator
from ghent.core.settings import GrantSettings
from ghent.storage.memory import InMemoryStorage

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path


class SequentialTokenGenerator:
    def __init__(self, prefix: str = "tok") -> None:
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count:036d}"


@pytest.fixture
def token_generator() -> SequentialTokenGenerator:
    return SequentialTokenGenerator()


@pytest.fixture
def scope_validator() -> ScopeValidator:
    catalog = {
        "read": Scope(name="read", description="Read access"),
        "write": Scope(name="write", description="Write access"),
        "admin": Scope(name="admin"),
    }
    return ScopeValidator(catalog, ["read"])


@pytest.fixture
def grant_settings() -> GrantSettings:
    return GrantSettings(
        access_token_ttl_seconds=3600,
        refresh_token_ttl_seconds=86400,
        authorization_code_ttl_seconds=60,
    )


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    storage = InMemoryStorage()
    storage.add_client("c1", name="C1", secret="s1")
    storage.add_client("web", name="Web", secret="web-secret", redirect_uris=["https://x/cb", "https://x/alt"])
    storage.add_client("app", name="App", redirect_uris=["https://app.example/cb"])
    return storage


@pytest.fixture
def orchestrator(
    memory_storage: InMemoryStorage,
    grant_settings: GrantSettings,
    scope_validator: ScopeValidator,
    token_generator: SequentialTokenGenerator,
) -> GrantOrchestrator:
    return GrantOrchestrator(
        memory_storage,
        settings=grant_settings,
        scope_validator=scope_validator,
        token_generator=token_generator,
    )


@pytest_asyncio.fixture
async def alchemy_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    engine = SqliteSettings(database=str(tmp_path / "ghent.db")).create_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def alchemy_session_factory(alchemy_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(alchemy_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def alchemy_storage(alchemy_session_factory: async_sessionmaker[AsyncSession]) -> AlchemyStorage:
    return AlchemyStorage(
        alchemy_session_factory,
        client=OAuthClient,
        client_endpoint=OAuthClientEndpoint,
        token=OAuthToken,
        token_scope=OAuthTokenScope,
        authorization_code=OAuthAuthorizationCode,
        authorization_code_scope=OAuthAuthorizationCodeScope,
    )


@pytest_asyncio.fixture
async def alchemy_orchestrator(
    alchemy_storage: AlchemyStorage,
    alchemy_session_factory: async_sessionmaker[AsyncSession],
    grant_settings: GrantSettings,
    scope_validator: ScopeValidator,
) -> GrantOrchestrator:
    async with alchemy_session_factory() as session:
        session.add_all(
            [
                OAuthClient(id="c1", name="C1", secret="s1"),
                OAuthClient(id="web", name="Web", secret="web-secret"),
            ],
        )
        await session.commit()
        session.add(OAuthClientEndpoint(client_id="web", uri="https://x/cb"))
        await session.commit()

    return GrantOrchestrator(alchemy_storage, settings=grant_settings, scope_validator=scope_validator)
