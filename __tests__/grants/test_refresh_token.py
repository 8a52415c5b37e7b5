import asyncio

import pytest

from ghent.core.entities import Scope, Token, TokenType
from ghent.core.exceptions import ClientError, ScopeError
from ghent.core.orchestrator import GrantOrchestrator
from ghent.core.request import OAuthRequest
from ghent.grants import RefreshTokenGrant
from ghent.grants import refresh_token as refresh_token_module
from ghent.storage.memory import InMemoryStorage

NOW = 1_700_000_000


class ConsumedTokenStorage(InMemoryStorage):
    async def delete_token(self, token: str) -> bool:
        await super().delete_token(token)
        return False


@pytest.fixture
def grant(orchestrator: GrantOrchestrator) -> RefreshTokenGrant:
    return RefreshTokenGrant(orchestrator)


def _refresh(token: str, scope: str | None = None, client: tuple[str, str] = ("c1", "s1")) -> OAuthRequest:
    client_id, client_secret = client
    params = {
        "grant_type": "refresh_token",
        "refresh_token": token,
        "client_id": client_id,
        "client_secret": client_secret,
    }
    if scope is not None:
        params["scope"] = scope
    return OAuthRequest(params=params)


async def _issue_refresh(orchestrator: GrantOrchestrator, *names: str) -> str:
    token = await orchestrator.issue_token(TokenType.REFRESH, "c1", "u1", [Scope(name=name) for name in names])
    return token.token


@pytest.mark.asyncio
async def test_rotates_refresh_token(grant: RefreshTokenGrant, orchestrator: GrantOrchestrator) -> None:
    original = await _issue_refresh(orchestrator, "read", "write")

    token = await grant.handle(_refresh(original))

    assert token.type is TokenType.ACCESS
    assert token.user_id == "u1"
    assert token.scope_names == ["read", "write"]
    assert token.refresh is not None
    assert token.refresh.token != original
    assert token.refresh.scope_names == ["read", "write"]
    assert await orchestrator.storage.get_token(original, TokenType.REFRESH) is None


@pytest.mark.asyncio
async def test_access_token_can_be_narrowed(grant: RefreshTokenGrant, orchestrator: GrantOrchestrator) -> None:
    original = await _issue_refresh(orchestrator, "read", "write")

    token = await grant.handle(_refresh(original, scope="write"))

    assert token.scope_names == ["write"]
    assert token.refresh is not None
    assert token.refresh.scope_names == ["read", "write"]


@pytest.mark.asyncio
async def test_scope_outside_original_grant_is_rejected(
    grant: RefreshTokenGrant,
    orchestrator: GrantOrchestrator,
) -> None:
    original = await _issue_refresh(orchestrator, "read")

    with pytest.raises(ScopeError, match="scope was not originally granted: admin"):
        await grant.handle(_refresh(original, scope="read admin"))

    assert await orchestrator.storage.get_token(original, TokenType.REFRESH) is not None


@pytest.mark.asyncio
async def test_expired_refresh_token_is_removed(
    grant: RefreshTokenGrant,
    orchestrator: GrantOrchestrator,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(refresh_token_module.time, "time", lambda: NOW)
    original = await _issue_refresh(orchestrator, "read")
    monkeypatch.setattr(refresh_token_module.time, "time", lambda: NOW + 86401)

    with pytest.raises(ClientError, match="refresh token has expired"):
        await grant.handle(_refresh(original))

    assert await orchestrator.storage.get_token(original, TokenType.REFRESH) is None


@pytest.mark.asyncio
async def test_refresh_token_of_another_client_is_rejected(
    grant: RefreshTokenGrant,
    orchestrator: GrantOrchestrator,
) -> None:
    original = await _issue_refresh(orchestrator, "read")

    with pytest.raises(ClientError) as exc:
        await grant.handle(_refresh(original, client=("web", "web-secret")))

    assert exc.value.error == "invalid_grant"


@pytest.mark.asyncio
async def test_access_token_cannot_be_used_as_refresh_token(
    grant: RefreshTokenGrant,
    orchestrator: GrantOrchestrator,
) -> None:
    access = await orchestrator.issue_token(TokenType.ACCESS, "c1", "u1", [Scope(name="read")])

    with pytest.raises(ClientError, match="invalid refresh token"):
        await grant.handle(_refresh(access.token))


@pytest.mark.asyncio
async def test_refresh_token_consumed_by_another_rotation_issues_nothing(token_generator) -> None:  # noqa: ANN001
    storage = ConsumedTokenStorage()
    storage.add_client("c1", name="C1", secret="s1")
    orchestrator = GrantOrchestrator(storage, token_generator=token_generator)
    original = await _issue_refresh(orchestrator)

    with pytest.raises(ClientError, match="invalid refresh token"):
        await RefreshTokenGrant(orchestrator).handle(_refresh(original))

    assert token_generator.count == 1


@pytest.mark.asyncio
async def test_concurrent_rotations_of_one_refresh_token_issue_once(alchemy_orchestrator: GrantOrchestrator) -> None:
    grant = RefreshTokenGrant(alchemy_orchestrator)
    original = await _issue_refresh(alchemy_orchestrator, "read")

    results = await asyncio.gather(
        grant.handle(_refresh(original)),
        grant.handle(_refresh(original)),
        return_exceptions=True,
    )

    tokens = [result for result in results if isinstance(result, Token)]
    errors = [result for result in results if isinstance(result, ClientError)]
    assert len(tokens) == 1
    assert len(errors) == 1
    assert errors[0].error == "invalid_grant"
    assert tokens[0].refresh is not None
    assert await alchemy_orchestrator.storage.get_token(original, TokenType.REFRESH) is None
