from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ghent.core.entities import AuthorizationCode, Client, Scope, Token, TokenType
from ghent.core.exceptions import StorageFault
from ghent.storage.protocols import StorageProtocol

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from ghent.alchemy.protocols import (
        AuthorizationCodeRecordProtocol,
        ClientEndpointRecordProtocol,
        ClientRecordProtocol,
        ScopeLinkRecordProtocol,
        TokenRecordProtocol,
    )

logger = logging.getLogger(__name__)


class AlchemyStorage(StorageProtocol):
    """Relational token store over caller-supplied SQLAlchemy models.

    Table names come from the models, so applications control them by
    declaring their own mapped classes with the same attributes.

    Redirect URI matching: an explicit URI must equal one of the client's
    endpoint rows exactly. Without one, the endpoint flagged ``is_default``
    wins, then the earliest registered endpoint, else ``None``.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        *,
        client: type[ClientRecordProtocol],
        client_endpoint: type[ClientEndpointRecordProtocol],
        token: type[TokenRecordProtocol],
        token_scope: type[ScopeLinkRecordProtocol],
        authorization_code: type[AuthorizationCodeRecordProtocol],
        authorization_code_scope: type[ScopeLinkRecordProtocol],
    ) -> None:
        self.session_maker = session_maker
        self.client_model: Any = client
        self.client_endpoint_model: Any = client_endpoint
        self.token_model: Any = token
        self.token_scope_model: Any = token_scope
        self.authorization_code_model: Any = authorization_code
        self.authorization_code_scope_model: Any = authorization_code_scope

    async def get_client(
        self,
        client_id: str,
        secret: str | None = None,
        redirect_uri: str | None = None,
    ) -> Client | None:
        clients = self.client_model
        endpoints = self.client_endpoint_model

        if redirect_uri is not None:
            stmt = (
                select(clients, endpoints.uri)
                .join(endpoints, endpoints.client_id == clients.id)
                .where(clients.id == client_id, endpoints.uri == redirect_uri)
            )
        else:
            stmt = (
                select(clients, endpoints.uri)
                .outerjoin(endpoints, endpoints.client_id == clients.id)
                .where(clients.id == client_id)
                .order_by(endpoints.is_default.desc(), endpoints.id)
            )
        if secret is not None:
            stmt = stmt.where(clients.secret == secret)

        async with self.session_maker() as session:
            try:
                row = (await session.execute(stmt.limit(1))).first()
            except SQLAlchemyError as exc:
                logger.exception("Client lookup failed for %s", client_id)
                msg = "client lookup failed"
                raise StorageFault(msg) from exc

        if row is None:
            return None

        record, uri = row
        return Client(id=record.id, name=record.name, secret=record.secret, redirect_uri=uri)

    async def create_token(
        self,
        token: str,
        type: TokenType,  # noqa: A002
        client_id: str,
        user_id: str | None,
        expires: int,
    ) -> Token:
        record = self.token_model(
            token=token,
            type=str(type),
            client_id=client_id,
            user_id=user_id,
            expires=expires,
        )
        async with self.session_maker() as session:
            session.add(record)
            await self._commit(session, "token creation failed")
        return Token(token=token, type=TokenType(type), client_id=client_id, user_id=user_id, expires=expires)

    async def associate_scopes(self, token: str, scopes: list[Scope]) -> None:
        await self._associate(self.token_scope_model, "token", token, scopes)

    async def get_token(self, token: str, type: TokenType) -> Token | None:  # noqa: A002
        tokens = self.token_model
        links = self.token_scope_model
        async with self.session_maker() as session:
            try:
                result = await session.execute(
                    select(tokens).where(tokens.token == token, tokens.type == str(type)),
                )
                record = result.scalar_one_or_none()
                if record is None:
                    return None
                scope_rows = await session.execute(select(links).where(links.token == token))
            except SQLAlchemyError as exc:
                logger.exception("Token lookup failed")
                msg = "token lookup failed"
                raise StorageFault(msg) from exc

            return Token(
                token=record.token,
                type=TokenType(record.type),
                client_id=record.client_id,
                user_id=record.user_id,
                expires=record.expires,
                scopes=[Scope(name=link.scope, description=link.description) for link in scope_rows.scalars()],
            )

    async def delete_token(self, token: str) -> bool:
        return await self._delete(
            (self.token_scope_model, self.token_scope_model.token == token),
            (self.token_model, self.token_model.token == token),
        )

    async def create_authorization_code(
        self,
        code: str,
        client_id: str,
        user_id: str | None,
        redirect_uri: str,
        expires: int,
    ) -> AuthorizationCode:
        record = self.authorization_code_model(
            code=code,
            client_id=client_id,
            user_id=user_id,
            redirect_uri=redirect_uri,
            expires=expires,
        )
        async with self.session_maker() as session:
            session.add(record)
            await self._commit(session, "authorization code creation failed")
        return AuthorizationCode(
            code=code,
            client_id=client_id,
            user_id=user_id,
            redirect_uri=redirect_uri,
            expires=expires,
        )

    async def associate_authorization_code_scopes(self, code: str, scopes: list[Scope]) -> None:
        await self._associate(self.authorization_code_scope_model, "code", code, scopes)

    async def get_authorization_code(self, code: str) -> AuthorizationCode | None:
        codes = self.authorization_code_model
        links = self.authorization_code_scope_model
        async with self.session_maker() as session:
            try:
                record = (await session.execute(select(codes).where(codes.code == code))).scalar_one_or_none()
                if record is None:
                    return None
                scope_rows = await session.execute(select(links).where(links.code == code))
            except SQLAlchemyError as exc:
                logger.exception("Authorization code lookup failed")
                msg = "authorization code lookup failed"
                raise StorageFault(msg) from exc

            return AuthorizationCode(
                code=record.code,
                client_id=record.client_id,
                user_id=record.user_id,
                redirect_uri=record.redirect_uri,
                expires=record.expires,
                scopes=[Scope(name=link.scope, description=link.description) for link in scope_rows.scalars()],
            )

    async def delete_authorization_code(self, code: str) -> bool:
        return await self._delete(
            (self.authorization_code_scope_model, self.authorization_code_scope_model.code == code),
            (self.authorization_code_model, self.authorization_code_model.code == code),
        )

    async def _associate(self, link_model: Any, key: str, value: str, scopes: list[Scope]) -> None:  # noqa: ANN401
        column = getattr(link_model, key)
        async with self.session_maker() as session:
            try:
                existing = set((await session.execute(select(link_model.scope).where(column == value))).scalars())
            except SQLAlchemyError as exc:
                logger.exception("Scope lookup failed for %s", key)
                msg = "scope lookup failed"
                raise StorageFault(msg) from exc

            for scope in scopes:
                if scope.name in existing:
                    continue
                existing.add(scope.name)
                session.add(link_model(**{key: value, "scope": scope.name, "description": scope.description}))
            await self._commit(session, "scope association failed")

    async def _delete(self, links: tuple[Any, Any], records: tuple[Any, Any]) -> bool:
        link_model, link_clause = links
        record_model, record_clause = records
        async with self.session_maker() as session:
            try:
                await session.execute(delete(link_model).where(link_clause))
                result = await session.execute(delete(record_model).where(record_clause))
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.exception("Delete failed on %s", record_model.__tablename__)
                msg = "delete failed"
                raise StorageFault(msg) from exc
        return result.rowcount > 0  # type: ignore[attr-defined]

    @staticmethod
    async def _commit(session: AsyncSession, message: str) -> None:
        try:
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.exception("Storage write failed: %s", message)
            raise StorageFault(message) from exc
