from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ghent.alchemy.base import Base


class OAuthClient(Base):
    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    secret: Mapped[str | None] = mapped_column(Text, default=None)


class OAuthClientEndpoint(Base):
    __tablename__ = "client_endpoints"
    __table_args__ = (UniqueConstraint("client_id", "uri", name="uq_client_endpoints_client_id_uri"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="cascade", onupdate="cascade"),
        index=True,
    )
    uri: Mapped[str] = mapped_column(Text)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)


class OAuthToken(Base):
    __tablename__ = "tokens"

    token: Mapped[str] = mapped_column(Text, primary_key=True)
    type: Mapped[str] = mapped_column(Text)
    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="cascade", onupdate="cascade"),
        index=True,
    )
    expires: Mapped[int] = mapped_column(BigInteger)
    user_id: Mapped[str | None] = mapped_column(Text, default=None, index=True)


class OAuthTokenScope(Base):
    __tablename__ = "token_scopes"

    token: Mapped[str] = mapped_column(
        ForeignKey("tokens.token", ondelete="cascade", onupdate="cascade"),
        primary_key=True,
    )
    scope: Mapped[str] = mapped_column(Text, primary_key=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)


class OAuthAuthorizationCode(Base):
    __tablename__ = "authorization_codes"

    code: Mapped[str] = mapped_column(Text, primary_key=True)
    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="cascade", onupdate="cascade"),
        index=True,
    )
    redirect_uri: Mapped[str] = mapped_column(Text)
    expires: Mapped[int] = mapped_column(BigInteger)
    user_id: Mapped[str | None] = mapped_column(Text, default=None)


class OAuthAuthorizationCodeScope(Base):
    __tablename__ = "authorization_code_scopes"

    code: Mapped[str] = mapped_column(
        ForeignKey("authorization_codes.code", ondelete="cascade", onupdate="cascade"),
        primary_key=True,
    )
    scope: Mapped[str] = mapped_column(Text, primary_key=True)
    description: Mapped[str | None] = mapped_column(Text, default=None)
