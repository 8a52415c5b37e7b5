"""SQLAlchemy 2.0 storage for issued tokens.

- Base: declarative base with dataclass mapping and a naming convention
- Models: default client, endpoint, token and authorization code tables
- AlchemyStorage: async adapter over any models with matching attributes
- DatabaseSettings: engine, session factory and default-table storage for
  SQLite or PostgreSQL

Usage with the default tables:
    from ghent.alchemy import DatabaseSettings

    db = DatabaseSettings.from_env()
    await db.create_tables()
    storage = db.storage()

Applications with their own tables pass their mapped classes instead:
    storage = AlchemyStorage(
        db.session_maker,
        client=MyClient,
        client_endpoint=MyClientEndpoint,
        token=MyToken,
        token_scope=MyTokenScope,
        authorization_code=MyAuthorizationCode,
        authorization_code_scope=MyAuthorizationCodeScope,
    )
"""

from ghent.alchemy.adapter import AlchemyStorage
from ghent.alchemy.base import Base
from ghent.alchemy.settings import DatabaseSettings

__all__ = [
    "AlchemyStorage",
    "Base",
    "DatabaseSettings",
]
