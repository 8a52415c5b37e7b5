from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ghent.core.exceptions import ClientError
from ghent.core.request import require_parameters

if TYPE_CHECKING:
    from ghent.core.entities import Client
    from ghent.core.request import RequestProtocol
    from ghent.storage.protocols import StorageProtocol

logger = logging.getLogger(__name__)


class ClientAuthenticator:
    def __init__(self, storage: StorageProtocol) -> None:
        self.storage = storage

    async def authenticate_confidential(self, request: RequestProtocol) -> Client:
        """Authenticate a client that holds a secret.

        HTTP basic credentials take precedence; ``client_id``/``client_secret``
        body parameters are the fallback. A ``redirect_uri`` parameter, when
        present, must also be registered to the client.
        """
        redirect_uri = request.get("redirect_uri")

        client_id: str | None = None
        secret: str | None = None
        if request.has_authorization():
            credentials = request.basic_credentials()
            if credentials is not None:
                client_id, secret = credentials

        if not client_id or not secret:
            client_id = request.get("client_id")
            secret = request.get("client_secret")

        if client_id and secret:
            client = await self.storage.get_client(client_id, secret, redirect_uri)
            if client is not None:
                return client

        logger.debug("Confidential client authentication failed for %s", client_id)
        raise ClientError(401, "client failed to authenticate")

    async def authenticate_public(self, request: RequestProtocol) -> Client:
        """Authenticate a client that cannot hold a secret.

        The registered redirect URI stands in for the secret, so it is
        mandatory here.
        """
        client_id, redirect_uri = require_parameters(request, ["client_id", "redirect_uri"])
        client = await self.storage.get_client(client_id, None, redirect_uri)
        if client is None:
            logger.debug("Public client %s presented an unregistered redirect URI", client_id)
            raise ClientError(401, "redirection URI is not registered to the client")
        return client
