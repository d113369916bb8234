"""SWSC HTTP API client.

Covers the request side of the handshake: login, conversation listing and
conversation creation. The session token returned by login is the value of a
``Cookie`` header and is passed back explicitly on every authenticated call.

Usage:
    async with ChatApi(config) as api:
        identity = await api.authenticate("ada@example.org", "secret")
        conversations = await api.list_conversations(identity.session_token)
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

import httpx

from shared.config import ClientConfig
from shared.errors import AuthenticationError, ConfigError, CreateConversationError, DirectoryError
from shared.log import get_logger
from .state import Conversation, Identity

logger = get_logger(__name__)


def session_token_from(response: httpx.Response) -> str:
    """Collapse every Set-Cookie of a response into one Cookie header value."""
    pairs = []
    for raw in response.headers.get_list("set-cookie"):
        pair = raw.split(";", 1)[0].strip()
        if pair:
            pairs.append(pair)
    return "; ".join(pairs)


class ChatApi:
    """Async client for the chat service HTTP endpoints.

    Attributes:
        config: Client configuration providing the base url and timeout
    """

    def __init__(self, config: ClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the client.

        Args:
            config: Client configuration
            transport: Optional transport override, used by tests
        """
        self.config = config
        try:
            self._client = httpx.AsyncClient(
                base_url=config.base_url,
                timeout=config.timeout,
                transport=transport,
            )
        except httpx.InvalidURL as e:
            raise ConfigError(f"Invalid service url {config.base_url}: {e}") from e

    async def __aenter__(self) -> "ChatApi":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    def _headers(self, session_token: Optional[str] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if session_token:
            headers["Cookie"] = session_token
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        session_token: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        response = await self._client.request(
            method=method,
            url=path,
            headers=self._headers(session_token),
            json=json,
        )
        # Only the explicit token is ever sent; keep the client jar empty
        self._client.cookies.clear()
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    # Login
    async def authenticate(self, email: Optional[str], password: Optional[str]) -> Identity:
        """Exchange credentials for an Identity.

        Raises:
            AuthenticationError: network failure, refused credentials, or an
                unusable response
        """
        try:
            response = await self._request(
                "POST", "/login", json={"mail": email, "password": password}
            )
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Connection failed: {e}") from e

        if not response.is_success:
            raise AuthenticationError(
                f"Login refused ({response.status_code})", status_code=response.status_code
            )

        token = session_token_from(response)
        if not token:
            raise AuthenticationError("Login response carried no session cookie")

        try:
            body = response.json()
            if not isinstance(body, dict):
                raise ValueError("login body is not an object")
            identity = Identity.from_login(body, token)
        except ValueError as e:
            raise AuthenticationError(f"Malformed login response: {e}") from e

        logger.info("Logged in", extra={"user_id": identity.id})
        return identity

    # Conversations
    async def list_conversations(self, session_token: str) -> List[Conversation]:
        """List the conversations of the session, in server order.

        Raises:
            DirectoryError: network failure, rejected token, or malformed body
        """
        try:
            response = await self._request("GET", "/conversation", session_token=session_token)
        except httpx.HTTPError as e:
            raise DirectoryError(f"Connection failed: {e}") from e

        if not response.is_success:
            raise DirectoryError(
                f"Authentication error ({response.status_code})", status_code=response.status_code
            )

        try:
            body = response.json()
            entries = body.get("conversations") if isinstance(body, dict) else None
            if not isinstance(entries, list):
                raise ValueError("'conversations' must be a list")
            return [Conversation.from_dict(c) for c in entries]
        except ValueError as e:
            raise DirectoryError(f"Malformed conversation list: {e}") from e

    async def create_conversation(self, session_token: str, peer_ids: List[str]) -> Conversation:
        """Create a conversation with the given peers.

        Raises:
            CreateConversationError: network failure, refusal, or malformed body
        """
        try:
            response = await self._request(
                "POST", "/conversation", session_token=session_token, json={"peers": list(peer_ids)}
            )
        except httpx.HTTPError as e:
            raise CreateConversationError(f"Connection failed: {e}") from e

        if not response.is_success:
            raise CreateConversationError(
                f"Server refused ({response.status_code})", status_code=response.status_code
            )

        try:
            conversation = Conversation.from_dict(response.json())
        except ValueError as e:
            raise CreateConversationError(f"Malformed response: {e}") from e

        logger.info("Created conversation %s", conversation.id, extra={"conversation_id": conversation.id})
        return conversation
