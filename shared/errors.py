from __future__ import annotations
from typing import Optional


class ChatClientError(Exception):
    """Base class for every failure the client reports to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(ChatClientError):
    """Login was refused or could not be completed."""
    pass


class DirectoryError(ChatClientError):
    """Conversation list could not be fetched."""
    pass


class CreateConversationError(ChatClientError):
    """Server refused or failed to create a conversation."""
    pass


class InvalidSelectionError(ChatClientError):
    """Selector input matched neither a command nor a listed index."""
    pass


class BridgeError(ChatClientError):
    """Live channel failed after it was opened."""
    pass


class BridgeConnectError(BridgeError):
    """Live channel could not be opened at all."""
    pass


class ConfigError(ChatClientError):
    """Configuration file is unreadable or malformed."""
    pass
