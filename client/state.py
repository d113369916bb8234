from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Identity:
    id: str
    name: str
    lastname: str
    session_token: str

    @property
    def display_name(self) -> str:
        return f"{self.name} {self.lastname}".strip()

    @classmethod
    def from_login(cls, body: Dict[str, Any], session_token: str) -> "Identity":
        user_id = body.get("_id", body.get("id"))
        if user_id is None:
            raise ValueError("login response has no user id")
        return cls(
            id=str(user_id),
            name=str(body.get("name") or ""),
            lastname=str(body.get("lastname") or ""),
            session_token=session_token,
        )


@dataclass(frozen=True)
class Conversation:
    id: str
    peers: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "Conversation":
        if not isinstance(data, dict):
            raise ValueError("conversation entry must be an object")
        conv_id = data.get("_id", data.get("id"))
        if conv_id is None:
            raise ValueError("conversation entry has no id")
        peers = data.get("peers") or []
        if not isinstance(peers, list):
            raise ValueError("conversation peers must be a list")
        return cls(id=str(conv_id), peers=[str(p) for p in peers])


class SelectorState(Enum):
    SHOWING_LIST = auto()
    AWAITING_INPUT = auto()
    CREATING = auto()
    RESOLVED = auto()
    EXITED = auto()


@dataclass(frozen=True)
class ConversationSelection:
    """Outcome of one pass through the selector: a conversation id or an exit."""
    conversation_id: Optional[str] = None
    failed: bool = False

    @property
    def is_exit(self) -> bool:
        return self.conversation_id is None

    @classmethod
    def resolved(cls, conversation_id: str) -> "ConversationSelection":
        return cls(conversation_id=conversation_id)

    @classmethod
    def exit(cls, failed: bool = False) -> "ConversationSelection":
        return cls(conversation_id=None, failed=failed)


class BridgeOutcome(Enum):
    DISCONNECTED = auto()
