from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict
import json


class MalformedFrameError(ValueError):
    """Raised when an inbound frame or message payload cannot be decoded."""
    pass


class MessageKind(IntEnum):
    """Message kinds as carried in the wire field ``type``."""

    TEXT = 0
    PICTURE = 1
    MISC = 2        # system notice sent through the chat channel

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        """Check if value is a known message kind."""
        try:
            cls(value)
            return True
        except ValueError:
            return False


class ChannelEvent(str, Enum):
    """Event names exchanged over the live channel."""

    # client -> server
    MESSAGE = "message"

    # server -> client
    NEW_MESSAGE = "new_message"
    ERROR = "error"


@dataclass(frozen=True)
class Message:
    """
    A chat message, in either direction:
    {
    "sender":  "user id",
    "content": "STRING",
    "type":    0 (TEXT) | 1 (PICTURE) | 2 (MISC)
    }
    """
    sender: str
    content: str
    kind: MessageKind = MessageKind.TEXT

    @classmethod
    def from_dict(cls, data: Any) -> 'Message':
        """Create Message from a decoded payload, validating fields"""
        if not isinstance(data, dict):
            raise MalformedFrameError("message payload must be an object")

        kind = data.get('type', MessageKind.TEXT)
        if not MessageKind.is_valid(kind):
            raise MalformedFrameError(f"Unknown message type: {kind!r}")

        # MISC notices may come from the service itself with no sender
        sender = data.get('sender')
        content = data.get('content', '')
        return cls(
            sender="" if sender is None else str(sender),
            content="" if content is None else str(content),
            kind=MessageKind(kind),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sender': self.sender,
            'content': self.content,
            'type': int(self.kind),
        }

    def is_notice(self) -> bool:
        return self.kind == MessageKind.MISC


@dataclass(frozen=True)
class Frame:
    """One JSON text frame on the live channel: {"event": ..., "data": ...}"""
    event: str
    data: Any = None

    @classmethod
    def from_json(cls, raw: str | bytes) -> 'Frame':
        try:
            if isinstance(raw, bytes):
                raw = raw.decode('utf-8')
            data = json.loads(raw)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            raise MalformedFrameError(f"Invalid frame: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get('event'), str):
            raise MalformedFrameError("frame must be an object with a string 'event'")
        return cls(event=data['event'], data=data.get('data'))

    def to_json(self) -> str:
        return json.dumps({'event': self.event, 'data': self.data}, separators=(',', ':'))


def outbound_text(sender: str, content: str) -> Frame:
    """Helper to wrap a typed line into a ``message`` frame"""
    message = Message(sender=sender, content=content, kind=MessageKind.TEXT)
    return Frame(event=ChannelEvent.MESSAGE.value, data=message.to_dict())
