import asyncio
import io
import json
import socket
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import httpx
import websockets
from rich.console import Console

from client.render import PROMPT

USER_ID = "5d2f7c0e9b1e8a0017a1b001"
EMAIL = "ada@example.org"
PASSWORD = "hunter2"
SESSION_COOKIE = "connect.sid=s%3Aabc123.sig"


def make_console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def console_output(console: Console) -> str:
    return console.file.getvalue()


class ScriptedReader:
    """
    Stands in for the terminal. Lines are queued per prompt kind so the
    selector, the create flow and the chat pump never steal each other's input.

    Exhausted command/peer queues raise EOFError. An exhausted chat queue
    blocks until cancelled unless chat_eof is set.
    """

    def __init__(self, commands=(), peers=(), chat=(), chat_eof: bool = False) -> None:
        self.commands = list(commands)
        self.peers = list(peers)
        self.chat = list(chat)
        self.chat_eof = chat_eof
        self.prompts: List[str] = []

    async def readline(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        await asyncio.sleep(0)
        if prompt == PROMPT:
            queue = self.commands
        elif prompt.startswith("Enter comma separated"):
            queue = self.peers
        else:
            if not self.chat:
                if self.chat_eof:
                    raise EOFError
                await asyncio.Event().wait()
            return self.chat.pop(0)
        if not queue:
            raise EOFError
        return queue.pop(0)


class FakeChatService:
    """In-process stand-in for the HTTP side of the chat service."""

    def __init__(
        self,
        conversations: Optional[List[Dict]] = None,
        *,
        list_status: int = 200,
        create_status: int = 201,
    ) -> None:
        self.conversations = list(conversations or [])
        self.list_status = list_status
        self.create_status = create_status
        self.requests: List[httpx.Request] = []
        self.created: List[List[str]] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.path == "/login" and request.method == "POST":
            body = json.loads(request.content)
            if body == {"mail": EMAIL, "password": PASSWORD}:
                return httpx.Response(
                    200,
                    json={"_id": USER_ID, "name": "Ada", "lastname": "Lovelace"},
                    headers=[("set-cookie", f"{SESSION_COOKIE}; Path=/; HttpOnly")],
                )
            return httpx.Response(401, json={"error": "Invalid credentials"})

        if request.url.path == "/conversation":
            if request.headers.get("cookie") != SESSION_COOKIE:
                return httpx.Response(401)
            if request.method == "GET":
                if self.list_status >= 400:
                    return httpx.Response(self.list_status)
                return httpx.Response(200, json={"conversations": self.conversations})
            if request.method == "POST":
                peers = json.loads(request.content)["peers"]
                self.created.append(peers)
                if self.create_status >= 400:
                    return httpx.Response(self.create_status, json={"error": "Unknown peer"})
                conv = {"_id": f"conv-{len(self.conversations)}", "peers": peers}
                self.conversations.append(conv)
                return httpx.Response(self.create_status, json=conv)

        return httpx.Response(404)


@asynccontextmanager
async def channel_server(handler, **kwargs):
    """Run a local WebSocket server and yield its port."""
    async with websockets.serve(handler, "127.0.0.1", 0, **kwargs) as server:
        yield server.sockets[0].getsockname()[1]


def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
