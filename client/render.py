from __future__ import annotations
from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from shared.message import Message
from .state import Conversation, Identity

SELF_STYLE = "green"
PEER_STYLE = "magenta"
NOTICE_STYLE = "yellow"
ERROR_STYLE = "red"

PROMPT = "SWSC $> "

BANNER = """\
###############################################
#              Welcome to SWSC                #
#                                             #
# Select a conversation to connect to it or   #
# enter one of the available commands :       #
#                                             #
#  <idx> - connect to selected conversation   #
#  new   - create new conversation            #
#  exit  - exit the program                   #
#                                             #
###############################################"""


def message_text(msg: Message, self_id: str) -> Text:
    """Render one inbound message; notices ignore the sender."""
    if msg.is_notice():
        return Text(msg.content, style=NOTICE_STYLE)
    style = SELF_STYLE if msg.sender == self_id else PEER_STYLE
    return Text(f"<{msg.sender}> {msg.content}", style=style)


def print_login(console: Console, identity: Identity) -> None:
    console.print(
        f"[green]Logged in as [underline]{escape(identity.display_name)}[/underline][/green]"
        f"[yellow] ({escape(identity.id)})[/yellow]"
    )
    console.print(BANNER, markup=False, highlight=False)


def print_conversations(console: Console, conversations: Iterable[Conversation]) -> None:
    conversations = list(conversations)
    if not conversations:
        console.print("No conversation found. Create a new one with the 'new' command")
        return
    console.print("[magenta]Available conversations: [/magenta]")
    for idx, conv in enumerate(conversations):
        console.print(f'\\[{idx}] "{escape(conv.id)}" ({len(conv.peers)} peers)', highlight=False)


def print_created(console: Console, conversation: Conversation) -> None:
    console.print(Text("Created conversation:", style=NOTICE_STYLE))
    console.print(
        f'  "{escape(conversation.id)}" with peers: {escape(", ".join(conversation.peers))}',
        highlight=False,
    )


def print_error(console: Console, text: str) -> None:
    console.print(Text(text, style=ERROR_STYLE))

