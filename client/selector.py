from __future__ import annotations
from typing import List

from rich.console import Console

from shared.errors import CreateConversationError, DirectoryError, InvalidSelectionError
from shared.log import get_logger
from shared.utils import parse_index, parse_peer_ids
from .api import ChatApi
from .console_input import LineReader
from .render import PROMPT, print_conversations, print_created, print_error
from .state import Conversation, ConversationSelection, SelectorState

logger = get_logger(__name__)

EXIT_COMMAND = "exit"
NEW_COMMAND = "new"


class ConversationSelector:
    """
    Interactive conversation picker.

    Each call to select() runs the state machine

        SHOWING_LIST -> AWAITING_INPUT -> (CREATING -> SHOWING_LIST)*
                                       -> RESOLVED | EXITED

    The list is fetched again every time it is shown. Invalid input sends the
    user back to the listing with no retry limit.
    """

    def __init__(self, api: ChatApi, session_token: str, reader: LineReader, console: Console) -> None:
        self.api = api
        self.session_token = session_token
        self.reader = reader
        self.console = console

    async def select(self) -> ConversationSelection:
        state = SelectorState.SHOWING_LIST
        conversations: List[Conversation] = []
        selection = ConversationSelection.exit()

        while state not in (SelectorState.RESOLVED, SelectorState.EXITED):
            logger.debug("Selector state %s", state.name)

            if state is SelectorState.SHOWING_LIST:
                try:
                    conversations = await self.api.list_conversations(self.session_token)
                except DirectoryError as e:
                    logger.error("Listing conversations failed: %s", e)
                    print_error(self.console, str(e))
                    selection = ConversationSelection.exit(failed=True)
                    state = SelectorState.EXITED
                    continue
                print_conversations(self.console, conversations)
                state = SelectorState.AWAITING_INPUT

            elif state is SelectorState.AWAITING_INPUT:
                try:
                    answer = (await self.reader.readline(PROMPT)).strip()
                except EOFError:
                    state = SelectorState.EXITED
                    continue

                if answer == EXIT_COMMAND:
                    state = SelectorState.EXITED
                elif answer == NEW_COMMAND:
                    state = SelectorState.CREATING
                else:
                    try:
                        selection = ConversationSelection.resolved(self._resolve(answer, conversations))
                        state = SelectorState.RESOLVED
                    except InvalidSelectionError as e:
                        logger.debug("Rejected selector input %r", answer)
                        print_error(self.console, str(e))
                        state = SelectorState.SHOWING_LIST

            elif state is SelectorState.CREATING:
                await self.create_flow()
                state = SelectorState.SHOWING_LIST

        return selection

    def _resolve(self, answer: str, conversations: List[Conversation]) -> str:
        idx = parse_index(answer, len(conversations))
        if idx is None:
            raise InvalidSelectionError("Invalid command.")
        return conversations[idx].id

    async def create_flow(self) -> None:
        """Ask for peer ids and create the conversation. Failures are reported, never raised."""
        try:
            answer = await self.reader.readline("Enter comma separated list of peer ids: ")
        except EOFError:
            return

        peers = parse_peer_ids(answer)
        if not peers:
            print_error(self.console, "No peer ids given, nothing created.")
            return

        try:
            conversation = await self.api.create_conversation(self.session_token, peers)
        except CreateConversationError as e:
            logger.warning("Creating conversation failed: %s", e)
            print_error(self.console, f'Error creating conversation: "{e}"')
            return

        print_created(self.console, conversation)
