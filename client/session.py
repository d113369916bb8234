from __future__ import annotations
from typing import Optional

import httpx
from rich.console import Console

from shared.config import ClientConfig
from shared.errors import AuthenticationError, BridgeConnectError, BridgeError, ConfigError
from shared.log import get_logger
from .api import ChatApi
from .console_input import LineReader
from .render import print_error, print_login
from .selector import ConversationSelector
from .ws_client import LiveSessionBridge

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


async def run_session(
    config: ClientConfig,
    email: Optional[str],
    password: Optional[str],
    reader: LineReader,
    console: Console,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """
    Authenticate once, then select and bridge conversations until the user
    leaves. Returns the process exit status.

    Only the Identity is kept between iterations. A bridge that cannot even
    connect ends the program; a bridge that closes sends the user back to
    the conversation list.
    """
    try:
        api = ChatApi(config, transport=transport)
    except ConfigError as e:
        logger.error("Cannot build HTTP client: %s", e)
        print_error(console, str(e))
        return EXIT_FAILURE

    async with api:
        try:
            identity = await api.authenticate(email, password)
        except AuthenticationError as e:
            logger.error("Authentication failed: %s", e)
            print_error(console, str(e))
            return EXIT_FAILURE

        print_login(console, identity)
        selector = ConversationSelector(api, identity.session_token, reader, console)

        while True:
            selection = await selector.select()
            if selection.is_exit:
                return EXIT_FAILURE if selection.failed else EXIT_OK

            bridge = LiveSessionBridge(config, identity, selection.conversation_id, reader, console)
            try:
                await bridge.run()
            except BridgeConnectError as e:
                print_error(console, str(e))
                return EXIT_FAILURE
            except BridgeError as e:
                logger.warning("Bridge ended with error: %s", e, extra={"user_id": identity.id})
                print_error(console, str(e))
