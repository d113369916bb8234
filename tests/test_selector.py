import pytest

from client.api import ChatApi
from client.render import PROMPT
from client.selector import ConversationSelector
from tests.helpers import SESSION_COOKIE, FakeChatService, ScriptedReader, console_output, make_console


async def run_selector(config, service, reader):
    console = make_console()
    async with ChatApi(config, transport=service.transport) as api:
        selection = await ConversationSelector(api, SESSION_COOKIE, reader, console).select()
    return selection, console_output(console)


@pytest.mark.asyncio
async def test_index_resolves_conversation(config, service):
    selection, output = await run_selector(config, service, ScriptedReader(commands=["1"]))

    assert selection.conversation_id == "conv-b"
    assert not selection.is_exit
    assert '[0] "conv-a" (2 peers)' in output
    assert '[1] "conv-b" (1 peers)' in output


@pytest.mark.asyncio
async def test_out_of_range_index_reprompts(config, service):
    reader = ScriptedReader(commands=["2", "0"])
    selection, output = await run_selector(config, service, reader)

    assert selection.conversation_id == "conv-a"
    assert "Invalid command." in output
    # the listing is fetched again before the second prompt
    assert len(service.calls("GET", "/conversation")) == 2
    assert reader.prompts == [PROMPT, PROMPT]


@pytest.mark.asyncio
@pytest.mark.parametrize("answer", ["-1", "1.0", "one", "", "0x1", "new conversation"])
async def test_garbage_input_is_invalid(config, service, answer):
    selection, output = await run_selector(config, service, ScriptedReader(commands=[answer, "exit"]))

    assert selection.is_exit
    assert "Invalid command." in output


@pytest.mark.asyncio
async def test_surrounding_whitespace_is_ignored(config, service):
    selection, _ = await run_selector(config, service, ScriptedReader(commands=["  1 "]))
    assert selection.conversation_id == "conv-b"


@pytest.mark.asyncio
@pytest.mark.parametrize("conversations", [[], [{"_id": "conv-a", "peers": []}]])
async def test_exit_always_exits(config, conversations):
    service = FakeChatService(conversations)
    selection, _ = await run_selector(config, service, ScriptedReader(commands=["exit"]))

    assert selection.is_exit
    assert selection.failed is False


@pytest.mark.asyncio
async def test_empty_directory_still_prompts(config):
    service = FakeChatService([])
    reader = ScriptedReader(commands=["0", "exit"])
    selection, output = await run_selector(config, service, reader)

    assert "No conversation found. Create a new one with the 'new' command" in output
    assert "Invalid command." in output
    assert selection.is_exit


@pytest.mark.asyncio
async def test_new_runs_create_flow_once_then_relists(config, service):
    reader = ScriptedReader(commands=["new", "2"], peers=["p1, p2 ,p3"])
    selection, output = await run_selector(config, service, reader)

    assert service.created == [["p1", "p2", "p3"]]
    assert len(service.calls("POST", "/conversation")) == 1
    assert len(service.calls("GET", "/conversation")) == 2
    assert "Created conversation:" in output
    assert '"conv-2" with peers: p1, p2, p3' in output
    assert '[2] "conv-2" (3 peers)' in output
    assert selection.conversation_id == "conv-2"


@pytest.mark.asyncio
async def test_create_failure_is_reported_and_loop_continues(config):
    service = FakeChatService([], create_status=400)
    reader = ScriptedReader(commands=["new", "exit"], peers=["ghost"])
    selection, output = await run_selector(config, service, reader)

    assert "Error creating conversation" in output
    assert selection.is_exit
    assert selection.failed is False
    assert len(service.calls("GET", "/conversation")) == 2


@pytest.mark.asyncio
async def test_blank_peer_list_sends_nothing(config, service):
    reader = ScriptedReader(commands=["new", "exit"], peers=[" , "])
    _, output = await run_selector(config, service, reader)

    assert service.calls("POST", "/conversation") == []
    assert "No peer ids given" in output


@pytest.mark.asyncio
async def test_directory_failure_exits_with_failure(config):
    service = FakeChatService(list_status=500)
    reader = ScriptedReader(commands=["0"])
    selection, output = await run_selector(config, service, reader)

    assert selection.is_exit
    assert selection.failed is True
    assert reader.prompts == []
    assert "Authentication error" in output


@pytest.mark.asyncio
async def test_closed_input_exits(config, service):
    selection, _ = await run_selector(config, service, ScriptedReader())
    assert selection.is_exit
    assert selection.failed is False
