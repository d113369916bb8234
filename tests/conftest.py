import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Loggers are configured at import time; keep their files out of the checkout
os.environ.setdefault("SWSC_LOG_DIR", str(Path(tempfile.gettempdir()) / "swsc-test-logs"))

from client.state import Identity
from shared.config import ClientConfig
from tests.helpers import SESSION_COOKIE, USER_ID, FakeChatService


@pytest.fixture
def identity() -> Identity:
    return Identity(id=USER_ID, name="Ada", lastname="Lovelace", session_token=SESSION_COOKIE)


@pytest.fixture
def two_conversations():
    return [
        {"_id": "conv-a", "peers": ["p1", "p2"]},
        {"_id": "conv-b", "peers": ["p3"]},
    ]


@pytest.fixture
def service(two_conversations) -> FakeChatService:
    return FakeChatService(two_conversations)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(host="http://127.0.0.1", port="3030", timeout=5.0)


@pytest.fixture(autouse=True)
def no_user_config(monkeypatch, tmp_path):
    """Never pick up a developer's ~/.swsc/config.yaml."""
    monkeypatch.setenv("SWSC_CONFIG", str(tmp_path / "missing.yaml"))
    for var in ("SWSC_HOST", "SWSC_PORT", "SWSC_EMAIL", "SWSC_PASS"):
        monkeypatch.delenv(var, raising=False)
