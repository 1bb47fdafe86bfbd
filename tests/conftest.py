import pytest

from notesbot.config import BotConfig
from notesbot.router import CommandRouter, Sender
from notesbot.store import JsonStore

ADMIN_ID = 111


@pytest.fixture
def config(tmp_path):
    return BotConfig(
        token="test-token",
        admin_id=str(ADMIN_ID),
        notes_path=tmp_path / "notes.json",
        logs_path=tmp_path / "logs.json",
        suggestions_path=tmp_path / "suggestions.json",
    )


@pytest.fixture
def store(config):
    return JsonStore(config)


@pytest.fixture
def router(config, store):
    return CommandRouter(config, store)


@pytest.fixture
def admin():
    return Sender(user_id=ADMIN_ID, username="prof", first_name="Ada")


@pytest.fixture
def student():
    return Sender(user_id=222, username="kim", first_name="Kim")
