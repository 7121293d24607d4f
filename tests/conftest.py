"""Shared pytest fixtures."""

from types import SimpleNamespace
from uuid import UUID

import pytest

from champions.config import Config
from champions.core.core import Services
from champions.core.modules.access.models import Actor
from champions.core.modules.user.models import Role
from fakes import FakeDatabase

ADMIN_ID = UUID("00000000-0000-0000-0000-00000000000a")
MODERATOR_ID = UUID("00000000-0000-0000-0000-00000000000b")
LEAD_ID = UUID("00000000-0000-0000-0000-00000000000c")
LEARNER_ID = UUID("00000000-0000-0000-0000-00000000000d")
VOLUNTEER_ID = UUID("00000000-0000-0000-0000-00000000000e")


@pytest.fixture
def config(tmp_path):
    return Config(
        database_url="mongodb://localhost:27017/champions_test",
        session_secret_key="test-secret",
        storage_path=str(tmp_path / "blobs"),
        llm_api_key="test-key",
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def core(config, database):
    """Core stand-in wiring every service to the in-memory database."""
    services = Services(database)  # type: ignore[arg-type]
    core = SimpleNamespace(config=config, database=database, services=services)
    services.set_core(core)  # type: ignore[arg-type]
    return core


@pytest.fixture
def admin():
    return Actor(id=ADMIN_ID, name="Admin", role=Role.ADMIN)


@pytest.fixture
def moderator():
    return Actor(id=MODERATOR_ID, name="Mod", role=Role.MODERATOR)


@pytest.fixture
def lead():
    return Actor(id=LEAD_ID, name="Lead", role=Role.INSTITUTIONAL_LEAD)


@pytest.fixture
def learner():
    return Actor(id=LEARNER_ID, name="Learner", role=Role.LEARNER)


@pytest.fixture
def volunteer():
    return Actor(id=VOLUNTEER_ID, name="Volunteer", role=Role.VOLUNTEER)
