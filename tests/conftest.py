"""
Global pytest fixtures for the slink_local test suite.

Responsibilities:
    - Provide isolated in-memory Storage, MappingStore and HistoryStore fixtures
    - Provide a FakeSession standing in for requests.Session so provider calls
      never touch the network
    - Provide a SlinkManager fixture wired to all of the above

Every fixture builds fresh objects, so no state leaks between tests.
"""

import pytest

from slink_local.app import create_manager, reset_manager
from slink_local.history.history import HistoryStore
from slink_local.manager.slink_manager import SlinkManager
from slink_local.storage.mappings import MappingStore
from slink_local.storage.storage import Storage

from tests.fakes import ORIGIN, TEST_PROVIDERS, FakeSession, StepClock


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep the process-wide manager and the default file store out of $HOME."""
    monkeypatch.setenv("SLINK_STORAGE_PATH", str(tmp_path / "store.json"))
    for name in ("SLINK_STORAGE_BACKEND", "SLINK_PROVIDERS", "SLINK_LOCAL_ORIGIN", "SLINK_DB_DSN"):
        monkeypatch.delenv(name, raising=False)
    reset_manager()
    yield
    reset_manager()


@pytest.fixture
def storage() -> Storage:
    """Fresh in-memory key-value medium."""
    return Storage()


@pytest.fixture
def mappings(storage: Storage) -> MappingStore:
    return MappingStore(storage, ORIGIN)


@pytest.fixture
def clock() -> StepClock:
    """A frozen clock: every record gets the same timestamp unless a test sets a step."""
    return StepClock()


@pytest.fixture
def history(storage: Storage, clock: StepClock) -> HistoryStore:
    return HistoryStore(storage, clock=clock)


@pytest.fixture
def session() -> FakeSession:
    """Offline session: every provider call fails with ConnectionError."""
    return FakeSession()


@pytest.fixture
def manager(storage: Storage, session: FakeSession) -> SlinkManager:
    """
    SlinkManager over the storage fixture and the fake session.

    Tests that need a provider to answer add entries to `session.responses`.
    """
    return create_manager(storage=storage, origin=ORIGIN, providers=TEST_PROVIDERS, session=session, timeout=2.0)
