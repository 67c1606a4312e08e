import pytest

from personapi.config import get_settings
from personapi.db import PersonStore, make_session_factory
from personapi.db.models import initialize_db, make_engine


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point settings and the saved log config at per-test locations."""

    monkeypatch.setenv("PERSONAPI_DB_PATH", str(tmp_path / "settings.db"))
    monkeypatch.setenv("PERSONAPI_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("PERSONAPI_ENRICH_POLICY", raising=False)
    monkeypatch.delenv("PERSONAPI_LOG_CONFIG", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path}/test.db")
    initialize_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return PersonStore(session_factory)
