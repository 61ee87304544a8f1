from __future__ import annotations

import sys
from pathlib import Path

import fakeredis
import pytest

# Make the webook package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from webook.core import config as core_config  # noqa: E402
from webook.db import models  # noqa: E402
from webook.db import session as db_session  # noqa: E402
from webook.services.sms import SmsService  # noqa: E402


class RecordingSms(SmsService):
    """Collects sent messages; optionally fails every delivery."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, list[str], tuple[str, ...]]] = []
        self.fail = fail

    def send(self, template_id, args, *numbers):
        if self.fail:
            raise RuntimeError("vendor unavailable")
        self.sent.append((template_id, list(args), numbers))

    @property
    def last_code(self) -> str:
        return self.sent[-1][1][0]


@pytest.fixture()
def redis_client():
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture()
def sms():
    return RecordingSms()


@pytest.fixture()
def failing_sms():
    return RecordingSms(fail=True)


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Temporary SQLite database with fresh settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
