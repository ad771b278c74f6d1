import os
import tempfile

import pytest

# keep the API module's import-time init_db() away from the working directory
os.environ.setdefault("LINKAUDIT_DB", os.path.join(tempfile.mkdtemp(prefix="linkaudit-tests-"), "history.db"))

from linkaudit import db  # noqa: E402
from linkaudit.app.scanner import Analyzer  # noqa: E402


class StubFetcher:
    """Stands in for the content fetcher: returns fixed text or raises."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def fetch_page_text(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def make_fetcher():
    return StubFetcher


@pytest.fixture
def analyzer():
    return Analyzer(fetcher=StubFetcher(error=RuntimeError("network disabled in tests")))


@pytest.fixture
def history_db(tmp_path):
    db.configure(f"sqlite:///{tmp_path / 'history.db'}")
    db.init_db()
    yield db
    db.engine.dispose()
