import os
import tempfile

import pytest

# Must be set before db.py is imported anywhere.
_DB_PATH = os.path.join(tempfile.gettempdir(), "mathtutor_scoring_test.db")
if os.path.exists(_DB_PATH):
    os.remove(_DB_PATH)
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ.pop("OPENAI_API_KEY", None)

from db import Base, engine  # noqa: E402
import models  # noqa: E402,F401

Base.metadata.create_all(engine)


@pytest.fixture(autouse=True)
def _fresh_feedback_cache():
    from routers.tagging import feedback_cache

    feedback_cache.clear()
    yield
    feedback_cache.clear()
