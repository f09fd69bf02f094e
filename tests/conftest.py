import os
import tempfile
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="okr-tests-"))
os.environ["DATA_DIR"] = str(_TMP_DIR)
os.environ["SQLITE_PATH"] = str(_TMP_DIR / "okr_test.db")

import pytest  # noqa: E402

import okr.models  # noqa: E402,F401
from okr.core.database import Base, engine  # noqa: E402
from okr.services.levels import LevelConfiguration, ScoreLevel  # noqa: E402


@pytest.fixture
def levels() -> LevelConfiguration:
    return LevelConfiguration.default()


@pytest.fixture
def legacy_levels() -> LevelConfiguration:
    """The absolute 3.0-5.0 scale some deployments still configure."""
    return LevelConfiguration.from_levels(
        [
            ScoreLevel("Below", 3.0, "#d9534f", 0),
            ScoreLevel("Meets", 4.25, "#f0ad4e", 1),
            ScoreLevel("Good", 4.5, "#5cb85c", 2),
            ScoreLevel("Very Good", 4.75, "#28a745", 3),
            ScoreLevel("Exceptional", 5.0, "#1e7b34", 4),
        ]
    )


@pytest.fixture
def three_levels() -> LevelConfiguration:
    return LevelConfiguration.from_levels(
        [
            ScoreLevel("High", 1.0, "#00aa00", 2),
            ScoreLevel("Low", 0.0, "#aa0000", 0),
            ScoreLevel("Mid", 0.5, "#aaaa00", 1),
        ]
    )


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
