import logging
import re
from typing import Any, Dict, List

from sqlalchemy import delete, func, select

from okr.core.database import session_scope
from okr.models import ScoreLevelRecord
from okr.services.levels import DEFAULT_LEVELS, LevelConfiguration, ScoreLevel

logger = logging.getLogger(__name__)

COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def _to_level(record: ScoreLevelRecord) -> ScoreLevel:
    return ScoreLevel(
        name=record.name,
        score_value=float(record.score_value),
        color=record.color,
        display_order=record.display_order or 0,
    )


def list_levels() -> List[ScoreLevelRecord]:
    with session_scope() as session:
        stmt = select(ScoreLevelRecord).order_by(ScoreLevelRecord.display_order, ScoreLevelRecord.id)
        return session.execute(stmt).scalars().all()


def load_configuration() -> LevelConfiguration:
    """Current Level Configuration; the built-in scale stands in when none is stored."""
    levels = [_to_level(record) for record in list_levels()]
    if not levels:
        logger.info("No score levels configured, using the default scale")
    return LevelConfiguration.from_levels(levels)


def validate_levels(levels: List[Dict[str, Any]]) -> None:
    if not levels or not isinstance(levels, list):
        raise ValueError("levels must be a non-empty list")
    names = set()
    for level in levels:
        name = (level.get("name") or "").strip()
        if not name:
            raise ValueError("each level needs a name")
        key = name.lower().replace(" ", "_")
        if key in names:
            raise ValueError(f"duplicate level name: {name}")
        names.add(key)
        if level.get("score_value") is None:
            raise ValueError(f"level {name} requires score_value")
        if not COLOR_PATTERN.match(level.get("color") or ""):
            raise ValueError(f"level {name} color must be a #rrggbb hex string")


def replace_levels(levels: List[Dict[str, Any]]) -> List[ScoreLevelRecord]:
    validate_levels(levels)
    with session_scope() as session:
        session.execute(delete(ScoreLevelRecord))
        records = [
            ScoreLevelRecord(
                name=level["name"].strip(),
                score_value=float(level["score_value"]),
                color=level["color"],
                display_order=level.get("display_order", index),
                is_default=False,
            )
            for index, level in enumerate(levels)
        ]
        session.add_all(records)
    logger.info("Replaced score levels with %d configured level(s)", len(records))
    return list_levels()


def _write_defaults(session) -> None:
    session.add_all(
        ScoreLevelRecord(
            name=level.name,
            score_value=level.score_value,
            color=level.color,
            display_order=level.display_order,
            is_default=True,
        )
        for level in DEFAULT_LEVELS
    )


def reset_to_defaults() -> List[ScoreLevelRecord]:
    with session_scope() as session:
        session.execute(delete(ScoreLevelRecord))
        _write_defaults(session)
    logger.info("Score levels reset to defaults")
    return list_levels()


def ensure_default_levels() -> bool:
    """Seed the default levels into an empty table. Returns True when rows were written."""
    with session_scope() as session:
        count = session.execute(select(func.count(ScoreLevelRecord.id))).scalar_one()
        if count:
            return False
        _write_defaults(session)
    logger.info("Seeded default score levels")
    return True
