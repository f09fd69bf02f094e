import logging

from okr.core.config import get_settings
from okr.core.database import Base, engine
from okr.services import evaluations as evaluation_service
from okr.services import score_levels

logger = logging.getLogger(__name__)


def ensure_schema() -> None:
    Base.metadata.create_all(bind=engine)


def bootstrap() -> None:
    """Create tables, seed default score levels and finalize stale drafts."""
    settings = get_settings()
    ensure_schema()
    if settings.seed_default_levels:
        score_levels.ensure_default_levels()
    evaluation_service.migrate_drafts_to_submitted()
