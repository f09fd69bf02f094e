import logging
from contextlib import contextmanager
from typing import Callable, Generator, Optional

from okr.services import score_levels
from okr.services.levels import LevelConfiguration

logger = logging.getLogger(__name__)


class LevelCache:
    """Lazily loaded Level Configuration for a single top-level computation."""

    def __init__(self, loader: Callable[[], LevelConfiguration]) -> None:
        self._loader = loader
        self._levels: Optional[LevelConfiguration] = None
        self.loads = 0

    @property
    def levels(self) -> LevelConfiguration:
        if self._levels is None:
            self._levels = self._loader()
            self.loads += 1
        return self._levels

    @property
    def is_loaded(self) -> bool:
        return self._levels is not None

    def clear(self) -> None:
        self._levels = None


@contextmanager
def computation_scope(loader: Optional[Callable[[], LevelConfiguration]] = None) -> Generator[LevelCache, None, None]:
    """Own a fresh :class:`LevelCache` for one computation and clear it afterwards."""
    cache = LevelCache(loader or score_levels.load_configuration)
    try:
        yield cache
    finally:
        logger.debug("Clearing level cache after %d load(s)", cache.loads)
        cache.clear()
