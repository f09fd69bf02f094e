import logging.config


def setup_logging(level: str = "INFO") -> None:
    """Configure console logging for the service and its libraries."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "{asctime} {levelname:<7} {name} - {message}",
                    "style": "{",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                    "level": level,
                },
            },
            "loggers": {
                "okr": {"level": level},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
    )
