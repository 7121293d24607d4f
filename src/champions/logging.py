import logging

import structlog

from champions.config import Config

# Chatty at DEBUG; the portal logs its own database and screening events
QUIET_LOGGERS = (
    "pymongo",
    "pymongo.topology",
    "pymongo.connection",
    "pymongo.command",
    "LiteLLM",
    "httpx",
    "httpcore",
    "python_multipart",
)


def setup_logging(config: Config) -> None:
    """Route structlog through stdlib logging.

    Debug mode renders colored console lines with plain tracebacks. Otherwise
    every record is one JSON object, with tracebacks as structured data so
    failed screening calls and blob deletions stay searchable.
    """
    level = config.log_level or ("DEBUG" if config.debug else "INFO")
    logging.basicConfig(level=level.upper(), format="%(message)s")

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.debug:
        processors += [structlog.processors.format_exc_info, structlog.dev.ConsoleRenderer()]
    else:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
