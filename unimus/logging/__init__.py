import logging
import sys

import structlog

from unimus.config import get_settings

logging.basicConfig(
    format="%(message)s",
    stream=sys.stdout,
    level=getattr(logging, get_settings().LOGLEVEL.upper(), logging.INFO),
)

# database drivers and the ASGI stack are noisy at INFO
for module in ["sqlalchemy", "aiosqlite", "asyncpg", "httpx", "fastapi", "uvicorn"]:
    logging.getLogger(module).setLevel(logging.WARNING)

# see: https://www.structlog.org/en/stable/standard-library.html
structlog.configure(
    processors=[
        # request-scoped values (request_id, dataset_id, ...) bound by middleware/services
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FUNC_NAME,
            }
        ),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.LogfmtRenderer(
            sort_keys=True,
            key_order=["event", "level", "status_code"],
            bool_as_flag=False,
            drop_missing=True,
        ),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)
