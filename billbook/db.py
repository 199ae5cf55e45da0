import logging

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from billbook.settings import settings

logger = logging.getLogger(__name__)


def build_engine(url: str | None = None) -> AsyncEngine:
    """Create an async engine for ``url``, defaulting to ``settings.db_url``.

    The caller owns the returned engine; nothing here caches it.
    """
    engine = create_async_engine(
        url or settings.db_url,
        echo=settings.db_echo,
        pool_pre_ping=True,
    )
    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine
