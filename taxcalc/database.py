"""Optional PostgreSQL audit trail for calculations.

Calculations never depend on this module: when auditing is switched off,
PostgreSQL is unreachable at startup, or a write fails later on, the
service keeps answering and only the audit row is lost.
"""

from __future__ import annotations
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taxcalc.config import settings
from taxcalc.models.db_models import Base, CalculationAudit

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Engine & session factory
# ---------------------------------------------------------------------------
_engine = None
_async_session_factory = None
_db_available: bool = False


async def init_db() -> None:
    """Connect to PostgreSQL and create the audit table if auditing is on."""
    global _engine, _async_session_factory, _db_available

    if not settings.AUDIT_ENABLED:
        logger.info("Calculation audit disabled; skipping database setup.")
        return

    try:
        _engine = create_async_engine(settings.DATABASE_URL)
        _async_session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        _db_available = True
        logger.info("Audit table ready at %s.", _engine.url.render_as_string(hide_password=True))
    except Exception as exc:
        _db_available = False
        logger.warning("PostgreSQL unavailable; calculations will not be audited. Error: %s", exc)


async def close_db() -> None:
    global _engine, _db_available
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _db_available = False
        logger.info("Audit connection pool closed.")


def is_db_available() -> bool:
    return _db_available


async def record_audit(row: CalculationAudit) -> bool:
    """Persist one audit row.

    Returns ``True`` when the row was committed.  Returns ``False`` without
    raising when auditing is unavailable or the write fails, whether the
    failure comes from SQLAlchemy or from the driver's socket (asyncpg
    raises plain ``OSError`` subclasses when the server has gone away).
    """
    if not _db_available or _async_session_factory is None:
        return False

    session = _async_session_factory()
    try:
        session.add(row)
        await session.commit()
        return True
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Could not record calculation audit for %s: %s", row.endpoint, exc)
        try:
            await session.rollback()
        except (SQLAlchemyError, OSError):
            logger.debug("Rollback after failed audit write also failed.", exc_info=True)
        return False
    finally:
        await session.close()
