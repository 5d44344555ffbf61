import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from app.core import config
from app.core.errors import PersistenceError, PlacesError
from app.utils import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def atomic_unit(
    db: AsyncSession,
    timeout: float = config.TRANSACTION_TIMEOUT_SECONDS,
) -> AsyncIterator[AsyncSession]:
    """
    Run the enclosed writes as one transaction: they are committed together or not at all.

    Begin: any implicit transaction opened by earlier reads on `db` is closed first, so row locks taken inside the
    unit (see the `*_for_update` store methods) are held for exactly the lifetime of the unit.
    Commit: on normal exit.
    Abort: on any exception or when `timeout` seconds elapse. Domain errors (PlacesError) are re-raised as-is,
    anything else is logged and surfaced as PersistenceError so store internals never reach the caller.

    Stores used inside the unit must only add/flush, never commit.
    """
    if db.in_transaction():
        await db.commit()
    try:
        async with asyncio.timeout(timeout):
            async with db.begin():
                yield db
    except PlacesError:
        raise
    except TimeoutError as e:
        log.error("Transaction timed out after %ss", timeout)
        raise PersistenceError("The operation took too long, please try again later.") from e
    except Exception as e:
        log.exception("Transaction aborted")
        raise PersistenceError("Could not save changes, please try again later.") from e
