"""Work deferred until a session's transaction commits.

Callbacks are queued on ``session.info`` and drained by whoever owns the
transaction (get_db_transactional, scripts) once ``session.begin()`` has
exited cleanly. A rollback discards them with the session.
"""

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import IPermissionInvalidator

logger = logging.getLogger(__name__)

_AFTER_COMMIT_KEY = "after_commit"

AfterCommitCallback = Callable[[], Awaitable[None]]


def schedule_after_commit(session: AsyncSession, callback: AfterCommitCallback) -> None:
    """Queue callback to run after session's current transaction commits."""
    session.info.setdefault(_AFTER_COMMIT_KEY, []).append(callback)


async def run_after_commit(session: AsyncSession) -> None:
    """Run and clear queued callbacks, in order. Call only after commit."""
    callbacks: list[AfterCommitCallback] = session.info.pop(_AFTER_COMMIT_KEY, [])
    for callback in callbacks:
        await callback()


class PostCommitInvalidator:
    """Permission invalidator whose invalidations run only after the write commits."""

    def __init__(self, session: AsyncSession, target: IPermissionInvalidator) -> None:
        self._session = session
        self._target = target

    async def invalidate_user(self, user_id: str) -> None:
        async def _invalidate() -> None:
            await self._target.invalidate_user(user_id)

        schedule_after_commit(self._session, _invalidate)

    async def invalidate_all(self) -> None:
        schedule_after_commit(self._session, self._target.invalidate_all)
