"""
backend/bettracker/services/optimistic_sync.py

Purpose:
    Optimistic create/update/delete of wagers against a WagerRemote.
    Each mutation applies a tentative change to the state, calls the remote,
    then either reconciles with the server's record or rolls back to the
    snapshot taken before the tentative change.

Dependencies:
    - bettracker.providers.base (WagerRemote)
    - bettracker.services.wager_state
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from bettracker.errors import PlanLimitError, WagerApiError
from bettracker.models.stats import Plan
from bettracker.models.wager import Wager, WagerCreate, WagerUpdate
from bettracker.providers.base import WagerRemote
from bettracker.services import plan_service
from bettracker.services import wager_state as ws
from bettracker.services.wager_state import WagerState

logger = logging.getLogger("bettracker.sync")

StateListener = Callable[[WagerState], None]


@dataclass
class MutationResult:
    state: WagerState
    ok: bool
    wager: Optional[Wager] = None
    error: Optional[str] = None
    limit_reached: bool = False


def _temp_id() -> str:
    return f"temp-{int(time.time() * 1000)}"


def _publish(listener: Optional[StateListener], state: WagerState) -> None:
    if listener is not None:
        listener(state)


def _failed(snapshot: WagerState, action: str, exc: WagerApiError) -> MutationResult:
    logger.warning("Failed to %s wager, rolled back: %s", action, exc.message)
    return MutationResult(
        state=ws.set_error(snapshot, exc.message),
        ok=False,
        error=exc.message,
        limit_reached=isinstance(exc, PlanLimitError),
    )


async def create_wager(
    state: WagerState,
    payload: WagerCreate,
    remote: WagerRemote,
    on_tentative: Optional[StateListener] = None,
    plan: Optional[Plan] = None,
) -> MutationResult:
    """Add `payload` under a temporary id, then swap in the server record.

    With `plan` set, the plan limit is checked locally first and nothing is
    sent when the collection is already full.
    """
    if plan is not None:
        try:
            plan_service.ensure_can_create(len(state.wagers), plan)
        except PlanLimitError as exc:
            return _failed(state, "create", exc)

    snapshot = state
    temp_id = _temp_id()
    tentative = ws.add_wager(ws.clear_error(state), payload.to_wager(temp_id))
    _publish(on_tentative, tentative)

    try:
        created = await remote.create_wager(payload)
    except WagerApiError as exc:
        return _failed(snapshot, "create", exc)

    logger.info("Created wager %s (was %s)", created.id, temp_id)
    return MutationResult(state=ws.replace_wager(tentative, temp_id, created), ok=True, wager=created)


async def update_wager(
    state: WagerState,
    wager_id: str,
    update: WagerUpdate,
    remote: WagerRemote,
    on_tentative: Optional[StateListener] = None,
) -> MutationResult:
    """Merge the update locally, then merge whatever the server stored."""
    snapshot = state
    tentative = ws.update_wager(ws.clear_error(state), wager_id, update.changes())
    _publish(on_tentative, tentative)

    try:
        updated = await remote.update_wager(wager_id, update)
    except WagerApiError as exc:
        return _failed(snapshot, "update", exc)

    return MutationResult(
        state=ws.update_wager(tentative, wager_id, updated.model_dump()),
        ok=True,
        wager=updated,
    )


async def delete_wager(
    state: WagerState,
    wager_id: str,
    remote: WagerRemote,
    on_tentative: Optional[StateListener] = None,
) -> MutationResult:
    snapshot = state
    tentative = ws.remove_wager(ws.clear_error(state), wager_id)
    _publish(on_tentative, tentative)

    try:
        await remote.delete_wager(wager_id)
    except WagerApiError as exc:
        return _failed(snapshot, "delete", exc)

    return MutationResult(state=tentative, ok=True)


async def load_wagers(
    state: WagerState,
    remote: WagerRemote,
    on_loading: Optional[StateListener] = None,
) -> WagerState:
    """Replace the collection with the remote's. Failures keep the old wagers."""
    state = ws.set_loading(ws.clear_error(state), True)
    _publish(on_loading, state)
    try:
        wagers = await remote.get_wagers()
    except WagerApiError as exc:
        logger.error("Failed to load wagers: %s", exc.message)
        return ws.set_loading(ws.set_error(state, exc.message), False)
    return ws.set_loading(ws.set_wagers(state, wagers), False)
