"""
Relay Waiter

Polls a relayer's ``lookup`` until the task reaches a terminal status or a
deadline passes. The deadline is computed once on entry; reaching it is not
an error, the last observed (still pending) status is returned and callers
inspect ``is_complete`` / ``is_error`` themselves.
"""

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from ..schemas.bases import RelayStatus

if TYPE_CHECKING:
    from ..adapters.bases import Relayer

logger = logging.getLogger(__name__)

#: Seconds between two status lookups.
DEFAULT_POLL_PERIOD: float = 5.0

#: Seconds after which the waiter gives up and returns the last status.
DEFAULT_STOP_AFTER: float = 60.0


async def wait_for_relay(
    relayer: "Relayer",
    task_id: str,
    poll_period: float = DEFAULT_POLL_PERIOD,
    stop_after: float = DEFAULT_STOP_AFTER,
) -> RelayStatus:
    """
    Wait for a relay task to complete or fail.

    State machine:
        PENDING --lookup--> COMPLETE | ERRORED   (returned immediately)
        PENDING --deadline passed--> returned as is (timed out)

    At least one lookup is always performed, even when ``stop_after`` is
    smaller than ``poll_period``. A terminal status returned by the first
    lookup is handed back without sleeping.

    Args:
        relayer: Adapter that produced ``task_id``.
        task_id: Opaque task identifier returned by ``relayer.send``.
        poll_period: Seconds to sleep between lookups.
        stop_after: Seconds after entry at which polling stops.

    Returns:
        RelayStatus: A terminal status, or the last pending status on timeout.

    Example:
        response = await relayer.send(tx)
        status = await wait_for_relay(relayer, response.task_id, poll_period=2.0)
        if not status.is_terminal():
            print("relay still pending after the deadline")
    """
    stop_at = time.monotonic() + stop_after
    while True:
        status = await relayer.lookup(task_id)
        logger.debug("Relay status for %s: %s", task_id, status.to_canonical_json())
        if status.is_terminal():
            return status

        await asyncio.sleep(poll_period)
        if time.monotonic() >= stop_at:
            logger.info("Stopped waiting for relay task %s after %.1fs", task_id, stop_after)
            return status
