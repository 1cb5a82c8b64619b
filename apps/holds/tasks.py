"""Celery tasks for room holds."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .lifecycle import HoldLifecycleController

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (Celery Beat)
# ============================================================================

@shared_task(name="holds.purge_expired_holds")
def purge_expired_holds() -> dict[str, int]:
    """
    Delete expired, unconverted holds.

    Expired holds already stop blocking rooms on every read; this task only
    reclaims their rows. Runs every HOLD_SWEEP_INTERVAL_SECONDS via Celery Beat.

    Returns:
        dict: {"purged": number of deleted holds}
    """
    purged = HoldLifecycleController().sweep()
    if purged:
        logger.info(f"Purged {purged} expired holds")
    return {"purged": purged}
