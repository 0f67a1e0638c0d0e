"""Celery tasks for the earnings ledger."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import release_due_earnings as release

logger = logging.getLogger(__name__)


@shared_task(name="finances.release_due_earnings")
def release_due_earnings() -> int:
    """Переводит доходы, у которых истёк срок удержания, в доступные."""

    count = release()
    logger.info(f"Earnings release run finished: {count} released")
    return count
