"""
Unit of Work Pattern

Wraps one use case in a database transaction and hands the domain events
raised inside it to the message bus only once that transaction commits.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from django.db import transaction

from shared.domain.base import Aggregate, DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        pass

    @abstractmethod
    def rollback(self):
        pass

    @abstractmethod
    def collect_events(self, aggregate: Aggregate):
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = booking_repo.get_by_id(booking_id, lock=True)
            booking.confirm(actor)
            booking_repo.save(booking)
            uow.collect_events(booking)
        # BookingConfirmed is published after commit

    When the block runs inside an outer atomic block (a test case, a
    nested use case) the events wait for the outermost commit.
    """

    def __init__(self, bus=None):
        self._events: List[DomainEvent] = []
        self._atomic = None
        self._bus = bus

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)
            self._atomic = None

    def commit(self):
        events = list(self._events)
        self._events.clear()
        logger.debug(f"Committing unit of work with {len(events)} events")
        if events:
            transaction.on_commit(lambda: self._publish(events))

    def rollback(self):
        if self._events:
            logger.warning(f"Rolling back unit of work, discarding {len(self._events)} events")
        self._events.clear()

    def collect_events(self, aggregate: Aggregate):
        """Move pending events off ``aggregate`` into this unit of work"""
        pending = aggregate.events
        if not pending:
            return
        self._events.extend(pending)
        aggregate.clear_events()
        logger.debug(
            f"Collected {len(pending)} events from "
            f"{aggregate.__class__.__name__} {aggregate.id}"
        )

    def _publish(self, events: List[DomainEvent]):
        bus = self._bus
        if bus is None:
            from shared.application.message_bus import message_bus as bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        bus.publish_events(events)
