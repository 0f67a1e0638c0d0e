"""
Message Bus

Routes commands to their single handler and domain events to every
subscriber. Apps register their handlers from ``AppConfig.ready``.
"""

import logging
from typing import Any, Callable, Dict, List, Type

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


def _handler_name(handler: Callable) -> str:
    return getattr(handler, '__qualname__', None) or handler.__class__.__name__


class MessageBus:
    """
    Message bus for commands and events

    Commands: One handler per command (1:1), errors propagate to the caller
    Events: Multiple handlers per event (1:N), errors are logged and dropped
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[Callable]] = {}
        self._command_handlers: Dict[Type, Callable] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: Callable[[DomainEvent], None]):
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler in handlers:
            return
        handlers.append(handler)
        logger.debug(f"Registered {_handler_name(handler)} for {event_type.__name__}")

    def register_command_handler(self, command_type: Type, handler: Callable[[Any], Any]):
        """
        Register the handler for ``command_type``

        Raises:
            ValueError: A handler is already registered for this command
        """
        if command_type in self._command_handlers:
            raise ValueError(
                f"Handler for {command_type.__name__} is already registered. "
                "Commands can have only one handler."
            )
        self._command_handlers[command_type] = handler
        logger.debug(f"Registered command handler for {command_type.__name__}")

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._command_handlers

    def handle_command(self, command: Any) -> Any:
        """
        Run ``command`` through its handler and return the result

        Domain errors raised by the handler propagate unchanged.
        """
        command_type = type(command)
        handler = self._command_handlers.get(command_type)
        if handler is None:
            raise ValueError(f"No handler registered for command {command_type.__name__}")

        logger.info(f"Handling command: {command_type.__name__}")
        try:
            return handler(command)
        except Exception as e:
            logger.info(f"Command {command_type.__name__} failed: {e}")
            raise

    def publish_events(self, events: List[DomainEvent]):
        """
        Hand every event to each of its subscribers

        A failing subscriber never stops the others: the state change that
        raised the event is already committed.
        """
        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type, [])
            if not handlers:
                logger.debug(f"No handlers registered for event {event_type.__name__}")
                continue

            logger.info(f"Publishing event: {event_type.__name__} (ID: {event.event_id})")
            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Error in event handler {_handler_name(handler)} "
                        f"for event {event_type.__name__}: {e}",
                        exc_info=True,
                    )


# Global message bus instance
message_bus = MessageBus()
