"""
Process-wide presentation handler and listeners for fired local notifications
and for the user responses to them.

Nothing is registered at import time: the application lifespan calls
`configure_notification_handler()` once on startup and
`reset_notification_handler()` on shutdown.
"""
import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Union
from app.schemas.notification import LocalNotification, NotificationBehavior, NotificationResponse

logger = logging.getLogger(__name__)

NotificationHandler = Callable[[LocalNotification], Union[NotificationBehavior, Awaitable[NotificationBehavior]]]
NotificationListener = Callable[[LocalNotification], Union[None, Awaitable[None]]]
ResponseListener = Callable[[NotificationResponse], Union[None, Awaitable[None]]]

_handler: Optional[NotificationHandler] = None
_received_listeners: List[NotificationListener] = []
_response_listeners: List[ResponseListener] = []


async def default_notification_handler(notification: LocalNotification) -> NotificationBehavior:
    return NotificationBehavior()


def configure_notification_handler(handler: NotificationHandler = default_notification_handler) -> None:
    global _handler
    if _handler is not None:
        logger.warning("Notification handler already configured, replacing it.")
    _handler = handler
    logger.info("Notification handler configured.")


def reset_notification_handler() -> None:
    global _handler
    _handler = None
    _received_listeners.clear()
    _response_listeners.clear()


def _subscribe(listeners: list, listener) -> Callable[[], None]:
    listeners.append(listener)

    def remove():
        if listener in listeners:
            listeners.remove(listener)

    return remove


def add_notification_received_listener(listener: NotificationListener) -> Callable[[], None]:
    """Register a listener; returns a callable that removes it."""
    return _subscribe(_received_listeners, listener)


def add_notification_response_listener(listener: ResponseListener) -> Callable[[], None]:
    """Register a listener for user responses; returns a callable that removes it."""
    return _subscribe(_response_listeners, listener)


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


async def handle_notification(notification: LocalNotification) -> Optional[NotificationBehavior]:
    """
    Ask the handler how to present the notification and notify listeners.
    Returns None when no handler is configured (the notification is not shown).
    """
    for listener in list(_received_listeners):
        try:
            await _maybe_await(listener(notification))
        except Exception:
            logger.exception(f"Notification listener failed for {notification.notification_id}")

    if _handler is None:
        logger.warning(f"No notification handler configured, dropping {notification.notification_id}")
        return None
    return await _maybe_await(_handler(notification))


async def handle_notification_response(response: NotificationResponse) -> int:
    """Dispatch a user response to the response listeners; returns how many succeeded."""
    logger.info(
        f"Notification response {response.action_identifier} for {response.notification_id} from {response.user_id}"
    )
    delivered = 0
    for listener in list(_response_listeners):
        try:
            await _maybe_await(listener(response))
            delivered += 1
        except Exception:
            logger.exception(f"Notification response listener failed for {response.notification_id}")
    return delivered
