import pytest
from unittest.mock import AsyncMock, MagicMock
from app.core.notification_handler import (
    add_notification_received_listener,
    add_notification_response_listener,
    configure_notification_handler,
    handle_notification,
    handle_notification_response,
    reset_notification_handler,
)
from app.schemas.notification import (
    LocalNotification,
    NotificationBehavior,
    NotificationContent,
    NotificationResponse,
)


def notification():
    return LocalNotification(notification_id="n-1", user_id="u-1", content=NotificationContent(title="Feed Luna"))


@pytest.mark.asyncio
async def test_unconfigured_handler_drops_notification():
    assert await handle_notification(notification()) is None


@pytest.mark.asyncio
async def test_default_handler_shows_alert_with_sound_and_badge():
    configure_notification_handler()

    behavior = await handle_notification(notification())

    assert behavior == NotificationBehavior(should_show_alert=True, should_play_sound=True, should_set_badge=True)


@pytest.mark.asyncio
async def test_sync_handler_is_supported():
    configure_notification_handler(lambda n: NotificationBehavior(should_play_sound=False))

    behavior = await handle_notification(notification())

    assert behavior.should_play_sound is False


@pytest.mark.asyncio
async def test_listeners_receive_notifications_until_removed():
    configure_notification_handler()
    listener = AsyncMock()
    remove = add_notification_received_listener(listener)

    await handle_notification(notification())
    remove()
    await handle_notification(notification())

    listener.assert_awaited_once()
    assert listener.await_args[0][0].notification_id == "n-1"


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_handler():
    configure_notification_handler()
    add_notification_received_listener(MagicMock(side_effect=RuntimeError("boom")))

    assert await handle_notification(notification()) is not None


def test_fired_at_defaults_to_an_aware_utc_time():
    fired_at = notification().fired_at

    assert fired_at.tzinfo is not None
    assert fired_at.utcoffset().total_seconds() == 0


@pytest.mark.asyncio
async def test_response_listeners_receive_responses_until_removed():
    listener = AsyncMock()
    broken = MagicMock(side_effect=RuntimeError("boom"))
    remove = add_notification_response_listener(listener)
    add_notification_response_listener(broken)
    response = NotificationResponse(notification_id="n-1", user_id="u-1")

    assert await handle_notification_response(response) == 1
    remove()
    assert await handle_notification_response(response) == 0

    listener.assert_awaited_once_with(response)
    assert response.action_identifier == "default"


@pytest.mark.asyncio
async def test_reset_clears_response_listeners():
    listener = AsyncMock()
    add_notification_response_listener(listener)

    reset_notification_handler()
    await handle_notification_response(NotificationResponse(notification_id="n-1", user_id="u-1"))

    listener.assert_not_awaited()
