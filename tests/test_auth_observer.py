import asyncio
import uuid
import pytest
from unittest.mock import AsyncMock, patch
from app.schemas.auth import AuthEvent, AuthSession, AuthStateChange
from app.services.auth_observer import AuthStateObserver


def change(event, user_id, with_session=True):
    session = AuthSession(user_id=user_id, access_token="token") if with_session else None
    return AuthStateChange(event=event, user_id=user_id, session=session)


@pytest.mark.asyncio
async def test_session_start_triggers_one_pass():
    runner = AsyncMock(return_value=["n-1"])
    observer = AuthStateObserver(reconcile_runner=runner)
    user_id = uuid.uuid4()

    task = await observer.on_auth_state_change(change(AuthEvent.SIGNED_IN, user_id))

    assert await task == ["n-1"]
    runner.assert_awaited_once_with(user_id)
    assert observer.has_session(user_id)


@pytest.mark.asyncio
async def test_token_refresh_does_not_trigger():
    runner = AsyncMock(return_value=[])
    observer = AuthStateObserver(reconcile_runner=runner)
    user_id = uuid.uuid4()

    await (await observer.on_auth_state_change(change(AuthEvent.INITIAL_SESSION, user_id)))
    assert await observer.on_auth_state_change(change(AuthEvent.TOKEN_REFRESHED, user_id)) is None

    assert runner.await_count == 1


@pytest.mark.asyncio
async def test_sign_out_then_sign_in_triggers_again():
    runner = AsyncMock(return_value=[])
    observer = AuthStateObserver(reconcile_runner=runner)
    user_id = uuid.uuid4()

    await (await observer.on_auth_state_change(change(AuthEvent.SIGNED_IN, user_id)))
    assert await observer.on_auth_state_change(change(AuthEvent.SIGNED_OUT, user_id, with_session=False)) is None
    assert not observer.has_session(user_id)
    await (await observer.on_auth_state_change(change(AuthEvent.SIGNED_IN, user_id)))

    assert runner.await_count == 2


@pytest.mark.asyncio
async def test_concurrent_triggers_are_coalesced():
    release = asyncio.Event()
    calls = []

    async def slow_runner(user_id):
        calls.append(user_id)
        await release.wait()
        return ["n-1"]

    observer = AuthStateObserver(reconcile_runner=slow_runner)
    user_id = uuid.uuid4()

    first = observer.trigger(user_id)
    second = observer.trigger(user_id)
    assert first is second

    release.set()
    assert await first == ["n-1"]
    assert calls == [user_id]

    # A new trigger after completion starts a fresh pass
    third = observer.trigger(user_id)
    assert third is not first
    await third
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_runner_errors_do_not_escape():
    observer = AuthStateObserver(reconcile_runner=AsyncMock(side_effect=RuntimeError("boom")))

    task = observer.trigger(uuid.uuid4())

    assert await task is None


@pytest.mark.asyncio
async def test_permission_denied_skips_reconciliation():
    observer = AuthStateObserver()

    with patch("app.services.auth_observer.ProfileService.has_notification_permission",
               AsyncMock(return_value=False)), \
         patch("app.services.auth_observer.NotificationReconciler.reconcile", AsyncMock()) as mock_reconcile:
        result = await observer.trigger(uuid.uuid4())

    assert result is None
    mock_reconcile.assert_not_called()


@pytest.mark.asyncio
async def test_permission_granted_runs_reconciler():
    observer = AuthStateObserver()
    user_id = uuid.uuid4()

    with patch("app.services.auth_observer.ProfileService.has_notification_permission",
               AsyncMock(return_value=True)), \
         patch("app.services.auth_observer.NotificationReconciler.reconcile",
               AsyncMock(return_value=["n-1"])) as mock_reconcile:
        result = await observer.trigger(user_id)

    assert result == ["n-1"]
    mock_reconcile.assert_awaited_once_with(user_id)
