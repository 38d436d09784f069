import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy.exc import OperationalError
from app.utils.retry import retry_async


def transient_error():
    return OperationalError("SELECT 1", {}, ConnectionResetError("reset by peer"))


@pytest.mark.asyncio
async def test_transient_errors_are_retried():
    func = AsyncMock(side_effect=[transient_error(), transient_error(), "ok"])

    with patch("app.utils.retry.asyncio.sleep", AsyncMock()) as mock_sleep:
        assert await retry_async(func, "arg", retries=3, base_delay=1) == "ok"

    assert func.await_count == 3
    # Exponential backoff
    assert [c.args[0] for c in mock_sleep.await_args_list] == [1, 2]


@pytest.mark.asyncio
async def test_last_transient_error_propagates():
    func = AsyncMock(side_effect=transient_error())

    with patch("app.utils.retry.asyncio.sleep", AsyncMock()):
        with pytest.raises(OperationalError):
            await retry_async(func, retries=2)

    assert func.await_count == 2


@pytest.mark.asyncio
async def test_other_errors_are_not_retried():
    func = AsyncMock(side_effect=ValueError("bad row"))

    with pytest.raises(ValueError):
        await retry_async(func)

    assert func.await_count == 1


@pytest.mark.asyncio
async def test_on_retry_runs_before_each_new_attempt():
    func = AsyncMock(side_effect=[transient_error(), transient_error(), "ok"])
    on_retry = AsyncMock()

    with patch("app.utils.retry.asyncio.sleep", AsyncMock()):
        assert await retry_async(func, retries=3, on_retry=on_retry) == "ok"

    assert on_retry.await_count == 2


@pytest.mark.asyncio
async def test_on_retry_is_skipped_when_giving_up():
    func = AsyncMock(side_effect=transient_error())
    on_retry = AsyncMock()

    with patch("app.utils.retry.asyncio.sleep", AsyncMock()):
        with pytest.raises(OperationalError):
            await retry_async(func, retries=1, on_retry=on_retry)

    on_retry.assert_not_awaited()
