"""Unit tests for the bounded retry executor."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docstore.operations.classifiers import is_temporary_error
from docstore.resilience.retry import RetryConfiguration, retry

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_sleep():
    with patch(
        "docstore.resilience.retry.executor.asyncio.sleep", new_callable=AsyncMock
    ) as sleep:
        yield sleep


class TestRetry:
    @pytest.mark.asyncio
    async def test_returns_first_success(self, mock_sleep):
        operation = AsyncMock(return_value="ok")

        result = await retry(RetryConfiguration(max_attempts=3), operation)

        assert result == "ok"
        operation.assert_awaited_once()
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_until_success(self, mock_sleep, temporary_error_factory):
        operation = AsyncMock(
            side_effect=[temporary_error_factory(), temporary_error_factory(), "ok"]
        )
        config = RetryConfiguration(
            max_attempts=5, interval_ms=50, retry_predicate=is_temporary_error
        )

        result = await retry(config, operation)

        assert result == "ok"
        assert operation.await_count == 3
        assert mock_sleep.await_count == 2
        mock_sleep.assert_awaited_with(0.05)

    @pytest.mark.asyncio
    async def test_exhaustion_reraises_last_error(self, mock_sleep):
        errors = [RuntimeError(f"attempt {i}") for i in range(1, 4)]
        operation = AsyncMock(side_effect=errors)

        with pytest.raises(RuntimeError) as exc_info:
            await retry(RetryConfiguration(max_attempts=3), operation)

        assert exc_info.value is errors[-1]
        assert operation.await_count == 3
        assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_predicate_rejection_stops_immediately(self, mock_sleep):
        failure = ValueError("permanent")
        operation = AsyncMock(side_effect=failure)
        config = RetryConfiguration(max_attempts=5, retry_predicate=is_temporary_error)

        with pytest.raises(ValueError) as exc_info:
            await retry(config, operation)

        assert exc_info.value is failure
        operation.assert_awaited_once()
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_single_attempt_never_consults_predicate(self, mock_sleep):
        predicate = MagicMock(return_value=True)
        operation = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await retry(
                RetryConfiguration(max_attempts=1, retry_predicate=predicate), operation
            )

        predicate.assert_not_called()
        operation.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_zero_interval_still_yields(self, mock_sleep):
        operation = AsyncMock(side_effect=[RuntimeError("x"), "ok"])

        await retry(RetryConfiguration(max_attempts=2), operation)

        mock_sleep.assert_awaited_once_with(0.0)
