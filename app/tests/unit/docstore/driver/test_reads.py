"""Unit tests for not-found-aware reads."""

import pytest

from docstore.driver.reads import get_document, get_documents
from docstore.errors import StoreError
from docstore.models import DocumentHandle

pytestmark = pytest.mark.unit


class TestGetDocument:
    @pytest.mark.asyncio
    async def test_returns_handle(self, mock_store):
        mock_store.get.return_value = DocumentHandle(value=1, cas=2)

        assert await get_document(mock_store, "a") == DocumentHandle(value=1, cas=2)

    @pytest.mark.asyncio
    async def test_missing_returns_none(self, mock_store, not_found_error_factory):
        mock_store.get.side_effect = not_found_error_factory("a")

        assert await get_document(mock_store, "a") is None

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_store):
        failure = StoreError("network down")
        mock_store.get.side_effect = failure

        with pytest.raises(StoreError) as exc_info:
            await get_document(mock_store, "a")

        assert exc_info.value is failure

    @pytest.mark.asyncio
    async def test_forwards_options(self, mock_store):
        await get_document(mock_store, "a", timeout=3)

        mock_store.get.assert_awaited_once_with("a", timeout=3)


class TestGetDocuments:
    @pytest.mark.asyncio
    async def test_reconciles_response(self, mock_store, multi_get_response_factory):
        mock_store.get_multi.return_value = multi_get_response_factory(
            found={"a": 1}, missing=["b"]
        )

        result = await get_documents(mock_store, ("a", "b"))

        mock_store.get_multi.assert_awaited_once_with(["a", "b"])
        assert result.values == [1]
        assert result.misses == ["b"]

    @pytest.mark.asyncio
    async def test_whole_failure_propagates(self, mock_store, temporary_error_factory):
        mock_store.get_multi.side_effect = temporary_error_factory()

        with pytest.raises(StoreError):
            await get_documents(mock_store, ["a"])
