"""DynamoDB-backed document store for multi-instance deployments.

Documents live in a single table keyed by `doc_key`. Compare-and-swap and
pessimistic locks are enforced server-side with condition expressions, so
concurrent callers in different processes are serialized by DynamoDB alone.

Table Schema:
    PK: doc_key (String)
    Attributes:
        body: JSON-encoded document (String)
        cas: Version token, replaced on every write and lock (Number)
        expires_at: Optional expiry, epoch milliseconds (Number)
        lock_expires_at: Present while locked, epoch milliseconds (Number)
"""

import asyncio
import json
import time
from typing import Any, Dict, List, Optional, Sequence

from botocore.client import BaseClient  # type: ignore

from docstore.clients.aws.client import execute_dynamodb_call, get_boto3_client
from docstore.errors import ErrorCode, StoreError
from docstore.logging import get_module_logger
from docstore.models import DocumentHandle, MultiGetEntry, MutationResult
from docstore.operations.result import OperationResult
from docstore.operations.status import OperationStatus

logger = get_module_logger()

LOCKED_CAS = -1
BATCH_GET_LIMIT = 100

NOT_EXPIRED = "(attribute_not_exists(expires_at) OR expires_at > :now)"
NOT_LOCKED = "(attribute_not_exists(lock_expires_at) OR lock_expires_at <= :now)"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _number(item: Dict[str, Any], name: str) -> Optional[int]:
    attr = item.get(name)
    if isinstance(attr, dict) and "N" in attr:
        return int(attr["N"])
    return None


class DynamoDBDocumentStore:
    """DynamoDB implementation of DocumentStore.

    Args:
        table_name: DynamoDB table holding the documents
        client: Optional pre-built boto3 DynamoDB client
        region: AWS region used when building a client
        endpoint_url: Custom endpoint (LocalStack, DynamoDB Local)
        default_lock_time: Lock duration (seconds) when get_and_lock gets none
    """

    def __init__(
        self,
        table_name: str,
        client: Optional[BaseClient] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        default_lock_time: int = 15,
    ) -> None:
        if client is None:
            client_config: Dict[str, Any] = {}
            if region:
                client_config["region_name"] = region
            if endpoint_url:
                client_config["endpoint_url"] = endpoint_url
            client = get_boto3_client("dynamodb", client_config=client_config)

        self.table_name = table_name
        self.default_lock_time = default_lock_time
        self._client = client

        logger.info(
            "dynamodb_document_store_initialized",
            table_name=table_name,
            default_lock_time=default_lock_time,
        )

    # -- helpers ---------------------------------------------------------

    async def _call(self, method: str, **kwargs) -> OperationResult:
        return await asyncio.to_thread(
            execute_dynamodb_call, self._client, method, **kwargs
        )

    @staticmethod
    def _next_cas() -> int:
        return time.time_ns()

    @staticmethod
    def _key(key: str) -> Dict[str, Any]:
        return {"doc_key": {"S": key}}

    def _item(self, key: str, value: Any, cas: int, options: Dict[str, Any]) -> Dict[str, Any]:
        item = {
            "doc_key": {"S": key},
            "body": {"S": json.dumps(value)},
            "cas": {"N": str(cas)},
        }
        expiry = options.get("expiry")
        if expiry:
            item["expires_at"] = {"N": str(_now_ms() + int(float(expiry) * 1000))}
        return item

    @staticmethod
    def _is_live(item: Optional[Dict[str, Any]], now: int) -> bool:
        if not item:
            return False
        expires_at = _number(item, "expires_at")
        return expires_at is None or expires_at > now

    @staticmethod
    def _is_locked(item: Dict[str, Any], now: int) -> bool:
        lock_expires_at = _number(item, "lock_expires_at")
        return lock_expires_at is not None and lock_expires_at > now

    def _handle(self, item: Dict[str, Any], now: int) -> DocumentHandle:
        cas = LOCKED_CAS if self._is_locked(item, now) else _number(item, "cas")
        return DocumentHandle(value=json.loads(item["body"]["S"]), cas=cas)

    @staticmethod
    def _not_found(key: str) -> StoreError:
        return StoreError("key not found", code=ErrorCode.KEY_NOT_FOUND, key=key)

    @staticmethod
    def _failure(result: OperationResult, key: Optional[str]) -> StoreError:
        if result.status == OperationStatus.TRANSIENT_ERROR:
            return StoreError(
                f"Temporary failure: {result.message}",
                code=ErrorCode.TEMPORARY_FAILURE,
                key=key,
            )
        return StoreError(result.message, code=result.error_code, key=key)

    def _conflict(
        self, key: str, old_item: Optional[Dict[str, Any]], cas: Any, now: int
    ) -> StoreError:
        """Explain a failed condition using the item returned with the error."""
        if not self._is_live(old_item, now):
            return self._not_found(key)
        if cas is None and self._is_locked(old_item, now):
            return StoreError(
                "Temporary failure: key is locked",
                code=ErrorCode.TEMPORARY_FAILURE,
                key=key,
            )
        if cas is not None:
            return StoreError(
                "cas mismatch", code=ErrorCode.KEY_ALREADY_EXISTS, key=key
            )
        return StoreError(
            "key already exists", code=ErrorCode.KEY_ALREADY_EXISTS, key=key
        )

    def _raise_for(
        self, result: OperationResult, key: str, cas: Any = None, now: int = 0
    ) -> None:
        if result.is_success:
            return
        if result.status == OperationStatus.CONFLICT:
            raise self._conflict(key, result.data, cas, now)
        raise self._failure(result, key)

    # -- reads -----------------------------------------------------------

    async def get(self, key: str, **options: Any) -> DocumentHandle:
        result = await self._call(
            "get_item",
            TableName=self.table_name,
            Key=self._key(key),
            ConsistentRead=True,
        )
        self._raise_for(result, key)

        now = _now_ms()
        item = (result.data or {}).get("Item")
        if not self._is_live(item, now):
            raise self._not_found(key)
        return self._handle(item, now)

    async def get_and_lock(
        self, key: str, lock_time: Optional[int] = None, **options: Any
    ) -> DocumentHandle:
        now = _now_ms()
        new_cas = self._next_cas()
        lock_until = now + int((lock_time or self.default_lock_time) * 1000)

        result = await self._call(
            "update_item",
            TableName=self.table_name,
            Key=self._key(key),
            UpdateExpression="SET cas = :cas, lock_expires_at = :lock_until",
            ConditionExpression=f"attribute_exists(doc_key) AND {NOT_EXPIRED} AND {NOT_LOCKED}",
            ExpressionAttributeValues={
                ":cas": {"N": str(new_cas)},
                ":lock_until": {"N": str(lock_until)},
                ":now": {"N": str(now)},
            },
            ReturnValues="ALL_NEW",
            ReturnValuesOnConditionCheckFailure="ALL_OLD",
        )
        self._raise_for(result, key, now=now)

        item = result.data["Attributes"]
        logger.debug("document_locked", key=key, cas=new_cas)
        return DocumentHandle(value=json.loads(item["body"]["S"]), cas=new_cas)

    async def get_multi(
        self, keys: Sequence[str], **options: Any
    ) -> Dict[str, MultiGetEntry]:
        unique_keys: List[str] = list(dict.fromkeys(keys))
        response: Dict[str, MultiGetEntry] = {}

        for start in range(0, len(unique_keys), BATCH_GET_LIMIT):
            chunk = unique_keys[start : start + BATCH_GET_LIMIT]
            result = await self._call(
                "batch_get_item",
                RequestItems={
                    self.table_name: {
                        "Keys": [self._key(k) for k in chunk],
                        "ConsistentRead": True,
                    }
                },
            )
            if not result.is_success:
                raise self._failure(result, None)

            now = _now_ms()
            data = result.data or {}
            items = data.get("Responses", {}).get(self.table_name, [])
            unprocessed = {
                k["doc_key"]["S"]
                for k in data.get("UnprocessedKeys", {})
                .get(self.table_name, {})
                .get("Keys", [])
            }
            by_key = {item["doc_key"]["S"]: item for item in items}

            for key in chunk:
                if key in unprocessed:
                    # Left out of the response; the reconciler skips it.
                    continue
                item = by_key.get(key)
                if self._is_live(item, now):
                    handle = self._handle(item, now)
                    response[key] = MultiGetEntry(value=handle.value, cas=handle.cas)
                else:
                    response[key] = MultiGetEntry(error=self._not_found(key))

            if unprocessed:
                logger.warning(
                    "dynamodb_batch_get_unprocessed", unprocessed=len(unprocessed)
                )

        return response

    # -- writes ----------------------------------------------------------

    async def insert(self, key: str, value: Any, **options: Any) -> MutationResult:
        now = _now_ms()
        new_cas = self._next_cas()
        result = await self._call(
            "put_item",
            TableName=self.table_name,
            Item=self._item(key, value, new_cas, options),
            ConditionExpression="attribute_not_exists(doc_key) OR expires_at <= :now",
            ExpressionAttributeValues={":now": {"N": str(now)}},
            ReturnValuesOnConditionCheckFailure="ALL_OLD",
        )
        if result.status == OperationStatus.CONFLICT:
            raise StoreError(
                "key already exists", code=ErrorCode.KEY_ALREADY_EXISTS, key=key
            )
        self._raise_for(result, key)
        return MutationResult(cas=new_cas)

    async def upsert(
        self, key: str, value: Any, cas: Any = None, **options: Any
    ) -> MutationResult:
        now = _now_ms()
        new_cas = self._next_cas()
        values: Dict[str, Any] = {":now": {"N": str(now)}}
        if cas is not None:
            condition = f"cas = :expected AND {NOT_EXPIRED}"
            values[":expected"] = {"N": str(cas)}
        else:
            condition = f"attribute_not_exists(doc_key) OR {NOT_LOCKED}"

        result = await self._call(
            "put_item",
            TableName=self.table_name,
            Item=self._item(key, value, new_cas, options),
            ConditionExpression=condition,
            ExpressionAttributeValues=values,
            ReturnValuesOnConditionCheckFailure="ALL_OLD",
        )
        self._raise_for(result, key, cas=cas, now=now)
        return MutationResult(cas=new_cas)

    async def remove(self, key: str, cas: Any = None, **options: Any) -> MutationResult:
        now = _now_ms()
        values: Dict[str, Any] = {":now": {"N": str(now)}}
        if cas is not None:
            condition = f"cas = :expected AND {NOT_EXPIRED}"
            values[":expected"] = {"N": str(cas)}
        else:
            condition = f"attribute_exists(doc_key) AND {NOT_EXPIRED} AND {NOT_LOCKED}"

        result = await self._call(
            "delete_item",
            TableName=self.table_name,
            Key=self._key(key),
            ConditionExpression=condition,
            ExpressionAttributeValues=values,
            ReturnValuesOnConditionCheckFailure="ALL_OLD",
        )
        self._raise_for(result, key, cas=cas, now=now)
        return MutationResult(cas=self._next_cas())

    async def unlock(self, key: str, cas: Any) -> Optional[MutationResult]:
        now = _now_ms()
        result = await self._call(
            "update_item",
            TableName=self.table_name,
            Key=self._key(key),
            UpdateExpression="REMOVE lock_expires_at",
            ConditionExpression="cas = :expected AND lock_expires_at > :now",
            ExpressionAttributeValues={
                ":expected": {"N": str(cas)},
                ":now": {"N": str(now)},
            },
            ReturnValuesOnConditionCheckFailure="ALL_OLD",
        )
        if result.status == OperationStatus.CONFLICT:
            old_item = result.data
            if not self._is_live(old_item, now):
                raise self._not_found(key)
            if not self._is_locked(old_item, now):
                raise StoreError(
                    "Temporary failure: key is not locked",
                    code=ErrorCode.TEMPORARY_FAILURE,
                    key=key,
                )
            raise StoreError(
                "cas mismatch: lock held with another cas",
                code=ErrorCode.KEY_ALREADY_EXISTS,
                key=key,
            )
        self._raise_for(result, key)
        logger.debug("document_unlocked", key=key, cas=cas)
        return MutationResult(cas=cas)
