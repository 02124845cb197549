"""Base AWS client utilities for store backends.

Provides `get_boto3_client` and `execute_dynamodb_call` with the
OperationResult pattern. This module intentionally avoids reading settings at
import time and accepts configuration via parameters.

`execute_dynamodb_call` performs exactly one request: retrying is the
driver's job (see `docstore.resilience.retry`), so the boto3-level retry
budget should be kept low by callers that care about latency.
"""

from typing import Any, Dict, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore
import structlog

from docstore.operations.result import OperationResult
from docstore.operations.status import OperationStatus

logger = structlog.get_logger()

THROTTLING_ERRORS = (
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "InternalServerError",
    "ServiceUnavailable",
    "TransactionConflictException",
)

CONDITION_FAILED_ERRORS = ("ConditionalCheckFailedException",)


def get_boto3_client(
    service_name: str,
    session_config: Optional[Dict[str, Any]] = None,
    client_config: Optional[Dict[str, Any]] = None,
) -> BaseClient:
    """Create a boto3 client for the given service.

    Args:
        service_name: AWS service name (e.g., 'dynamodb')
        session_config: Optional boto3 session kwargs (e.g., region_name)
        client_config: Optional client kwargs (e.g., endpoint_url)

    Returns:
        botocore client instance
    """
    session_config = session_config or {}
    client_config = client_config or {}
    session = boto3.Session(**session_config)
    return session.client(service_name, **client_config)


def _map_client_error(e: ClientError, method: str) -> OperationResult:
    error_code = e.response.get("Error", {}).get("Code")
    error_message = e.response.get("Error", {}).get("Message", str(e))

    if error_code in CONDITION_FAILED_ERRORS:
        # With ReturnValuesOnConditionCheckFailure=ALL_OLD the current item
        # (if any) comes back with the error.
        return OperationResult.error(
            OperationStatus.CONFLICT,
            message=error_message,
            error_code=error_code,
            data=e.response.get("Item"),
        )

    if error_code in THROTTLING_ERRORS:
        return OperationResult.transient_error(
            message=error_message, error_code=error_code
        )

    # ResourceNotFoundException here means a missing table, not a missing key.
    return OperationResult.permanent_error(message=error_message, error_code=error_code)


def execute_dynamodb_call(
    client: BaseClient,
    method: str,
    **kwargs,
) -> OperationResult:
    """Execute a single DynamoDB API call and return an OperationResult.

    Args:
        client: boto3 DynamoDB client
        method: Client method name (e.g. 'get_item')
        **kwargs: Parameters for the call

    Returns:
        SUCCESS with the raw response as data, CONFLICT when a condition
        expression failed, TRANSIENT_ERROR for throttling and connection
        failures, PERMANENT_ERROR otherwise.
    """
    try:
        response = getattr(client, method)(**kwargs)
        return OperationResult.success(data=response, message=f"dynamodb.{method} succeeded")

    except ClientError as e:
        mapped = _map_client_error(e, method)
        if mapped.status != OperationStatus.CONFLICT:
            logger.warning(
                "dynamodb_call_failed",
                method=method,
                status=mapped.status.value,
                code=mapped.error_code,
                error=mapped.message,
            )
        return mapped

    except BotoCoreError as e:
        logger.warning("dynamodb_connection_error", method=method, error=str(e))
        return OperationResult.transient_error(
            message=f"{type(e).__name__}: {e}", error_code="CONNECTION_ERROR"
        )
