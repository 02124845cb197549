"""AWS client helpers used by the DynamoDB store backend."""

from docstore.clients.aws.client import execute_dynamodb_call, get_boto3_client

__all__ = ["execute_dynamodb_call", "get_boto3_client"]
