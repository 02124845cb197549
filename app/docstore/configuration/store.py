"""Store backend settings."""

from typing import Optional

from pydantic import Field

from docstore.configuration.base import DocstoreSettings


class StoreSettings(DocstoreSettings):
    """Backend selection and connection settings.

    Environment Variables:
        DOCSTORE_BACKEND: Backend type - 'memory' or 'dynamodb' (default: memory)
        DOCSTORE_DYNAMODB_TABLE_NAME: DynamoDB table holding documents
        DOCSTORE_LOCK_TIME_SECONDS: Default pessimistic lock duration (default: 15)
        DOCSTORE_ENDPOINT_URL: Custom endpoint URL (LocalStack, DynamoDB Local)
        DOCSTORE_CLUSTER_URL: Cluster management REST URL for version probes
        DOCSTORE_CLUSTER_USERNAME / DOCSTORE_CLUSTER_PASSWORD: Probe credentials
        AWS_REGION: AWS region for the DynamoDB backend

    Backends:
        - memory: Process-local store (development, testing)
        - dynamodb: DynamoDB table with conditional writes (production)
    """

    backend: str = Field(
        default="memory",
        alias="DOCSTORE_BACKEND",
        description="Store backend: 'memory' or 'dynamodb'",
    )
    dynamodb_table_name: str = Field(
        default="docstore-documents",
        alias="DOCSTORE_DYNAMODB_TABLE_NAME",
        description="DynamoDB table name for documents",
    )
    lock_time_seconds: int = Field(
        default=15,
        ge=1,
        le=30,
        alias="DOCSTORE_LOCK_TIME_SECONDS",
        description="Default lock duration for get_and_lock (seconds)",
    )
    endpoint_url: Optional[str] = Field(
        default=None,
        alias="DOCSTORE_ENDPOINT_URL",
        description="Custom store endpoint URL",
    )
    aws_region: str = Field(
        default="ca-central-1",
        alias="AWS_REGION",
        description="AWS region for the DynamoDB backend",
    )
    cluster_url: Optional[str] = Field(
        default=None,
        alias="DOCSTORE_CLUSTER_URL",
        description="Cluster management REST URL (e.g. http://127.0.0.1:8091)",
    )
    cluster_username: Optional[str] = Field(
        default=None, alias="DOCSTORE_CLUSTER_USERNAME"
    )
    cluster_password: Optional[str] = Field(
        default=None, alias="DOCSTORE_CLUSTER_PASSWORD"
    )
