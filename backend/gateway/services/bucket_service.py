"""
DSM Gateway — Bucket Service (object storage)
===============================================

What:  List buckets, upload, delete and replicate objects through the S3 API.
How:   Thin wrapper around one boto3 S3 client. Every failure is re-raised as
       StorageError carrying a serializable description of the API error,
       which the bucket routes return to the caller as `details`.
Who:   Built once in the application lifespan, injected into the /buckets
       route handlers.

Replication:
    Copies one object from the source bucket to the destination bucket under
    the same key: get_object, read the whole body into memory, put_object.
    Both bucket names are fixed when the service is built. A failed read
    stops before any write; a failed write leaves nothing to undo.

boto3 is blocking; the bucket routes are plain `def` handlers, so FastAPI
runs these calls in its threadpool instead of on the event loop.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from gateway.config import Settings
from gateway.exceptions import StorageError
from gateway.request_log import describe_error

logger = logging.getLogger(__name__)


def create_s3_client(settings: Settings) -> BaseClient:
    """
    Build the process-wide S3 client from settings.

    Credentials, region and session token left unset fall back to boto3's
    default chain (environment, shared config, instance role).
    """
    client = boto3.client(
        "s3",
        aws_access_key_id=settings.access_key_id,
        aws_secret_access_key=settings.secret_access_key,
        aws_session_token=settings.session_token,
        region_name=settings.region,
        endpoint_url=settings.s3_endpoint_url,
    )
    logger.info(
        "Initialized S3 client region='%s' endpoint='%s'",
        client.meta.region_name,
        settings.s3_endpoint_url or "default",
    )
    return client


class BucketService:
    """
    Object-storage operations for the /buckets routes.

    Attributes:
        client: boto3 S3 client
        source_bucket: Bucket replicate() reads from
        destination_bucket: Bucket replicate() writes to
    """

    def __init__(self, client: BaseClient, source_bucket: str, destination_bucket: str):
        self.client = client
        self.source_bucket = source_bucket
        self.destination_bucket = destination_bucket
        logger.info(
            "Initialized BucketService replication '%s' -> '%s'",
            source_bucket,
            destination_bucket,
        )

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[BaseClient] = None) -> "BucketService":
        return cls(
            client=client or create_s3_client(settings),
            source_bucket=settings.replication_source_bucket,
            destination_bucket=settings.replication_destination_bucket,
        )

    def object_location(self, bucket: str, key: str) -> str:
        """URL of `key` in `bucket` on the configured endpoint (path-style)."""
        endpoint = self.client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{bucket}/{quote(key)}"

    def list_buckets(self) -> List[Dict[str, Any]]:
        """Return the API's Buckets array unchanged."""
        try:
            response = self.client.list_buckets()
        except (ClientError, BotoCoreError) as e:
            raise StorageError("Erro ao listar buckets") from e
        return response.get("Buckets", [])

    def upload(self, bucket: str, key: str, body: bytes) -> Dict[str, Any]:
        """
        Store `body` under `key` in `bucket`.

        Returns:
            Result descriptor: Bucket, Key, ETag, Location, and VersionId when
            the bucket is versioned.
        """
        try:
            response = self.client.put_object(Bucket=bucket, Key=key, Body=body)
        except (ClientError, BotoCoreError) as e:
            raise StorageError("Erro ao enviar arquivo", details=describe_error(e)) from e
        return self._result(bucket, key, response)

    def delete_object(self, bucket: str, key: str) -> None:
        """
        Delete `key` from `bucket`.

        No existence check: S3 deletes are idempotent, so a missing key
        succeeds.
        """
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StorageError("Erro ao deletar arquivo", details=describe_error(e)) from e

    def replicate(self, key: str) -> Dict[str, Any]:
        """
        Copy `key` from the source bucket to the destination bucket.

        Raises:
            StorageError: Read or write failed. A failed read means no write
            was attempted.
        """
        try:
            source = self.client.get_object(Bucket=self.source_bucket, Key=key)
            body = source["Body"].read()
        except (ClientError, BotoCoreError) as e:
            raise StorageError("Erro ao replicar arquivo", details=describe_error(e)) from e

        try:
            response = self.client.put_object(
                Bucket=self.destination_bucket, Key=key, Body=body
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError("Erro ao replicar arquivo", details=describe_error(e)) from e

        logger.info(
            "Replicated %s (%d bytes) %s -> %s",
            key, len(body), self.source_bucket, self.destination_bucket,
        )
        return self._result(self.destination_bucket, key, response)

    def _result(self, bucket: str, key: str, response: Dict[str, Any]) -> Dict[str, Any]:
        result = {
            "Bucket": bucket,
            "Key": key,
            "ETag": response.get("ETag"),
            "Location": self.object_location(bucket, key),
        }
        if response.get("VersionId"):
            result["VersionId"] = response["VersionId"]
        return result
