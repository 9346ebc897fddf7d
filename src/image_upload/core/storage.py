"""S3-backed artifact store."""

from typing import List

from botocore.exceptions import ClientError

from .exceptions import StoreError
from .models import StorageConfig
from .protocols import LoggerProtocol, S3ClientProtocol


MISSING_OBJECT_CODES = ("404", "NoSuchKey", "NotFound")


def build_object_url(config: StorageConfig, key: str) -> str:
    """
    Public URL of an object; pure string formatting, no network call.

    Args:
        config: Store configuration (bucket, region, optional endpoint)
        key: Object key

    Returns:
        ``<endpoint>/<bucket>/<key>`` for custom endpoints, otherwise the
        virtual-hosted AWS URL for the bucket's region.
    """
    if config.endpoint:
        return f"{config.endpoint.rstrip('/')}/{config.bucket_name}/{key}"
    return f"https://{config.bucket_name}.s3.{config.region}.amazonaws.com/{key}"


class S3ArtifactStore:
    """Artifact store over a single bucket.

    Holds no per-request state, so one instance can serve concurrent
    requests as long as the underlying client can (boto3 clients can).
    """

    def __init__(
        self,
        s3_client: S3ClientProtocol,
        config: StorageConfig,
        logger: LoggerProtocol,
    ):
        self._s3_client = s3_client
        self._config = config
        self._logger = logger

    @property
    def bucket(self) -> str:
        return self._config.bucket_name

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self._logger.debug(
            f"Uploading to s3://{self.bucket}/{key}",
            content_type=content_type,
            size=len(data),
        )
        try:
            self._s3_client.put_object(
                Bucket=self.bucket, Key=key, Body=data, ContentType=content_type
            )
        except Exception as e:
            raise StoreError(f"Failed to put s3://{self.bucket}/{key}: {e}") from e

    def exists(self, key: str) -> bool:
        try:
            self._s3_client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            error_code = str(e.response.get("Error", {}).get("Code", ""))
            if error_code in MISSING_OBJECT_CODES:
                return False
            raise StoreError(f"Failed to stat s3://{self.bucket}/{key}: {e}") from e
        except Exception as e:
            raise StoreError(f"Failed to stat s3://{self.bucket}/{key}: {e}") from e
        return True

    def list_keys(self) -> List[str]:
        keys = []
        try:
            paginator = self._s3_client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket):
                for obj in page.get("Contents", []):
                    keys.append(obj["Key"])
        except Exception as e:
            self._logger.error(f"Error listing s3://{self.bucket}: {e}")
            raise StoreError(f"Failed to list s3://{self.bucket}: {e}") from e

        self._logger.debug(f"Found {len(keys)} objects in s3://{self.bucket}")
        return keys

    def url_for(self, key: str) -> str:
        return build_object_url(self._config, key)
