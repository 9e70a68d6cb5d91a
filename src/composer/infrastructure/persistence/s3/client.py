"""Async S3 client for the page template.

Wraps aioboto3 to read the template object at startup. Works against AWS S3
(endpoint_url=None) and S3-compatible stores such as MinIO or LocalStack.
"""

import logging
from typing import Optional

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from composer.exception.api_exceptions import (
    ObjectNotFoundError,
    ObjectStoreUnavailableError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_ERROR_CODES = ("NoSuchKey", "404", "NotFound")


class S3Client:
    """Async S3 template store client.

    Credentials come from the default provider chain (task role, env, profile).

    Attributes:
        region: AWS region
        endpoint_url: S3 endpoint URL (None for AWS)
        config: botocore Config applied to every client (timeouts, retries)
    """

    def __init__(
        self,
        region: str,
        endpoint_url: Optional[str] = None,
        config: Optional[Config] = None,
        session: Optional[aioboto3.Session] = None,
    ):
        """Initialize S3 client.

        Args:
            region: AWS region
            endpoint_url: S3 endpoint URL (None for AWS S3)
            config: botocore Config with timeouts and retry policy
            session: Optional aioboto3 session to share
        """
        self.region = region
        self.endpoint_url = endpoint_url
        self.config = config
        self._session = session or aioboto3.Session()

    def _client_kwargs(self) -> dict:
        """Build aioboto3 client keyword arguments."""
        kwargs = {"region_name": self.region}
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        if self.config is not None:
            kwargs["config"] = self.config
        return kwargs

    async def fetch(self, bucket: str, key: str) -> bytes:
        """Download a whole object.

        Args:
            bucket: Bucket name
            key: Object key

        Returns:
            Raw bytes of the object

        Raises:
            ObjectNotFoundError: If the object does not exist
            ObjectStoreUnavailableError: On transport or authorization failure
        """
        try:
            async with self._session.client("s3", **self._client_kwargs()) as client:
                response = await client.get_object(Bucket=bucket, Key=key)
                async with response["Body"] as stream:
                    data = await stream.read()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            if error_code in NOT_FOUND_ERROR_CODES:
                raise ObjectNotFoundError(bucket, key) from e
            raise ObjectStoreUnavailableError(bucket, key, reason=error_code) from e
        except BotoCoreError as e:
            raise ObjectStoreUnavailableError(bucket, key, reason=str(e)) from e

        logger.debug(f"Downloaded {len(data)} bytes from s3://{bucket}/{key}")
        return data
