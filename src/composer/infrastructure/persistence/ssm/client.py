"""Async SSM Parameter Store client.

Wraps aioboto3 to read the registry parameters at startup.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from composer.constants import SSM_GET_PARAMETERS_BATCH_SIZE
from composer.exception.api_exceptions import ConfigUnavailableError

logger = logging.getLogger(__name__)


class ParameterStoreClient:
    """Async Parameter Store reader.

    Attributes:
        region: AWS region
        endpoint_url: SSM endpoint URL (None for AWS)
        config: botocore Config applied to every client (timeouts, retries)
    """

    def __init__(
        self,
        region: str,
        endpoint_url: Optional[str] = None,
        config: Optional[Config] = None,
        session: Optional[aioboto3.Session] = None,
    ):
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

    async def get_parameters(
        self, names: Iterable[str]
    ) -> Tuple[Dict[str, str], List[str]]:
        """Read parameter values in batches.

        Args:
            names: Parameter names to read

        Returns:
            Tuple of (name -> value for found parameters, names reported invalid)

        Raises:
            ConfigUnavailableError: If the Parameter Store cannot be reached
        """
        unique_names = list(dict.fromkeys(names))
        values: Dict[str, str] = {}
        invalid: List[str] = []

        try:
            async with self._session.client("ssm", **self._client_kwargs()) as client:
                for start in range(0, len(unique_names), SSM_GET_PARAMETERS_BATCH_SIZE):
                    batch = unique_names[start : start + SSM_GET_PARAMETERS_BATCH_SIZE]
                    response = await client.get_parameters(
                        Names=batch, WithDecryption=True
                    )
                    for parameter in response.get("Parameters", []):
                        values[parameter["Name"]] = parameter["Value"]
                    invalid.extend(response.get("InvalidParameters", []))
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")
            raise ConfigUnavailableError(
                f"Parameter Store request failed: {error_code}",
                keys=unique_names,
            ) from e
        except BotoCoreError as e:
            raise ConfigUnavailableError(
                f"Parameter Store unreachable: {e}", keys=unique_names
            ) from e

        logger.debug(
            f"Read {len(values)} parameters from Parameter Store "
            f"({len(invalid)} invalid)"
        )
        return values, invalid
