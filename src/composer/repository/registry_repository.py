from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping

from pydantic import ValidationError

from composer.engine.registry import Registry
from composer.exception.api_exceptions import ConfigUnavailableError

if TYPE_CHECKING:
    from composer.config.app_settings import AppSettings
    from composer.infrastructure.persistence.ssm.client import ParameterStoreClient

logger = logging.getLogger(__name__)


class RegistryLoader:
    """Loads the micro-frontend registry from the Parameter Store.

    Attributes:
        parameter_store: Parameter Store client
        template_bucket_parameter: Parameter holding the template bucket
        template_key_parameter: Parameter holding the template key
        mfe_list_parameter: Parameter holding the JSON micro-frontend list
        downstream_parameters: Alias -> parameter name of downstream identifiers
    """

    def __init__(
        self,
        parameter_store: ParameterStoreClient,
        template_bucket_parameter: str,
        template_key_parameter: str,
        mfe_list_parameter: str,
        downstream_parameters: Mapping[str, str] | None = None,
    ):
        self.parameter_store = parameter_store
        self.template_bucket_parameter = template_bucket_parameter
        self.template_key_parameter = template_key_parameter
        self.mfe_list_parameter = mfe_list_parameter
        self.downstream_parameters = dict(downstream_parameters or {})

    @classmethod
    def from_settings(
        cls, parameter_store: ParameterStoreClient, app_settings: AppSettings
    ) -> RegistryLoader:
        return cls(
            parameter_store=parameter_store,
            template_bucket_parameter=app_settings.template_bucket_parameter,
            template_key_parameter=app_settings.template_key_parameter,
            mfe_list_parameter=app_settings.mfe_list_parameter,
            downstream_parameters=app_settings.downstream_parameters,
        )

    def required_parameters(self) -> List[str]:
        """Parameter names that must all be present, in read order."""
        names = [
            self.template_bucket_parameter,
            self.template_key_parameter,
            self.mfe_list_parameter,
            *self.downstream_parameters.values(),
        ]
        return list(dict.fromkeys(names))

    async def load(self) -> Registry:
        """Read and validate the registry.

        Returns:
            Immutable Registry

        Raises:
            ConfigUnavailableError: If a key is missing or invalid, or the
                Parameter Store cannot be reached
        """
        names = self.required_parameters()
        values, invalid = await self.parameter_store.get_parameters(names)

        missing = [
            name
            for name in names
            if name in invalid or not (values.get(name) or "").strip()
        ]
        if missing:
            raise ConfigUnavailableError(
                f"Missing required configuration keys: {', '.join(missing)}",
                keys=missing,
            )

        entries = self._parse_entries(values[self.mfe_list_parameter])
        downstream = {
            alias: values[name] for alias, name in self.downstream_parameters.items()
        }

        try:
            registry = Registry(
                entries=entries,
                template_bucket=values[self.template_bucket_parameter].strip(),
                template_key=values[self.template_key_parameter].strip(),
                downstream=downstream,
            )
        except ValidationError as e:
            raise ConfigUnavailableError(
                f"Invalid micro-frontend registry: {e}",
                keys=[self.mfe_list_parameter],
            ) from e

        logger.info(
            f"Loaded registry with {len(registry.entries)} micro-frontends "
            f"({', '.join(registry.names) or 'none'}), "
            f"template s3://{registry.template_bucket}/{registry.template_key}"
        )
        return registry

    def _parse_entries(self, raw: str) -> List[Dict[str, Any]]:
        """Decode the JSON micro-frontend list."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigUnavailableError(
                f"Micro-frontend list is not valid JSON: {e}",
                keys=[self.mfe_list_parameter],
            ) from e

        if not isinstance(data, list):
            raise ConfigUnavailableError(
                "Micro-frontend list must be a JSON array",
                keys=[self.mfe_list_parameter],
            )
        return data
