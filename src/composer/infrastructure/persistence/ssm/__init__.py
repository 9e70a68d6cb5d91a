from composer.infrastructure.persistence.ssm.client import ParameterStoreClient

__all__ = ["ParameterStoreClient"]
