"""
Factory for creating merge engines.
"""

from src.config import MergeConfig
from src.core.merge.base import MergeEngine
from src.core.merge.simple import SimpleMergeEngine
from src.utils.exceptions import ConfigurationError


class MergeEngineFactory:
    """Factory for creating merge engines from configuration."""

    @staticmethod
    def create(config: MergeConfig) -> MergeEngine:
        """
        Create merge engine from configuration.

        Args:
            config: Merge configuration

        Returns:
            Merge engine instance

        Raises:
            ConfigurationError: If engine is not supported (a ValueError)
        """
        if config.engine == "simple":
            return SimpleMergeEngine()
        else:
            raise ConfigurationError(
                f"Unsupported merge engine: {config.engine}", context={"engine": config.engine}
            )
