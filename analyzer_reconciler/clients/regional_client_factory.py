# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Factory for creating and caching regional Access Analyzer clients."""

import logging

from botocore.config import Config

from ..config import Settings
from .access_analyzer_client import AccessAnalyzerClient, build_boto_config

logger = logging.getLogger(__name__)


class RegionalClientFactory:
    """
    Factory for creating and caching regional Access Analyzer clients.

    Reuses clients within a process so warm invocations do not pay for
    client construction again. Applies the same timeout and retry
    configuration to every client.
    """

    def __init__(self, config: Settings):
        """
        Initialize with reconciler settings.

        Args:
            config: Settings supplying the default region, timeouts and
                    transport retry budget
        """
        self._config = config
        self._clients: dict[str, AccessAnalyzerClient] = {}

        logger.debug(
            f"RegionalClientFactory initialized with default_region={config.aws_region}"
        )

    @property
    def default_region(self) -> str:
        """Get the default region."""
        return self._config.aws_region

    def boto_config(self, region: str) -> Config:
        """Get the botocore configuration for a region."""
        return build_boto_config(self._config, region)

    def get_client(self, region: str | None = None) -> AccessAnalyzerClient:
        """
        Get or create a client for the specified region.

        Calling this method multiple times with the same region returns the
        exact same AccessAnalyzerClient instance.

        Args:
            region: AWS region code; the default region when omitted

        Returns:
            AccessAnalyzerClient configured for the region
        """
        region = region or self.default_region
        if region in self._clients:
            logger.debug(f"Reusing cached client for region {region}")
            return self._clients[region]

        logger.info(f"Creating new Access Analyzer client for region {region}")
        client = AccessAnalyzerClient(region=region, boto_config=self.boto_config(region))
        self._clients[region] = client
        return client
