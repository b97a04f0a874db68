"""Pulumi stack entry point for the tiered VPC."""

from __future__ import annotations

import logging

import pulumi
import structlog

from tiervpc_infra.config import StackConfig
from tiervpc_infra.documents import load_account_id, load_vpc_config
from tiervpc_infra.providers.aws.network import AwsTieredNetwork, AwsTieredNetworkArgs

logger: logging.Logger = logging.getLogger(__name__)


class TieredVpcStack:
    """Loads the configuration documents and provisions one tiered VPC."""

    def __init__(self, config: StackConfig, name: str = "vpc") -> None:
        """Initialise the stack with resolved configuration."""
        self._config: StackConfig = config
        self._name: str = name
        self.account_id: str | None = None

    def build(self) -> AwsTieredNetwork:
        """Resolve the account, load the VPC document and declare the network."""
        config = self._config
        self.account_id = load_account_id(config.account_name, config.account_directory_path)
        vpc = load_vpc_config(config.vpc_document_path)

        logger.info(
            "stack_build_started",
            extra={
                "stack_name": config.stack_name,
                "account_name": config.account_name,
                "region": config.region,
                "vpc_name": vpc.vpc_name,
            },
        )
        return AwsTieredNetwork(
            self._name,
            AwsTieredNetworkArgs(vpc=vpc, region=config.region, tags=config.stack_tags()),
        )

    def run(self) -> None:
        """Provision the network and export its identifiers."""
        network = self.build()
        outputs = network.outputs

        pulumi.export("account_id", self.account_id)
        pulumi.export("vpc_id", outputs.vpc_id)
        pulumi.export("internet_gateway_id", outputs.internet_gateway_id)
        pulumi.export("public_subnet_ids", outputs.public_subnet_ids)
        pulumi.export("private_subnet_ids", outputs.private_subnet_ids)
        pulumi.export("data_subnet_ids", outputs.data_subnet_ids)
        pulumi.export("nat_gateway_ids", outputs.nat_gateway_ids)


if __name__ == "__main__":
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.INFO))
    TieredVpcStack(config=StackConfig.load()).run()
