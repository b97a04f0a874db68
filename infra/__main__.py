"""Pulumi entry point for the tiered VPC infrastructure."""
import logging

import structlog

from tiervpc_infra.__main__ import TieredVpcStack
from tiervpc_infra.config import StackConfig

structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.INFO))
TieredVpcStack(config=StackConfig.load()).run()
