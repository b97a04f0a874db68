"""Provider-agnostic tiered network component interface."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Protocol

import pulumi

logger: logging.Logger = logging.getLogger(__name__)


class Tier(StrEnum):
    """Subnet tier, each with its own routing and isolation policy."""

    PUBLIC = "Public"
    PRIVATE = "Private"
    DATA = "Data"


class NetworkOutputs:
    """Resolved outputs from a provisioned tiered network."""

    def __init__(
        self,
        vpc_id: pulumi.Output[str],
        internet_gateway_id: pulumi.Output[str],
        public_subnet_ids: list[pulumi.Output[str]],
        private_subnet_ids: list[pulumi.Output[str]],
        data_subnet_ids: list[pulumi.Output[str]],
        nat_gateway_ids: dict[str, pulumi.Output[str]] | None = None,
    ) -> None:
        self.vpc_id: pulumi.Output[str] = vpc_id
        self.internet_gateway_id: pulumi.Output[str] = internet_gateway_id
        self.public_subnet_ids: list[pulumi.Output[str]] = public_subnet_ids
        self.private_subnet_ids: list[pulumi.Output[str]] = private_subnet_ids
        self.data_subnet_ids: list[pulumi.Output[str]] = data_subnet_ids
        self.nat_gateway_ids: dict[str, pulumi.Output[str]] = nat_gateway_ids or {}


class TieredNetwork(Protocol):
    @property
    def outputs(self) -> NetworkOutputs: ...
