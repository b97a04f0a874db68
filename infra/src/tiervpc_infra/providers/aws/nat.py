"""Per-availability-zone NAT gateway bookkeeping for one network build."""

from __future__ import annotations

import logging

import pulumi
import pulumi_aws as aws

from tiervpc_infra.errors import DuplicateNatGateway, MissingNatGateway

logger: logging.Logger = logging.getLogger(__name__)


class NatGatewayRegistry:
    """Tracks at most one NAT gateway per availability zone.

    The registry only records gateways; whether a public subnet gets one is
    decided by the caller. The first gateway created becomes the shared
    gateway that private subnets fall back to when their own zone has none.
    """

    def __init__(
        self,
        name: str,
        vpc_name: str,
        parent: pulumi.Resource,
        depends_on: list[pulumi.Resource] | None = None,
        tags: dict[str, str] | None = None,
    ) -> None:
        self._name: str = name
        self._vpc_name: str = vpc_name
        self._parent: pulumi.Resource = parent
        self._depends_on: list[pulumi.Resource] = list(depends_on or [])
        self._tags: dict[str, str] = dict(tags or {})
        self._gateways: dict[str, aws.ec2.NatGateway] = {}
        self._shared_gateway: aws.ec2.NatGateway | None = None

    def __len__(self) -> int:
        return len(self._gateways)

    @property
    def shared_gateway(self) -> aws.ec2.NatGateway | None:
        """Return the first gateway created, or ``None`` while empty."""
        return self._shared_gateway

    @property
    def gateways(self) -> dict[str, aws.ec2.NatGateway]:
        """Return a copy of the zone to gateway mapping in creation order."""
        return dict(self._gateways)

    def is_empty(self) -> bool:
        return not self._gateways

    def has(self, zone: str) -> bool:
        return zone.lower() in self._gateways

    def get(self, zone: str) -> aws.ec2.NatGateway | None:
        return self._gateways.get(zone.lower())

    def first_entry(self) -> tuple[str, aws.ec2.NatGateway] | None:
        """Return the earliest ``(zone, gateway)`` pair, if any."""
        return next(iter(self._gateways.items()), None)

    def create(self, zone: str, subnet: aws.ec2.Subnet) -> aws.ec2.NatGateway:
        """Allocate an Elastic IP and a NAT gateway in ``subnet``.

        Raises ``DuplicateNatGateway`` when ``zone`` already has a gateway.
        """
        zone = zone.lower()
        if zone in self._gateways:
            raise DuplicateNatGateway(zone)

        logger.debug("provisioning_nat_gateway", extra={"name": self._name, "zone": zone})

        gateway_name = f"NatGateway-{self._vpc_name.upper()}-{zone}"
        eip = aws.ec2.Eip(
            f"{self._name}-nat-eip-{zone}",
            aws.ec2.EipArgs(domain="vpc", tags={**self._tags, "Name": f"{gateway_name}-EIP"}),
            opts=pulumi.ResourceOptions(parent=self._parent),
        )
        gateway = aws.ec2.NatGateway(
            f"{self._name}-nat-{zone}",
            aws.ec2.NatGatewayArgs(
                subnet_id=subnet.id,
                allocation_id=eip.id,
                tags={**self._tags, "Name": gateway_name},
            ),
            opts=pulumi.ResourceOptions(parent=self._parent, depends_on=self._depends_on),
        )

        self._gateways[zone] = gateway
        if self._shared_gateway is None:
            self._shared_gateway = gateway
        return gateway

    def resolve(self, zone: str) -> aws.ec2.NatGateway:
        """Return the gateway a private subnet in ``zone`` should route through.

        Prefers the gateway in the same zone and falls back to the shared
        gateway. Raises ``MissingNatGateway`` when no gateway exists.
        """
        gateway = self.get(zone)
        if gateway is not None:
            return gateway
        if self._shared_gateway is None:
            raise MissingNatGateway(zone)
        logger.debug("nat_gateway_fallback_to_shared", extra={"name": self._name, "zone": zone})
        return self._shared_gateway
