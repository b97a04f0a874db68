"""Public, private and data subnet construction for a tiered VPC."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from tiervpc_infra.components.network import Tier
from tiervpc_infra.documents import SubnetConfig
from tiervpc_infra.providers.aws.acl import AwsTierAcl
from tiervpc_infra.providers.aws.nat import NatGatewayRegistry

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_ROUTE_CIDR = "0.0.0.0/0"


@dataclass
class TierSubnet:
    """A subnet together with the routing and ACL resources bound to it."""

    tier: Tier
    zone: str
    subnet: aws.ec2.Subnet
    route_table: aws.ec2.RouteTable
    route_table_association: aws.ec2.RouteTableAssociation
    acl_association: aws.ec2.NetworkAclAssociation
    default_route: aws.ec2.Route | None = None
    nat_gateway: aws.ec2.NatGateway | None = None


class SubnetFactory:
    """Creates subnets for one VPC in two explicit phases.

    ``create_bare_subnet`` declares only the subnet itself; each tier method
    then binds it to an explicit route table and the tier's ACL, so no
    subnet ever relies on the VPC main route table or default ACL.
    """

    def __init__(
        self,
        name: str,
        vpc_id: pulumi.Input[str],
        vpc_name: str,
        region: str,
        parent: pulumi.Resource,
        tags: dict[str, str] | None = None,
    ) -> None:
        self._name: str = name
        self._vpc_id: pulumi.Input[str] = vpc_id
        self._vpc_name: str = vpc_name
        self._region: str = region
        self._parent: pulumi.Resource = parent
        self._tags: dict[str, str] = dict(tags or {})

    def _opts(self) -> pulumi.ResourceOptions:
        return pulumi.ResourceOptions(parent=self._parent)

    def create_bare_subnet(self, tier: Tier, config: SubnetConfig) -> aws.ec2.Subnet:
        """Declare the subnet with its tier labels and no routing attached."""
        availability_zone = f"{self._region}{config.zone}"
        logger.debug(
            "provisioning_subnet",
            extra={"tier": str(tier), "availability_zone": availability_zone, "cidr": config.ip_address},
        )
        return aws.ec2.Subnet(
            f"{self._name}-{tier.lower()}-{config.zone}",
            aws.ec2.SubnetArgs(
                vpc_id=self._vpc_id,
                cidr_block=config.ip_address,
                availability_zone=availability_zone,
                map_public_ip_on_launch=tier == Tier.PUBLIC and config.map_public_ip_on_launch,
                tags={
                    **self._tags,
                    "Name": f"{self._vpc_name}-{tier}Subnet{config.availability_zone}",
                    "Tier": str(tier),
                },
            ),
            opts=self._opts(),
        )

    def _associate(
        self,
        tier: Tier,
        config: SubnetConfig,
        subnet: aws.ec2.Subnet,
        route_table: aws.ec2.RouteTable,
        acl: AwsTierAcl,
    ) -> tuple[aws.ec2.RouteTableAssociation, aws.ec2.NetworkAclAssociation]:
        prefix = f"{self._name}-{tier.lower()}-{config.zone}"
        route_table_association = aws.ec2.RouteTableAssociation(
            f"{prefix}-rta",
            aws.ec2.RouteTableAssociationArgs(subnet_id=subnet.id, route_table_id=route_table.id),
            opts=self._opts(),
        )
        acl_association = acl.associate_with_subnet(
            f"{self._name}-{tier.upper()}_NACL-{config.zone}", subnet
        )
        return route_table_association, acl_association

    def public(
        self,
        config: SubnetConfig,
        route_table: aws.ec2.RouteTable,
        acl: AwsTierAcl,
        nat_gateways: NatGatewayRegistry,
        per_az_nat_gateway: bool,
    ) -> TierSubnet:
        """Create a public subnet on the shared public route table.

        A NAT gateway is placed in the subnet when per-AZ NAT is enabled or
        when no gateway exists yet.
        """
        subnet = self.create_bare_subnet(Tier.PUBLIC, config)
        route_table_association, acl_association = self._associate(
            Tier.PUBLIC, config, subnet, route_table, acl
        )

        nat_gateway = None
        if (per_az_nat_gateway and not nat_gateways.has(config.zone)) or nat_gateways.is_empty():
            nat_gateway = nat_gateways.create(config.zone, subnet)

        return TierSubnet(
            tier=Tier.PUBLIC,
            zone=config.zone,
            subnet=subnet,
            route_table=route_table,
            route_table_association=route_table_association,
            acl_association=acl_association,
            nat_gateway=nat_gateway,
        )

    def private(
        self,
        config: SubnetConfig,
        acl: AwsTierAcl,
        nat_gateways: NatGatewayRegistry,
    ) -> TierSubnet:
        """Create a private subnet with its own route table and NAT default route.

        Raises ``MissingNatGateway`` when the registry holds no gateway.
        """
        nat_gateway = nat_gateways.resolve(config.zone)
        subnet = self.create_bare_subnet(Tier.PRIVATE, config)

        route_table = aws.ec2.RouteTable(
            f"{self._name}-private-{config.zone}-rt",
            aws.ec2.RouteTableArgs(
                vpc_id=self._vpc_id,
                tags={**self._tags, "Name": f"RT-{self._vpc_name}-PRIVATE-{config.zone}"},
            ),
            opts=self._opts(),
        )
        default_route = aws.ec2.Route(
            f"{self._name}-private-{config.zone}-default-route",
            aws.ec2.RouteArgs(
                route_table_id=route_table.id,
                destination_cidr_block=DEFAULT_ROUTE_CIDR,
                nat_gateway_id=nat_gateway.id,
            ),
            opts=self._opts(),
        )
        route_table_association, acl_association = self._associate(
            Tier.PRIVATE, config, subnet, route_table, acl
        )

        return TierSubnet(
            tier=Tier.PRIVATE,
            zone=config.zone,
            subnet=subnet,
            route_table=route_table,
            route_table_association=route_table_association,
            acl_association=acl_association,
            default_route=default_route,
            nat_gateway=nat_gateway,
        )

    def data(
        self,
        config: SubnetConfig,
        route_table: aws.ec2.RouteTable,
        acl: AwsTierAcl,
    ) -> TierSubnet:
        """Create an isolated data subnet on the shared data route table."""
        subnet = self.create_bare_subnet(Tier.DATA, config)
        route_table_association, acl_association = self._associate(
            Tier.DATA, config, subnet, route_table, acl
        )
        return TierSubnet(
            tier=Tier.DATA,
            zone=config.zone,
            subnet=subnet,
            route_table=route_table,
            route_table_association=route_table_association,
            acl_association=acl_association,
        )
