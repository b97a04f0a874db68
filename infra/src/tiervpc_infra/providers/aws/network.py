"""AWS VPC implementation of TieredNetwork."""

from __future__ import annotations

import logging

import pulumi
import pulumi_aws as aws

from tiervpc_infra.components.network import NetworkOutputs, Tier
from tiervpc_infra.documents import VpcConfig
from tiervpc_infra.providers.aws.acl import AwsTierAcl, AwsTierAclArgs
from tiervpc_infra.providers.aws.nat import NatGatewayRegistry
from tiervpc_infra.providers.aws.subnets import DEFAULT_ROUTE_CIDR, SubnetFactory, TierSubnet

logger: logging.Logger = logging.getLogger(__name__)


class AwsTieredNetworkArgs:
    """Arguments for the AWS tiered network component.

    Args:
        vpc: Validated VPC document.
        region: Region prefix for the configured zone suffixes.
        tags: Stack-wide tags applied to every taggable resource.
    """

    def __init__(
        self,
        vpc: VpcConfig,
        region: str,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.vpc: VpcConfig = vpc
        self.region: str = region
        self.tags: dict[str, str] = dict(tags or {})


class AwsTieredNetwork(pulumi.ComponentResource):
    """AWS VPC with public, private and data subnet tiers satisfying ``TieredNetwork``.

    Provisions the VPC, an attached internet gateway, one network ACL per
    tier, a public route table defaulting to the internet gateway, a shared
    data route table with no default route, and the configured subnets.
    NAT gateways are placed in public subnets, one per zone or a single
    shared one depending on ``enable_per_az_nat_gateway``. Every private
    subnet gets its own route table defaulting to a NAT gateway.

    The public tier is always built in full before the private tier: a
    private subnet may route through a gateway created for a public subnet
    declared after it.
    """

    def __init__(
        self,
        name: str,
        args: AwsTieredNetworkArgs,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("tiervpc:aws:TieredNetwork", name, {}, opts)

        vpc_config = args.vpc
        vpc_name = vpc_config.vpc_name

        logger.debug(
            "provisioning_aws_tiered_network",
            extra={"name": name, "vpc_name": vpc_name, "cidr": vpc_config.ip_addresses},
        )

        def tagged(resource_name: str) -> dict[str, str]:
            return {**args.tags, "Name": resource_name}

        self.vpc: aws.ec2.Vpc = aws.ec2.Vpc(
            f"{name}-vpc",
            aws.ec2.VpcArgs(
                cidr_block=vpc_config.ip_addresses,
                enable_dns_support=True,
                enable_dns_hostnames=True,
                tags=tagged(vpc_name),
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.internet_gateway: aws.ec2.InternetGateway = aws.ec2.InternetGateway(
            f"{name}-igw",
            aws.ec2.InternetGatewayArgs(tags=tagged(f"IGW-{vpc_name.upper()}")),
            opts=pulumi.ResourceOptions(parent=self),
        )
        igw_attachment = aws.ec2.InternetGatewayAttachment(
            f"{name}-igw-attachment",
            aws.ec2.InternetGatewayAttachmentArgs(
                vpc_id=self.vpc.id,
                internet_gateway_id=self.internet_gateway.id,
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.acls: dict[Tier, AwsTierAcl] = {
            tier: AwsTierAcl(
                f"{name}-{tier.lower()}",
                AwsTierAclArgs(
                    vpc_id=self.vpc.id,
                    vpc_name=vpc_name,
                    tier=tier,
                    rules=rules,
                    tags=args.tags,
                ),
                opts=pulumi.ResourceOptions(parent=self),
            )
            for tier, rules in (
                (Tier.PUBLIC, vpc_config.public_subnet_nacls),
                (Tier.PRIVATE, vpc_config.private_subnet_nacls),
                (Tier.DATA, vpc_config.data_subnet_nacls),
            )
        }

        self.public_route_table: aws.ec2.RouteTable = aws.ec2.RouteTable(
            f"{name}-public-rt",
            aws.ec2.RouteTableArgs(vpc_id=self.vpc.id, tags=tagged(f"RT-{vpc_name}-PUBLIC")),
            opts=pulumi.ResourceOptions(parent=self),
        )
        self.public_default_route: aws.ec2.Route = aws.ec2.Route(
            f"{name}-public-default-route",
            aws.ec2.RouteArgs(
                route_table_id=self.public_route_table.id,
                destination_cidr_block=DEFAULT_ROUTE_CIDR,
                gateway_id=self.internet_gateway.id,
            ),
            opts=pulumi.ResourceOptions(parent=self, depends_on=[igw_attachment]),
        )

        # Private route tables are created per subnet once the NAT gateways exist.
        self.data_route_table: aws.ec2.RouteTable = aws.ec2.RouteTable(
            f"{name}-data-rt",
            aws.ec2.RouteTableArgs(vpc_id=self.vpc.id, tags=tagged(f"RT-{vpc_name}-DATA")),
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.nat_gateways: NatGatewayRegistry = NatGatewayRegistry(
            name,
            vpc_name,
            parent=self,
            depends_on=[igw_attachment],
            tags=args.tags,
        )
        factory = SubnetFactory(
            name,
            vpc_id=self.vpc.id,
            vpc_name=vpc_name,
            region=args.region,
            parent=self,
            tags=args.tags,
        )

        self.subnets: dict[Tier, list[TierSubnet]] = {tier: [] for tier in Tier}

        for subnet_config in vpc_config.public_subnets:
            self.subnets[Tier.PUBLIC].append(
                factory.public(
                    subnet_config,
                    route_table=self.public_route_table,
                    acl=self.acls[Tier.PUBLIC],
                    nat_gateways=self.nat_gateways,
                    per_az_nat_gateway=vpc_config.enable_per_az_nat_gateway,
                )
            )
        logger.debug(
            "public_tier_complete",
            extra={"name": name, "nat_gateways": list(self.nat_gateways.gateways)},
        )

        for subnet_config in vpc_config.private_subnets:
            self.subnets[Tier.PRIVATE].append(
                factory.private(
                    subnet_config,
                    acl=self.acls[Tier.PRIVATE],
                    nat_gateways=self.nat_gateways,
                )
            )

        for subnet_config in vpc_config.data_subnets:
            self.subnets[Tier.DATA].append(
                factory.data(
                    subnet_config,
                    route_table=self.data_route_table,
                    acl=self.acls[Tier.DATA],
                )
            )

        self._outputs: NetworkOutputs = NetworkOutputs(
            vpc_id=self.vpc.id,
            internet_gateway_id=self.internet_gateway.id,
            public_subnet_ids=[s.subnet.id for s in self.subnets[Tier.PUBLIC]],
            private_subnet_ids=[s.subnet.id for s in self.subnets[Tier.PRIVATE]],
            data_subnet_ids=[s.subnet.id for s in self.subnets[Tier.DATA]],
            nat_gateway_ids={
                zone: gateway.id for zone, gateway in self.nat_gateways.gateways.items()
            },
        )

        self.register_outputs(
            {
                "vpc_id": self._outputs.vpc_id,
                "internet_gateway_id": self._outputs.internet_gateway_id,
                "public_subnet_ids": self._outputs.public_subnet_ids,
                "private_subnet_ids": self._outputs.private_subnet_ids,
                "data_subnet_ids": self._outputs.data_subnet_ids,
                "nat_gateway_ids": self._outputs.nat_gateway_ids,
            }
        )

    @property
    def outputs(self) -> NetworkOutputs:
        """Return the resolved network outputs."""
        return self._outputs
