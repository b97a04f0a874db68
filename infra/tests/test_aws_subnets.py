"""Unit tests for the tiered subnet factory using Pulumi mocks."""
from __future__ import annotations

import pulumi
import pytest
from pulumi.runtime import Mocks


class SubnetMocks(Mocks):
    def new_resource(
        self, args: pulumi.runtime.MockResourceArgs
    ) -> tuple[str, dict[str, object]]:
        return (f"{args.name}-id", args.inputs)

    def call(
        self, args: pulumi.runtime.MockCallArgs
    ) -> tuple[dict[str, object], list[tuple[str, str]]]:
        return ({}, [])


pulumi.runtime.set_mocks(SubnetMocks())

import pulumi_aws as aws  # noqa: E402

from tiervpc_infra.components.network import Tier  # noqa: E402
from tiervpc_infra.documents import SubnetConfig  # noqa: E402
from tiervpc_infra.errors import MissingNatGateway  # noqa: E402
from tiervpc_infra.providers.aws.acl import AwsTierAcl, AwsTierAclArgs  # noqa: E402
from tiervpc_infra.providers.aws.nat import NatGatewayRegistry  # noqa: E402
from tiervpc_infra.providers.aws.subnets import SubnetFactory  # noqa: E402


class _Fixture:
    def __init__(self, name: str) -> None:
        self.parent = pulumi.ComponentResource("test:index:Parent", f"{name}-parent")
        self.factory = SubnetFactory(
            name, vpc_id="vpc-test", vpc_name="sandpit", region="ap-southeast-2", parent=self.parent
        )
        self.registry = NatGatewayRegistry(name, "sandpit", parent=self.parent)
        self.acls = {
            tier: AwsTierAcl(
                f"{name}-{tier.lower()}",
                AwsTierAclArgs(vpc_id="vpc-test", vpc_name="sandpit", tier=tier, rules=[]),
            )
            for tier in Tier
        }
        self.route_table = aws.ec2.RouteTable(f"{name}-shared-rt", aws.ec2.RouteTableArgs(vpc_id="vpc-test"))


def _subnet(zone: str, cidr: str = "10.0.0.0/24", public_ip: bool = False) -> SubnetConfig:
    return SubnetConfig(availabilityZone=zone, ipAddress=cidr, mapPublicIpOnLaunch=public_ip)


def test_shared_mode_places_nat_in_first_public_subnet_only() -> None:
    fx = _Fixture("test-sub-shared")
    first = fx.factory.public(_subnet("a"), fx.route_table, fx.acls[Tier.PUBLIC], fx.registry, False)
    second = fx.factory.public(_subnet("b", "10.0.1.0/24"), fx.route_table, fx.acls[Tier.PUBLIC], fx.registry, False)
    assert first.nat_gateway is not None
    assert second.nat_gateway is None
    assert list(fx.registry.gateways) == ["a"]


def test_per_az_mode_places_nat_in_every_public_subnet() -> None:
    fx = _Fixture("test-sub-per-az")
    for zone, cidr in (("a", "10.0.0.0/24"), ("b", "10.0.1.0/24")):
        created = fx.factory.public(_subnet(zone, cidr), fx.route_table, fx.acls[Tier.PUBLIC], fx.registry, True)
        assert created.nat_gateway is not None
    assert list(fx.registry.gateways) == ["a", "b"]


def test_public_subnet_uses_shared_route_table_without_own_route() -> None:
    fx = _Fixture("test-sub-public-rt")
    created = fx.factory.public(_subnet("a"), fx.route_table, fx.acls[Tier.PUBLIC], fx.registry, False)
    assert created.tier == Tier.PUBLIC
    assert created.route_table is fx.route_table
    assert created.default_route is None


@pulumi.runtime.test
def test_public_subnet_placement_and_labels() -> None:
    fx = _Fixture("test-sub-public-tags")
    created = fx.factory.public(
        _subnet("A", public_ip=True), fx.route_table, fx.acls[Tier.PUBLIC], fx.registry, False
    )
    subnet = created.subnet

    def check(values: list[object]) -> None:
        zone, cidr, public_ip, tags = values
        assert zone == "ap-southeast-2a"
        assert cidr == "10.0.0.0/24"
        assert public_ip is True
        assert tags["Name"] == "sandpit-PublicSubnetA"
        assert tags["Tier"] == "Public"

    return pulumi.Output.all(
        subnet.availability_zone, subnet.cidr_block, subnet.map_public_ip_on_launch, subnet.tags
    ).apply(check)


@pulumi.runtime.test
def test_private_subnet_default_route_targets_own_zone_gateway() -> None:
    fx = _Fixture("test-sub-private-own")
    fx.factory.public(_subnet("a"), fx.route_table, fx.acls[Tier.PUBLIC], fx.registry, True)
    fx.factory.public(_subnet("b", "10.0.1.0/24"), fx.route_table, fx.acls[Tier.PUBLIC], fx.registry, True)
    created = fx.factory.private(_subnet("b", "10.0.11.0/24"), fx.acls[Tier.PRIVATE], fx.registry)

    assert created.route_table is not fx.route_table
    assert created.default_route is not None
    assert created.nat_gateway is fx.registry.get("b")

    def check(values: list[object]) -> None:
        destination, nat_gateway_id, route_table_id = values
        assert destination == "0.0.0.0/0"
        assert nat_gateway_id == "test-sub-private-own-nat-b-id"
        assert route_table_id == "test-sub-private-own-private-b-rt-id"

    route = created.default_route
    return pulumi.Output.all(
        route.destination_cidr_block, route.nat_gateway_id, route.route_table_id
    ).apply(check)


@pulumi.runtime.test
def test_private_subnet_never_maps_public_ip() -> None:
    fx = _Fixture("test-sub-private-ip")
    fx.factory.public(_subnet("a"), fx.route_table, fx.acls[Tier.PUBLIC], fx.registry, False)
    created = fx.factory.private(_subnet("a", "10.0.10.0/24", public_ip=True), fx.acls[Tier.PRIVATE], fx.registry)

    def check(public_ip: object) -> None:
        assert public_ip is False

    return created.subnet.map_public_ip_on_launch.apply(check)


def test_private_subnet_without_any_gateway_fails() -> None:
    fx = _Fixture("test-sub-private-missing")
    with pytest.raises(MissingNatGateway):
        fx.factory.private(_subnet("a"), fx.acls[Tier.PRIVATE], fx.registry)


@pulumi.runtime.test
def test_data_subnet_has_no_default_route() -> None:
    fx = _Fixture("test-sub-data")
    created = fx.factory.data(_subnet("a", "10.0.20.0/24"), fx.route_table, fx.acls[Tier.DATA])
    assert created.default_route is None
    assert created.nat_gateway is None
    assert created.route_table is fx.route_table

    def check(values: list[object]) -> None:
        route_table_id, acl_id = values
        assert route_table_id == "test-sub-data-shared-rt-id"
        assert acl_id == "test-sub-data-data-acl-id"

    return pulumi.Output.all(
        created.route_table_association.route_table_id, created.acl_association.network_acl_id
    ).apply(check)
