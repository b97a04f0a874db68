"""AWS network ACL construction for one subnet tier."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from tiervpc_infra.components.network import Tier
from tiervpc_infra.documents import IcmpConfig, NaclRule
from tiervpc_infra.errors import InvalidProtocol, MissingPortRange

logger: logging.Logger = logging.getLogger(__name__)

PROTOCOL_ALL = "-1"
PROTOCOL_ICMP = "1"
PROTOCOL_TCP = "6"
PROTOCOL_UDP = "17"
PROTOCOL_ICMPV6 = "53"

# IANA protocol number AWS expects for ICMPv6 entries.
_ICMPV6_WIRE_PROTOCOL = "58"


@dataclass(frozen=True)
class AclTraffic:
    """Traffic matcher for a single network ACL entry."""

    protocol: str
    from_port: int | None = None
    to_port: int | None = None
    icmp_type: int | None = None
    icmp_code: int | None = None


def resolve_acl_traffic(
    protocol: str,
    start_port: int | None = None,
    end_port: int | None = None,
    icmp: IcmpConfig | None = None,
) -> AclTraffic:
    """Translate a declared protocol code into an ACL traffic matcher.

    Args:
        protocol: ``"6"`` (TCP), ``"17"`` (UDP), ``"1"`` (ICMP),
            ``"53"`` (ICMPv6) or ``"-1"`` (all traffic).
        start_port: First port of the range, TCP and UDP only.
        end_port: Last port of the range, TCP and UDP only.
        icmp: ICMP type and code; any type and code when omitted.

    Raises:
        InvalidProtocol: ``protocol`` is not one of the supported codes.
        MissingPortRange: a TCP or UDP rule has no complete port range.
    """
    if protocol in (PROTOCOL_TCP, PROTOCOL_UDP):
        if start_port is None or end_port is None:
            raise MissingPortRange(f"Protocol {protocol} requires both startPort and endPort")
        return AclTraffic(protocol=protocol, from_port=start_port, to_port=end_port)

    if protocol in (PROTOCOL_ICMP, PROTOCOL_ICMPV6):
        icmp = icmp or IcmpConfig()
        wire_protocol = PROTOCOL_ICMP if protocol == PROTOCOL_ICMP else _ICMPV6_WIRE_PROTOCOL
        return AclTraffic(protocol=wire_protocol, icmp_type=icmp.type, icmp_code=icmp.code)

    if protocol == PROTOCOL_ALL:
        return AclTraffic(protocol=PROTOCOL_ALL, from_port=0, to_port=0)

    raise InvalidProtocol(protocol)


class AwsTierAclArgs:
    """Arguments for one tier's network ACL.

    Args:
        vpc_id: ID of the owning VPC.
        vpc_name: Human-readable VPC name used in the ACL name tag.
        tier: Tier the ACL guards.
        rules: Rule entries, created in the given order.
        tags: Stack-wide tags merged into the ACL tags.
    """

    def __init__(
        self,
        vpc_id: pulumi.Input[str],
        vpc_name: str,
        tier: Tier,
        rules: Sequence[NaclRule],
        tags: dict[str, str] | None = None,
    ) -> None:
        self.vpc_id: pulumi.Input[str] = vpc_id
        self.vpc_name: str = vpc_name
        self.tier: Tier = tier
        self.rules: list[NaclRule] = list(rules)
        self.tags: dict[str, str] = dict(tags or {})


class AwsTierAcl(pulumi.ComponentResource):
    """Network ACL plus its ordered rule entries for a single tier.

    Every rule's traffic matcher is resolved before anything is declared,
    so an unsupported protocol leaves no partial ACL behind.
    """

    def __init__(
        self,
        name: str,
        args: AwsTierAclArgs,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        traffic = [
            resolve_acl_traffic(rule.protocol, rule.start_port, rule.end_port, rule.icmp)
            for rule in args.rules
        ]

        super().__init__("tiervpc:aws:TierAcl", name, {}, opts)

        self.tier: Tier = args.tier
        self.acl_name: str = f"ACL-{args.tier}-{args.vpc_name}"

        logger.debug(
            "provisioning_tier_acl",
            extra={"name": name, "tier": str(args.tier), "rules": len(args.rules)},
        )

        self.network_acl: aws.ec2.NetworkAcl = aws.ec2.NetworkAcl(
            f"{name}-acl",
            aws.ec2.NetworkAclArgs(
                vpc_id=args.vpc_id,
                tags={**args.tags, "Name": self.acl_name},
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.entries: list[aws.ec2.NetworkAclRule] = []
        for rule, matcher in zip(args.rules, traffic):
            self.entries.append(
                aws.ec2.NetworkAclRule(
                    f"{name}-{rule.direction}-{rule.rule_number}",
                    aws.ec2.NetworkAclRuleArgs(
                        network_acl_id=self.network_acl.id,
                        rule_number=rule.rule_number,
                        egress=rule.direction == "egress",
                        rule_action=rule.rule_action,
                        protocol=matcher.protocol,
                        cidr_block=rule.cidr_block if rule.is_ipv4_block else None,
                        ipv6_cidr_block=None if rule.is_ipv4_block else rule.cidr_block,
                        from_port=matcher.from_port,
                        to_port=matcher.to_port,
                        icmp_type=matcher.icmp_type,
                        icmp_code=matcher.icmp_code,
                    ),
                    opts=pulumi.ResourceOptions(parent=self),
                )
            )

        self.register_outputs({"network_acl_id": self.network_acl.id})

    def associate_with_subnet(
        self, association_name: str, subnet: aws.ec2.Subnet
    ) -> aws.ec2.NetworkAclAssociation:
        """Bind ``subnet`` to this ACL, replacing the VPC default ACL."""
        return aws.ec2.NetworkAclAssociation(
            association_name,
            aws.ec2.NetworkAclAssociationArgs(
                network_acl_id=self.network_acl.id,
                subnet_id=subnet.id,
            ),
            opts=pulumi.ResourceOptions(parent=self),
        )
