"""Exceptions raised while loading configuration or building the network."""

from __future__ import annotations


class TopologyError(Exception):
    """Base class for every fatal build error."""


class ConfigReadFailure(TopologyError):
    """A configuration document is missing, unparseable, or invalid."""


class AccountNotFound(TopologyError):
    """The requested account name is absent from the account directory."""


class AclRuleError(TopologyError):
    """A network ACL rule cannot be translated into an ACL entry."""


class InvalidProtocol(AclRuleError):
    """The rule references a protocol code outside ``-1, 1, 6, 17, 53``."""

    def __init__(self, protocol: str) -> None:
        super().__init__(f"ACL protocol must be one of [1, 6, 17, 53, -1], got {protocol!r}")
        self.protocol: str = protocol


class MissingPortRange(AclRuleError):
    """A TCP or UDP rule was declared without a start and end port."""


class MissingNatGateway(TopologyError):
    """A private subnet has no NAT gateway to route through."""

    def __init__(self, zone: str) -> None:
        super().__init__(
            f"No NAT gateway available for private subnet in zone {zone!r}; "
            "declare at least one public subnet"
        )
        self.zone: str = zone


class DuplicateNatGateway(TopologyError):
    """A second NAT gateway was requested for a zone that already has one."""

    def __init__(self, zone: str) -> None:
        super().__init__(f"NAT gateway already registered for zone {zone!r}")
        self.zone: str = zone
