"""Typed models and loaders for the account directory and VPC documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator

from tiervpc_infra.errors import AccountNotFound, ConfigReadFailure

logger: logging.Logger = logging.getLogger(__name__)


class _Document(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AccountRecord(_Document):
    """One row of the account directory."""

    name: str
    account_id: str

    @field_validator("account_id", mode="before")
    @classmethod
    def _account_id_as_text(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class SubnetConfig(_Document):
    """One subnet declaration.

    ``availability_zone`` is the zone suffix (``a``, ``b``...) appended to
    the stack region.
    """

    availability_zone: str = Field(alias="availabilityZone")
    ip_address: str = Field(alias="ipAddress")
    map_public_ip_on_launch: bool = Field(default=False, alias="mapPublicIpOnLaunch")

    @property
    def zone(self) -> str:
        """Return the normalised zone key."""
        return self.availability_zone.lower()


class IcmpConfig(_Document):
    """ICMP type and code; ``-1`` matches any."""

    type: int = -1
    code: int = -1


class NaclRule(_Document):
    """One network ACL entry as declared in the VPC document."""

    rule_number: int = Field(alias="ruleNumber")
    rule_action: Literal["allow", "deny"] = Field(alias="ruleAction")
    is_ipv4_block: bool = Field(alias="isIpV4Block")
    cidr_block: str = Field(alias="cidrBlock")
    protocol: str
    start_port: int | None = Field(default=None, alias="startPort")
    end_port: int | None = Field(default=None, alias="endPort")
    icmp: IcmpConfig | None = None
    direction: Literal["ingress", "egress"]

    @field_validator("protocol", mode="before")
    @classmethod
    def _protocol_as_text(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value


class VpcConfig(_Document):
    """Full declaration of one tiered VPC."""

    vpc_name: str = Field(alias="vpcName")
    ip_addresses: str = Field(alias="ipAddresses")
    enable_per_az_nat_gateway: bool = False
    public_subnets: tuple[SubnetConfig, ...] = Field(default=(), alias="publicSubnets")
    private_subnets: tuple[SubnetConfig, ...] = Field(default=(), alias="privateSubnets")
    data_subnets: tuple[SubnetConfig, ...] = Field(default=(), alias="dataSubnets")
    public_subnet_nacls: tuple[NaclRule, ...] = Field(default=(), alias="publicSubnetNACLs")
    private_subnet_nacls: tuple[NaclRule, ...] = Field(default=(), alias="privateSubnetNACLs")
    data_subnet_nacls: tuple[NaclRule, ...] = Field(default=(), alias="dataSubnetNACLs")

    @model_validator(mode="after")
    def _zones_unique_per_tier(self) -> VpcConfig:
        for tier, subnets in (
            ("public", self.public_subnets),
            ("private", self.private_subnets),
            ("data", self.data_subnets),
        ):
            zones = [subnet.zone for subnet in subnets]
            duplicates = sorted({zone for zone in zones if zones.count(zone) > 1})
            if duplicates:
                raise ValueError(f"{tier} subnets declare availability zone(s) more than once: {duplicates}")
        return self


_ACCOUNT_DIRECTORY: TypeAdapter[list[AccountRecord]] = TypeAdapter(list[AccountRecord])


def _read_yaml(path: Path) -> object:
    try:
        with path.open(encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigReadFailure(f"Cannot read configuration document {path}: {exc}") from exc


def load_account_id(account_name: str, path: Path) -> str:
    """Resolve an account name to its account id using the account directory.

    Raises ``ConfigReadFailure`` when the directory cannot be read and
    ``AccountNotFound`` when the name is not listed.
    """
    try:
        accounts = _ACCOUNT_DIRECTORY.validate_python(_read_yaml(path))
    except ValidationError as exc:
        raise ConfigReadFailure(f"Invalid account directory {path}: {exc}") from exc

    for account in accounts:
        if account.name == account_name:
            logger.debug("account_resolved", extra={"account_name": account_name})
            return account.account_id
    raise AccountNotFound(f"Cannot get account id from account name {account_name!r}")


def load_vpc_config(path: Path) -> VpcConfig:
    """Load and validate one VPC document."""
    try:
        config = VpcConfig.model_validate(_read_yaml(path))
    except ValidationError as exc:
        raise ConfigReadFailure(f"Invalid VPC document {path}: {exc}") from exc

    logger.debug(
        "vpc_config_loaded",
        extra={
            "vpc_name": config.vpc_name,
            "public_subnets": len(config.public_subnets),
            "private_subnets": len(config.private_subnets),
            "data_subnets": len(config.data_subnets),
            "per_az_nat": config.enable_per_az_nat_gateway,
        },
    )
    return config
