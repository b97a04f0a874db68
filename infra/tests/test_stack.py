"""Tests for the stack entry point wiring configuration into the network."""
from __future__ import annotations

import shutil
from pathlib import Path

import pulumi
import pytest
from pulumi.runtime import Mocks


class StackMocks(Mocks):
    def new_resource(
        self, args: pulumi.runtime.MockResourceArgs
    ) -> tuple[str, dict[str, object]]:
        return (f"{args.name}-id", args.inputs)

    def call(
        self, args: pulumi.runtime.MockCallArgs
    ) -> tuple[dict[str, object], list[tuple[str, str]]]:
        return ({}, [])


pulumi.runtime.set_mocks(StackMocks())

from tiervpc_infra.__main__ import TieredVpcStack  # noqa: E402
from tiervpc_infra.components.network import Tier  # noqa: E402
from tiervpc_infra.config import StackConfig  # noqa: E402
from tiervpc_infra.errors import AccountNotFound, ConfigReadFailure  # noqa: E402

SAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "config"


def _config(folder: Path, **overrides: object) -> StackConfig:
    settings: dict[str, object] = {
        "config_folder": folder,
        "environment_name": "test",
        "account_name": "sandpit1",
        "region": "ap-southeast-2",
    }
    settings.update(overrides)
    return StackConfig(**settings)  # type: ignore[arg-type]


def test_build_resolves_account_and_network() -> None:
    stack = TieredVpcStack(_config(SAMPLE_CONFIG), name="test-stack")
    network = stack.build()
    assert stack.account_id == "123456789012"
    assert len(network.subnets[Tier.PUBLIC]) == 2
    assert len(network.subnets[Tier.PRIVATE]) == 2
    assert len(network.subnets[Tier.DATA]) == 2
    assert list(network.nat_gateways.gateways) == ["a"]


def test_build_unknown_account_fails(tmp_path: Path) -> None:
    shutil.copy(SAMPLE_CONFIG / "aws_account.yaml", tmp_path / "aws_account.yaml")
    with pytest.raises(AccountNotFound):
        TieredVpcStack(_config(tmp_path, account_name="missing"), name="test-stack-account").build()


def test_build_missing_vpc_document_fails(tmp_path: Path) -> None:
    shutil.copy(SAMPLE_CONFIG / "aws_account.yaml", tmp_path / "aws_account.yaml")
    with pytest.raises(ConfigReadFailure):
        TieredVpcStack(_config(tmp_path, region="us-east-1"), name="test-stack-doc").build()


@pulumi.runtime.test
def test_build_tags_resources_with_stack_tags() -> None:
    config = _config(SAMPLE_CONFIG, environment_name="ci")
    network = TieredVpcStack(config, name="test-stack-tags").build()

    def check(tags: dict[str, str]) -> None:
        assert tags["environment"] == "ci"
        assert tags["createdvia"] == "Pulumi"
        assert tags["Name"] == "IGW-SANDPIT1-VPC"

    return network.internet_gateway.tags.apply(check)
