"""Typed configuration loaded from environment variables at startup."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

logger: logging.Logger = logging.getLogger(__name__)

ACCOUNT_DIRECTORY_FILE = "aws_account.yaml"


class StackConfig(BaseSettings):
    """Fully validated stack configuration.

    All values are sourced from environment variables at startup and fall
    back to the sandpit defaults when unset.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment_name: str = "kate"
    account_name: str = "sandpit1"
    region: str = "ap-southeast-2"
    config_folder: Path = Path("config")
    created_by: str = "KateVu"
    repo_url: str = "https://github.com/KateVu/aws-cdk-vpc"

    @property
    def stack_name(self) -> str:
        """Return the deployed stack name for this environment."""
        return f"vpc-{self.environment_name}"

    @property
    def account_directory_path(self) -> Path:
        """Return the path of the account directory document."""
        return self.config_folder / ACCOUNT_DIRECTORY_FILE

    @property
    def vpc_document_path(self) -> Path:
        """Return the path of the VPC document for this account and region."""
        return self.config_folder / f"{self.account_name}-{self.region}.yaml"

    def stack_tags(self) -> dict[str, str]:
        """Return the tags applied to every taggable resource in the stack."""
        tags = {
            "createdby": self.created_by,
            "createdvia": "Pulumi",
            "environment": self.environment_name,
        }
        if self.repo_url:
            tags["repo"] = self.repo_url
        return tags

    @classmethod
    def load(cls) -> StackConfig:
        """Load and validate configuration from the environment.

        Logs each resolved setting at DEBUG level.
        Raises ``pydantic.ValidationError`` on invalid values.
        """
        config = cls()
        logger.debug(
            "stack_config_loaded",
            extra={
                "environment_name": config.environment_name,
                "account_name": config.account_name,
                "region": config.region,
                "config_folder": str(config.config_folder),
            },
        )
        return config
