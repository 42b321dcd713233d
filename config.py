import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import tldextract
from dotenv import load_dotenv
from aws_cdk import RemovalPolicy

from topology import (
    DeploymentSettings,
    EnvironmentTag,
    InvalidDomainError,
    MissingConfigurationError,
)

# Load environment variables from a .env file
load_dotenv()

# Bundled public suffix snapshot only: synth must not depend on network access.
_extract = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())

DEFAULT_SSM_PREFIX = "/context-gpt"


@dataclass(frozen=True)
class EnvConfig:
    """
    Stores stage-specific configuration for the CDK stacks.
    Immutable: each stack receives it by value at construction time.
    """
    name: str
    account: Optional[str]
    region: Optional[str]
    serverless: DeploymentSettings
    container: DeploymentSettings
    container_image: str
    ssm_prefix: str = DEFAULT_SSM_PREFIX
    hosted_zones: Dict[str, str] = field(default_factory=dict)
    client_assets_path: Optional[str] = None
    static_export_path: Optional[str] = None

    @property
    def environment(self) -> EnvironmentTag:
        return EnvironmentTag.from_stage(self.name)

    # Data Lifecycle Policy:
    # In 'prod', we retain buckets and disable auto-delete to prevent data loss.
    # In other environments, we clean up to save costs.
    @property
    def removal_policy(self) -> RemovalPolicy:
        if self.environment is EnvironmentTag.PRODUCTION:
            return RemovalPolicy.RETAIN
        return RemovalPolicy.DESTROY

    @property
    def auto_delete_objects(self) -> bool:
        return self.environment is not EnvironmentTag.PRODUCTION


def get_required_env(key: str) -> str:
    """
    Retrieves a required environment variable or raises MissingConfigurationError.
    """
    value = os.getenv(key)
    if not value:
        raise MissingConfigurationError(key)
    return value


def validate_domain(domain: Optional[str]) -> Optional[str]:
    """
    Rejects domains without a recognised public suffix (e.g. 'localhost').
    """
    if domain is None:
        return None
    if not _extract(domain).suffix:
        raise InvalidDomainError(domain, reason="No public suffix found")
    return domain


def parse_hosted_zones(raw: Optional[str]) -> Dict[str, str]:
    """
    'example.com=Z123,example.org=Z456' -> {'example.com': 'Z123', 'example.org': 'Z456'}
    """
    zones = {}
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, _, zone_id = entry.partition("=")
        if not zone_id:
            raise MissingConfigurationError(f"hosted zone id for '{name}'")
        zones[name.strip()] = zone_id.strip()
    return zones


def get_site_settings(prefix: str, site: str, environment: EnvironmentTag) -> DeploymentSettings:
    # Domains and certificates are not read (nor validated) outside production.
    if environment is not EnvironmentTag.PRODUCTION:
        return DeploymentSettings(environment=environment)

    domain = get_required_env(f"{prefix}_{site}_DOMAIN_NAME")
    certificate_arn = get_required_env(f"{prefix}_{site}_CERTIFICATE_ARN")

    return DeploymentSettings(
        environment=environment,
        target_domain=validate_domain(domain),
        certificate_arn=certificate_arn,
    ).require_complete()


def get_config(scope) -> EnvConfig:
    """
    Factory function to generate the EnvConfig object based on CDK context.
    Usage: cdk deploy -c env=prod
    """
    # Default to 'dev' environment if no context is provided
    env_name = scope.node.try_get_context("env") or "dev"
    prefix = env_name.upper()
    environment = EnvironmentTag.from_stage(env_name)

    print(f"🔍 Initializing CDK Infrastructure for environment: {prefix} ({environment.value})")

    # Load Mandatory Variables
    account = get_required_env(f"{prefix}_ACCOUNT")
    region = get_required_env(f"{prefix}_REGION")
    container_image = get_required_env(f"{prefix}_CONTAINER_IMAGE")

    # Production-only settings are validated here, before any stack exists
    serverless = get_site_settings(prefix, "SERVERLESS", environment)
    container = get_site_settings(prefix, "CONTAINER", environment)

    # Load Optional Variables
    hosted_zones = parse_hosted_zones(os.getenv(f"{prefix}_HOSTED_ZONES"))

    return EnvConfig(
        name=env_name,
        account=account,
        region=region,
        serverless=serverless,
        container=container,
        container_image=container_image,
        ssm_prefix=os.getenv(f"{prefix}_SSM_PREFIX") or DEFAULT_SSM_PREFIX,
        hosted_zones=hosted_zones,
        client_assets_path=os.getenv(f"{prefix}_CLIENT_ASSETS_PATH"),
        static_export_path=os.getenv(f"{prefix}_STATIC_EXPORT_PATH"),
    )
