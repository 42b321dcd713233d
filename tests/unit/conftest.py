import pytest

from config import EnvConfig
from topology import DeploymentSettings, EnvironmentTag

CERT_ARN = "arn:aws:acm:us-east-1:123456789012:certificate/abc"


@pytest.fixture
def dev_config():
    settings = DeploymentSettings(EnvironmentTag.NON_PRODUCTION)
    return EnvConfig(
        name="dev",
        account=None,
        region=None,
        serverless=settings,
        container=settings,
        container_image="repo/app:latest",
    )


@pytest.fixture
def prod_config():
    return EnvConfig(
        name="prod",
        account=None,
        region=None,
        serverless=DeploymentSettings(EnvironmentTag.PRODUCTION, "app.example.com", CERT_ARN),
        container=DeploymentSettings(EnvironmentTag.PRODUCTION, "gpt.example.com", CERT_ARN),
        container_image="repo/app:latest",
        hosted_zones={"example.com": "Z0EXAMPLE"},
    )
