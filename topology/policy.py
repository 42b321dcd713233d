import enum
from dataclasses import dataclass
from typing import Optional

from topology.errors import MissingConfigurationError

PRODUCTION_STAGE = "prod"


class EnvironmentTag(enum.Enum):
    PRODUCTION = "production"
    NON_PRODUCTION = "non-production"

    @classmethod
    def from_stage(cls, stage: str) -> "EnvironmentTag":
        # Only the literal "prod" stage is production.
        return cls.PRODUCTION if stage == PRODUCTION_STAGE else cls.NON_PRODUCTION


class CertificateSource(enum.Enum):
    ACM = "acm"
    PROVIDER_DEFAULT = "provider-default"


class CachePolicy(enum.Enum):
    DISABLED = "caching-disabled"
    OPTIMIZED = "caching-optimized"


class OriginRequestPolicy(enum.Enum):
    ALL_VIEWER_EXCEPT_HOST_HEADER = "all-viewer-except-host-header"


@dataclass(frozen=True)
class EnvironmentPolicy:
    certificate_source: CertificateSource
    cache_policy: CachePolicy
    create_aliases: bool


_POLICIES = {
    EnvironmentTag.PRODUCTION: EnvironmentPolicy(
        certificate_source=CertificateSource.ACM,
        cache_policy=CachePolicy.OPTIMIZED,
        create_aliases=True,
    ),
    EnvironmentTag.NON_PRODUCTION: EnvironmentPolicy(
        certificate_source=CertificateSource.PROVIDER_DEFAULT,
        cache_policy=CachePolicy.DISABLED,
        create_aliases=False,
    ),
}


def resolve_policy(env: EnvironmentTag) -> EnvironmentPolicy:
    return _POLICIES[env]


@dataclass(frozen=True)
class DeploymentSettings:
    """
    Per-deployment inputs of the resolver. Passed by value into the
    assembler; ``target_domain`` and ``certificate_arn`` are only required
    in production.
    """
    environment: EnvironmentTag
    target_domain: Optional[str] = None
    certificate_arn: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment is EnvironmentTag.PRODUCTION

    def require_complete(self) -> "DeploymentSettings":
        if self.is_production:
            missing = [
                key for key, value in (
                    ("targetDomain", self.target_domain),
                    ("certificateArn", self.certificate_arn),
                ) if not value
            ]
            if missing:
                raise MissingConfigurationError(*missing)
        return self
