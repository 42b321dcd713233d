from topology.aliases import (
    CLOUDFRONT_HOSTED_ZONE_ID,
    AliasRecord,
    AliasRecordSet,
    EndpointIdentity,
    build_alias_records,
)
from topology.assembler import DistributionTopology, TopologyAssembler, bind_endpoint
from topology.domain import DomainParts, decompose
from topology.errors import (
    DanglingOriginReferenceError,
    InvalidDomainError,
    MissingConfigurationError,
    MissingPathPatternError,
    PendingValueAlreadyResolvedError,
    TopologyError,
    UnresolvedValueError,
    ZoneLookupError,
)
from topology.pending import PendingValue
from topology.policy import (
    CachePolicy,
    CertificateSource,
    DeploymentSettings,
    EnvironmentPolicy,
    EnvironmentTag,
    OriginRequestPolicy,
    resolve_policy,
)
from topology.routing import (
    ALL_METHODS,
    GET_HEAD,
    GET_HEAD_OPTIONS,
    HttpMethod,
    Origin,
    OriginBinding,
    OriginKind,
    OriginProtocol,
    build_behaviors,
    match_behavior,
    path_matches,
)
from topology.zones import StaticZoneResolver, ZoneReference, ZoneResolver
