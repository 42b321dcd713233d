from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from topology.aliases import AliasRecordSet, EndpointIdentity, build_alias_records
from topology.pending import PendingValue
from topology.policy import DeploymentSettings, EnvironmentPolicy, resolve_policy
from topology.routing import Origin, OriginBinding, build_behaviors, match_behavior
from topology.zones import ZoneResolver


@dataclass(frozen=True)
class DistributionTopology:
    """
    Everything the CDK layer needs to declare one CloudFront distribution
    and, in production, its Route53 aliases.

    ``endpoint`` is the distribution's own edge identity. It is pending until
    the distribution resource has been declared; the alias records point at
    this same object.
    """
    origins: Tuple[Origin, ...]
    default_behavior: OriginBinding
    ordered_behaviors: Tuple[OriginBinding, ...]
    policy: EnvironmentPolicy
    endpoint: PendingValue = field(compare=False)
    certificate_arn: Optional[str] = None
    aliases: Optional[Tuple[str, ...]] = None
    alias_records: Optional[AliasRecordSet] = None
    default_root_object: Optional[str] = None

    def origin(self, origin_id: str) -> Origin:
        return next(o for o in self.origins if o.origin_id == origin_id)

    def route(self, path: str) -> OriginBinding:
        """The behavior CloudFront would pick for a request path."""
        return match_behavior(path, self.ordered_behaviors, self.default_behavior)


class TopologyAssembler:
    """
    Composes the environment policy, origin router and alias builder into a
    DistributionTopology:
    1. Validates the settings and resolves the environment policy.
    2. Builds the ordered cache behaviors with the policy's cache policy.
    3. In production, builds root and www alias records targeting the
       distribution's (pending) endpoint.
    """

    def __init__(self, settings: DeploymentSettings, zone_resolver: ZoneResolver) -> None:
        self.settings = settings.require_complete()
        self.zone_resolver = zone_resolver

    def assemble(
        self,
        origins: Sequence[Origin],
        bindings: Sequence[OriginBinding],
        default: OriginBinding,
        default_root_object: Optional[str] = None,
        name: str = "distribution",
    ) -> DistributionTopology:
        policy = resolve_policy(self.settings.environment)

        ordered, default_behavior = build_behaviors(bindings, default, origins, policy.cache_policy)

        endpoint = PendingValue(f"endpoint of {name}")
        aliases = None
        alias_records = None
        certificate_arn = None
        if policy.create_aliases:
            domain = self.settings.target_domain
            alias_records = build_alias_records(domain, endpoint, self.zone_resolver)
            aliases = (domain, f"www.{domain}")
            certificate_arn = self.settings.certificate_arn

        return DistributionTopology(
            origins=tuple(origins),
            default_behavior=default_behavior,
            ordered_behaviors=ordered,
            policy=policy,
            endpoint=endpoint,
            certificate_arn=certificate_arn,
            aliases=aliases,
            alias_records=alias_records,
            default_root_object=default_root_object,
        )


def bind_endpoint(topology: DistributionTopology, domain_name: str, routing_zone_id: Optional[str] = None) -> EndpointIdentity:
    """Second phase: binds the distribution's assigned edge identity."""
    if routing_zone_id is None:
        identity = EndpointIdentity(domain_name=domain_name)
    else:
        identity = EndpointIdentity(domain_name=domain_name, routing_zone_id=routing_zone_id)
    topology.endpoint.resolve(identity)
    return identity
