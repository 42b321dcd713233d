from dataclasses import dataclass, field
from typing import Union

from topology.domain import decompose
from topology.pending import PendingValue
from topology.zones import ZoneReference, ZoneResolver

# Route53 hosted zone id used by every CloudFront distribution alias target.
CLOUDFRONT_HOSTED_ZONE_ID = "Z2FDTNDATAQYW2"


@dataclass(frozen=True)
class EndpointIdentity:
    domain_name: str
    routing_zone_id: str = CLOUDFRONT_HOSTED_ZONE_ID


@dataclass(frozen=True)
class AliasRecord:
    name: str
    zone: ZoneReference
    target: PendingValue = field(compare=False)
    record_type: str = "A"
    evaluate_target_health: bool = True

    @property
    def fqdn(self) -> str:
        """Absolute record name; an empty ``name`` is the zone apex."""
        zone = self.zone.zone_name.rstrip(".")
        if not self.name:
            return zone
        if self.name == zone or self.name.endswith("." + zone):
            return self.name
        return f"{self.name}.{zone}"


@dataclass(frozen=True)
class AliasRecordSet:
    root: AliasRecord
    www: AliasRecord

    def __iter__(self):
        return iter((self.root, self.www))


def build_alias_records(
    domain: str,
    target: Union[EndpointIdentity, PendingValue],
    resolver: ZoneResolver,
) -> AliasRecordSet:
    """
    Builds the root and ``www`` A-alias records for ``domain``.
    Both share one zone lookup and point at the same endpoint.
    """
    if not isinstance(target, PendingValue):
        target = PendingValue.of(target)

    parts = decompose(domain)
    zone = resolver.resolve_zone(parts.parent_zone)

    return AliasRecordSet(
        root=AliasRecord(name=parts.subdomain, zone=zone, target=target),
        www=AliasRecord(name=f"www.{domain}", zone=zone, target=target),
    )
