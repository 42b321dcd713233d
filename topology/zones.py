from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping

from topology.domain import canonical
from topology.errors import ZoneLookupError


@dataclass(frozen=True)
class ZoneReference:
    zone_id: str
    zone_name: str


class ZoneResolver(ABC):
    """
    Looks up the authoritative hosted zone for a parent zone name.
    Read-only; failures are raised to the caller as-is (no retry, no cache).
    """

    @abstractmethod
    def resolve_zone(self, parent_zone: str) -> ZoneReference:
        ...


class StaticZoneResolver(ZoneResolver):
    """
    Resolves zones from a fixed ``zone name -> hosted zone id`` table,
    e.g. the ``<STAGE>_HOSTED_ZONES`` setting.
    """

    def __init__(self, zones: Mapping[str, str]) -> None:
        self.zones = {canonical(name): zone_id for name, zone_id in zones.items()}

    def resolve_zone(self, parent_zone: str) -> ZoneReference:
        zone_name = canonical(parent_zone)
        zone_id = self.zones.get(zone_name)
        if not zone_id:
            raise ZoneLookupError(parent_zone)
        return ZoneReference(zone_id=zone_id, zone_name=zone_name)
