class TopologyError(Exception):
    """
    Base class for every error raised while resolving a distribution topology.
    Nothing here is recovered locally: an error aborts the whole assembly.
    """


class InvalidDomainError(TopologyError):
    def __init__(self, domain: str, reason: str = "No TLD found") -> None:
        super().__init__(f"❌ INVALID DOMAIN: {reason} on '{domain}'")
        self.domain = domain


class ZoneLookupError(TopologyError):
    def __init__(self, zone_name: str, reason: str = "hosted zone not found") -> None:
        super().__init__(f"❌ ZONE LOOKUP FAILED: {reason} for '{zone_name}'")
        self.zone_name = zone_name


class DanglingOriginReferenceError(TopologyError):
    def __init__(self, origin_id: str, path_pattern, declared) -> None:
        where = path_pattern if path_pattern is not None else "default behavior"
        super().__init__(
            f"❌ DANGLING ORIGIN: '{where}' targets '{origin_id}', "
            f"declared origins are {sorted(declared)}"
        )
        self.origin_id = origin_id
        self.path_pattern = path_pattern


class MissingConfigurationError(TopologyError):
    def __init__(self, *keys: str) -> None:
        names = ", ".join(f"'{k}'" for k in keys)
        super().__init__(f"❌ MISSING CONFIG: Required setting {names} not provided")
        self.keys = keys


class MissingPathPatternError(TopologyError):
    def __init__(self, origin_id: str) -> None:
        super().__init__(
            f"❌ MISSING PATH PATTERN: ordered behavior for '{origin_id}' has no path pattern; "
            "only the default behavior may omit it"
        )
        self.origin_id = origin_id


class UnresolvedValueError(TopologyError):
    pass


class PendingValueAlreadyResolvedError(TopologyError):
    pass
