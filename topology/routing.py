import enum
import re
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from topology.errors import DanglingOriginReferenceError, MissingPathPatternError
from topology.policy import CachePolicy, OriginRequestPolicy


class HttpMethod(enum.Enum):
    DELETE = "DELETE"
    GET = "GET"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    POST = "POST"
    PUT = "PUT"


# The only method sets a CloudFront cache behavior accepts.
GET_HEAD = (HttpMethod.GET, HttpMethod.HEAD)
GET_HEAD_OPTIONS = (HttpMethod.GET, HttpMethod.HEAD, HttpMethod.OPTIONS)
ALL_METHODS = tuple(HttpMethod)


class OriginKind(enum.Enum):
    OBJECT_STORAGE = "object-storage"
    CUSTOM = "custom"


class OriginProtocol(enum.Enum):
    HTTPS_ONLY = "https-only"
    HTTP_ONLY = "http-only"


@dataclass(frozen=True)
class Origin:
    origin_id: str
    domain_name: str
    kind: OriginKind = OriginKind.CUSTOM
    origin_path: Optional[str] = None
    protocol: OriginProtocol = OriginProtocol.HTTPS_ONLY


@dataclass(frozen=True)
class OriginBinding:
    """
    One cache behavior. ``path_pattern`` is None for the default behavior;
    ``cache_policy`` None means "use the environment's cache policy".
    """
    origin_id: str
    path_pattern: Optional[str] = None
    allowed_methods: Tuple[HttpMethod, ...] = GET_HEAD
    cached_methods: Tuple[HttpMethod, ...] = GET_HEAD
    compress: bool = True
    cache_policy: Optional[CachePolicy] = None
    origin_request_policy: Optional[OriginRequestPolicy] = None


def build_behaviors(
    bindings: Sequence[OriginBinding],
    default: OriginBinding,
    origins: Sequence[Origin],
    cache_policy: CachePolicy,
) -> Tuple[Tuple[OriginBinding, ...], OriginBinding]:
    """
    Returns ``(ordered_behaviors, default_behavior)``.

    Bindings keep the caller's order (first match wins at the edge, so more
    specific patterns must come first). Every binding without an explicit
    cache policy gets ``cache_policy``.
    """
    declared = {origin.origin_id for origin in origins}

    def bind(binding: OriginBinding) -> OriginBinding:
        if binding.origin_id not in declared:
            raise DanglingOriginReferenceError(binding.origin_id, binding.path_pattern, declared)
        if binding.cache_policy is None:
            binding = replace(binding, cache_policy=cache_policy)
        return binding

    ordered = []
    for binding in bindings:
        if not binding.path_pattern:
            raise MissingPathPatternError(binding.origin_id)
        ordered.append(bind(binding))
    return tuple(ordered), bind(replace(default, path_pattern=None))


def _pattern_regex(pattern: str):
    # CloudFront wildcards: "*" is any run of characters (slashes included), "?" is one.
    body = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(body + r"\Z")


def path_matches(pattern: str, path: str) -> bool:
    # Patterns may omit the leading slash ("api/*" == "/api/*").
    if not pattern.startswith("/"):
        pattern = "/" + pattern
    return _pattern_regex(pattern).match(path) is not None


def match_behavior(path: str, ordered: Sequence[OriginBinding], default: OriginBinding) -> OriginBinding:
    for binding in ordered:
        if path_matches(binding.path_pattern, path):
            return binding
    return default
