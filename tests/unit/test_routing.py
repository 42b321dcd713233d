import pytest

from topology import (
    ALL_METHODS,
    CachePolicy,
    DanglingOriginReferenceError,
    MissingPathPatternError,
    Origin,
    OriginBinding,
    OriginKind,
    build_behaviors,
    match_behavior,
    path_matches,
)

ORIGINS = [
    Origin("S3", "bucket.s3.us-east-1.amazonaws.com", kind=OriginKind.OBJECT_STORAGE),
    Origin("Compute", "api.example.com", origin_path="/prod"),
]
DEFAULT = OriginBinding("Compute", allowed_methods=ALL_METHODS, cache_policy=CachePolicy.DISABLED)


@pytest.fixture
def behaviors():
    bindings = [OriginBinding("S3", "/assets/*"), OriginBinding("S3", "/images/*")]
    return build_behaviors(bindings, DEFAULT, ORIGINS, CachePolicy.OPTIMIZED)


def test_order_is_preserved(behaviors):
    ordered, default = behaviors
    assert [b.path_pattern for b in ordered] == ["/assets/*", "/images/*"]
    assert default.origin_id == "Compute"
    assert default.path_pattern is None


def test_environment_cache_policy_is_injected(behaviors):
    ordered, default = behaviors
    assert all(b.cache_policy is CachePolicy.OPTIMIZED for b in ordered)
    # explicit override wins
    assert default.cache_policy is CachePolicy.DISABLED


@pytest.mark.parametrize("path, origin_id", [
    ("/assets/logo.png", "S3"),
    ("/assets/js/app.js", "S3"),
    ("/images/a.jpg", "S3"),
    ("/other", "Compute"),
    ("/", "Compute"),
    ("/Assets/logo.png", "Compute"),
])
def test_first_match_wins_default_last(behaviors, path, origin_id):
    ordered, default = behaviors
    assert match_behavior(path, ordered, default).origin_id == origin_id


def test_no_sorting_by_specificity():
    bindings = [OriginBinding("Compute", "/assets/*"), OriginBinding("S3", "/assets/img/*")]
    ordered, default = build_behaviors(bindings, DEFAULT, ORIGINS, CachePolicy.DISABLED)
    assert match_behavior("/assets/img/a.png", ordered, default).origin_id == "Compute"


def test_empty_bindings_default_serves_everything():
    ordered, default = build_behaviors([], DEFAULT, ORIGINS, CachePolicy.DISABLED)
    assert ordered == ()
    assert match_behavior("/assets/x", ordered, default) is default


def test_dangling_binding():
    origins = [Origin("S3Origin", "bucket.s3.amazonaws.com", kind=OriginKind.OBJECT_STORAGE)]
    with pytest.raises(DanglingOriginReferenceError) as exc:
        build_behaviors(
            [OriginBinding("CDNOrigin", "/assets/*")],
            OriginBinding("S3Origin"),
            origins,
            CachePolicy.DISABLED,
        )
    assert exc.value.origin_id == "CDNOrigin"
    assert exc.value.path_pattern == "/assets/*"


def test_dangling_default():
    with pytest.raises(DanglingOriginReferenceError, match="default behavior"):
        build_behaviors([], OriginBinding("Missing"), ORIGINS, CachePolicy.DISABLED)


@pytest.mark.parametrize("pattern, path, expected", [
    ("/favicon.ico", "/favicon.ico", True),
    ("/favicon.ico", "/faviconXico", False),
    ("/favicon.ico", "/favicon.ico.bak", False),
    ("/api/*", "/api/v1/users", True),
    ("/api/*", "/api", False),
    ("api/*", "/api/health", True),
    ("/img?.png", "/img1.png", True),
    ("/img?.png", "/img12.png", False),
    ("*.jpg", "/a/b/c.jpg", True),
])
def test_path_matches(pattern, path, expected):
    assert path_matches(pattern, path) is expected


@pytest.mark.parametrize("pattern", [None, ""])
def test_ordered_binding_requires_path_pattern(pattern):
    with pytest.raises(MissingPathPatternError) as exc:
        build_behaviors([OriginBinding("S3", pattern)], DEFAULT, ORIGINS, CachePolicy.DISABLED)
    assert exc.value.origin_id == "S3"
