import pytest

from topology import (
    EndpointIdentity,
    PendingValue,
    PendingValueAlreadyResolvedError,
    UnresolvedValueError,
)


def test_get_before_resolve_fails():
    pending = PendingValue("endpoint of distribution")
    assert not pending.resolved
    with pytest.raises(UnresolvedValueError, match="endpoint of distribution"):
        pending.get()


def test_resolves_exactly_once():
    pending = PendingValue("endpoint")
    identity = EndpointIdentity("d111.cloudfront.net")
    pending.resolve(identity)

    assert pending.resolved
    assert pending.get() is identity
    with pytest.raises(PendingValueAlreadyResolvedError):
        pending.resolve(EndpointIdentity("d222.cloudfront.net"))
    assert pending.get() is identity


def test_of_is_already_resolved():
    assert PendingValue.of(42).get() == 42
