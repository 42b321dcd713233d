from typing import Generic, Optional, TypeVar

from topology.errors import PendingValueAlreadyResolvedError, UnresolvedValueError

T = TypeVar("T")

_UNSET = object()


class PendingValue(Generic[T]):
    """
    A forward reference to a value that only exists once a resource has been
    declared (e.g. the domain name CloudFront assigns to a distribution).

    The value is bound exactly once with ``resolve``; reading it earlier with
    ``get`` raises ``UnresolvedValueError``.
    """

    def __init__(self, description: str) -> None:
        self.description = description
        self._value = _UNSET

    @classmethod
    def of(cls, value: T, description: Optional[str] = None) -> "PendingValue[T]":
        pending = cls(description or repr(value))
        pending.resolve(value)
        return pending

    @property
    def resolved(self) -> bool:
        return self._value is not _UNSET

    def resolve(self, value: T) -> None:
        if self.resolved:
            raise PendingValueAlreadyResolvedError(
                f"❌ '{self.description}' was already resolved"
            )
        self._value = value

    def get(self) -> T:
        if not self.resolved:
            raise UnresolvedValueError(
                f"❌ '{self.description}' is not known yet; "
                "declare the resource that provides it first"
            )
        return self._value

    def __repr__(self) -> str:
        state = repr(self._value) if self.resolved else "<pending>"
        return f"PendingValue({self.description!r}, {state})"
