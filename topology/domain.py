from dataclasses import dataclass

from topology.errors import InvalidDomainError


@dataclass(frozen=True)
class DomainParts:
    subdomain: str
    # Always canonical (trailing "."), e.g. "example.com."
    parent_zone: str


def decompose(domain: str) -> DomainParts:
    """
    Split a domain name into its subdomain and parent zone.

    "example.com"     -> ("", "example.com")
    "app.example.com" -> ("app", "example.com.")

    The input is used verbatim: no case folding or whitespace trimming.
    """
    labels = domain.split(".")
    if len(labels) < 2:
        raise InvalidDomainError(domain)
    if not all(labels):
        raise InvalidDomainError(domain, reason="Empty label")

    # No subdomain, e.g. awesome-website.com
    if len(labels) == 2:
        return DomainParts(subdomain="", parent_zone=domain)

    return DomainParts(subdomain=labels[0], parent_zone=".".join(labels[1:]) + ".")


def canonical(name: str) -> str:
    return name if name.endswith(".") else name + "."
