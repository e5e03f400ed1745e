"""
Domain Classifier for Minisites

Sorts an incoming Host header into one of the routing categories:
platform root, platform subdomain, custom domain candidate, or unresolvable.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

LOCALHOST_MARKER = "localhost"

# A single DNS label; anything else in ?subdomain= is ignored
SUBDOMAIN_LABEL = re.compile(r"[a-z0-9-]{1,63}", re.IGNORECASE | re.ASCII)


@dataclass(frozen=True)
class RootDomain:
    """A domain operated by the platform itself. No tenant."""


@dataclass(frozen=True)
class PlatformSubdomain:
    """<subdomain>.<root domain>; the label is the tenant key."""
    subdomain: str


@dataclass(frozen=True)
class CustomDomainCandidate:
    """A host the platform does not own; may map to a tenant's custom domain."""
    hostname: str


@dataclass(frozen=True)
class Unresolvable:
    """Nothing to route on (empty host, or localhost without an override)."""
    reason: str = ""


DomainClassification = Union[RootDomain, PlatformSubdomain, CustomDomainCandidate, Unresolvable]


def strip_port(hostname: str) -> str:
    """Drop a trailing :port, leaving bracketed IPv6 literals intact."""
    if hostname.startswith("["):
        end = hostname.find("]")
        return hostname[:end + 1] if end != -1 else hostname
    return hostname.split(":", 1)[0]


def normalize_custom_domain(hostname: str) -> str:
    """Cache and lookup key for a custom domain: lowercase, no port, no www."""
    host = strip_port(hostname.strip().lower())
    if host.startswith("www."):
        host = host[len("www."):]
    return host


def classify(
    hostname: str,
    root_domains: Sequence[str],
    subdomain_override: Optional[str] = None
) -> DomainClassification:
    """Classify a raw Host header value.

    Args:
        hostname: Host header as received (port allowed).
        root_domains: Platform domains in configuration order.
        subdomain_override: ``?subdomain=`` query value; only honored on
            localhost, where it simulates a platform subdomain. Values that
            are not a single DNS label are treated as absent.
    """
    host = strip_port(hostname.strip())
    if not host:
        return Unresolvable("empty host")

    for root in root_domains:
        if host == root or host == f"www.{root}":
            return RootDomain()

    if LOCALHOST_MARKER in host:
        if subdomain_override and SUBDOMAIN_LABEL.fullmatch(subdomain_override):
            return PlatformSubdomain(subdomain_override)
        return Unresolvable("localhost without subdomain override")

    # Longest root first; equal lengths keep configuration order.
    for root in sorted(root_domains, key=len, reverse=True):
        suffix = f".{root}"
        if not host.endswith(suffix):
            continue
        label = host[:-len(suffix)]
        if label and "." not in label:
            return PlatformSubdomain(label)

    return CustomDomainCandidate(host)
