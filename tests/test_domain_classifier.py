"""Tests for hostname classification."""

import pytest

from minisites.services.domain_classifier import (
    CustomDomainCandidate,
    PlatformSubdomain,
    RootDomain,
    Unresolvable,
    classify,
    normalize_custom_domain,
    strip_port,
)

ROOTS = ["platform.io", "minisite-nextjs.vercel.app"]


class TestRootDomains:
    """Exact root domain matches."""

    @pytest.mark.parametrize("host", ["platform.io", "www.platform.io", "minisite-nextjs.vercel.app"])
    def test_root_and_www_root_are_root(self, host):
        """Should classify the apex and its www alias as the platform root."""
        assert classify(host, ROOTS) == RootDomain()

    def test_port_is_ignored(self):
        """Should treat platform.io:443 like platform.io."""
        assert classify("platform.io:443", ROOTS) == RootDomain()

    def test_root_match_is_case_sensitive(self):
        """Should not treat a differently cased apex as the root."""
        assert classify("Platform.io", ROOTS) == CustomDomainCandidate("Platform.io")

    def test_root_takes_priority_over_suffix_rules(self):
        """Should prefer the exact match when a root is also a subdomain of another root."""
        roots = ["platform.io", "shop.platform.io"]
        assert classify("shop.platform.io", roots) == RootDomain()


class TestPlatformSubdomains:
    """<label>.<root> hosts."""

    @pytest.mark.parametrize("label", ["acme", "my-blog", "a1"])
    def test_single_label_is_subdomain(self, label):
        """Should extract the leading label as the tenant key."""
        assert classify(f"{label}.platform.io", ROOTS) == PlatformSubdomain(label)

    def test_subdomain_with_port(self):
        """Should drop the port before matching."""
        assert classify("acme.platform.io:8080", ROOTS) == PlatformSubdomain("acme")

    def test_multi_label_prefix_is_custom_domain(self):
        """Should not treat a.b.platform.io as a platform subdomain."""
        assert classify("a.b.platform.io", ROOTS) == CustomDomainCandidate("a.b.platform.io")

    def test_longest_root_wins(self):
        """Should match the most specific configured root regardless of order."""
        roots = ["platform.io", "shop.platform.io"]
        assert classify("acme.shop.platform.io", roots) == PlatformSubdomain("acme")
        assert classify("acme.shop.platform.io", list(reversed(roots))) == PlatformSubdomain("acme")

    def test_suffix_must_be_dot_separated(self):
        """Should not match evilplatform.io against platform.io."""
        assert classify("evilplatform.io", ROOTS) == CustomDomainCandidate("evilplatform.io")


class TestLocalhost:
    """Development simulation through ?subdomain=."""

    def test_override_on_localhost(self):
        """Should use the query parameter as the subdomain."""
        assert classify("localhost:8000", ROOTS, subdomain_override="acme") == PlatformSubdomain("acme")

    def test_localhost_without_override(self):
        """Should be unresolvable without an override."""
        assert isinstance(classify("localhost:8000", ROOTS), Unresolvable)

    @pytest.mark.parametrize("override", ["日本", "a.b", "a b", "x" * 64, "\u212a"])
    def test_override_must_be_single_label(self, override):
        """Should treat an override that is not a DNS label as absent."""
        assert isinstance(classify("localhost:8000", ROOTS, subdomain_override=override), Unresolvable)

    def test_override_ignored_elsewhere(self):
        """Should not honor the override on real hostnames."""
        assert classify("customsite.com", ROOTS, subdomain_override="acme") == CustomDomainCandidate("customsite.com")


class TestCustomDomains:
    """Everything else."""

    @pytest.mark.parametrize("host", ["customsite.com", "www.customsite.com", "blog.example.org"])
    def test_unknown_hosts_are_custom_candidates(self, host):
        """Should classify non-platform hosts as custom domain candidates."""
        assert classify(host, ROOTS) == CustomDomainCandidate(host)

    def test_empty_host_is_unresolvable(self):
        """Should not try to route an empty host."""
        assert isinstance(classify("", ROOTS), Unresolvable)


class TestNormalization:
    """Custom domain cache keys."""

    @pytest.mark.parametrize(
        "host,expected",
        [
            ("www.CustomSite.com", "customsite.com"),
            ("customsite.com:443", "customsite.com"),
            ("WWW.customsite.com:80", "customsite.com"),
            ("shop.customsite.com", "shop.customsite.com"),
        ],
    )
    def test_normalize_custom_domain(self, host, expected):
        """Should lowercase, drop the port and one leading www."""
        assert normalize_custom_domain(host) == expected

    def test_strip_port_keeps_ipv6_literal(self):
        """Should keep bracketed IPv6 hosts intact."""
        assert strip_port("[::1]:8000") == "[::1]"
