"""Tests for host routing and tenant signal propagation through the app."""

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from minisites.config import Settings
from minisites.middleware.sites import TenantRoutingMiddleware, get_request_context
from minisites.services.tenant_resolver import TenantResolver


def echo_app(settings, site_store, lookup_cache) -> FastAPI:
    """A bare app that reports what the middleware attached to the request."""
    app = FastAPI()
    resolver = TenantResolver(store=site_store, cache=lookup_cache, ttl_seconds=60)
    app.add_middleware(TenantRoutingMiddleware, resolver=resolver, settings=settings)

    @app.get("/{path:path}")
    async def echo(request: Request):
        context = get_request_context(request)
        return {
            "tenant": context.tenant_identity,
            "is_custom_domain": context.is_custom_domain,
            "noindex": context.should_noindex,
            "x_subdomain": request.headers.get("x-subdomain"),
            "x_is_custom_domain": request.headers.get("x-is-custom-domain"),
        }

    return app


class TestPropagation:
    """Signals on the rewritten request and on the response."""

    def test_platform_subdomain_signals(self, settings, site_store, lookup_cache):
        """Should resolve acme.platform.io to acme as a non-indexable preview."""
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://acme.platform.io")

        response = client.get("/blog")

        assert response.status_code == 200
        assert response.json() == {
            "tenant": "acme",
            "is_custom_domain": False,
            "noindex": True,
            "x_subdomain": "acme",
            "x_is_custom_domain": "false",
        }
        assert response.headers["x-subdomain"] == "acme"
        assert response.headers["x-is-custom-domain"] == "false"

    def test_cookies_mirror_signals(self, settings, site_store, lookup_cache):
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://acme.platform.io")

        response = client.get("/")

        cookies = response.headers.get_list("set-cookie")
        subdomain_cookie = next(c for c in cookies if c.startswith("subdomain="))
        custom_cookie = next(c for c in cookies if c.startswith("is_custom_domain="))
        assert subdomain_cookie.startswith("subdomain=acme;")
        assert custom_cookie.startswith("is_custom_domain=false;")
        assert "samesite=lax" in subdomain_cookie.lower()
        assert "httponly" not in subdomain_cookie.lower()
        assert "secure" not in subdomain_cookie.lower()

    def test_production_cookies_are_secure(self, site_store, lookup_cache):
        settings = Settings(_env_file=None, root_domains=["platform.io"], environment="production")
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://acme.platform.io")

        cookies = client.get("/").headers.get_list("set-cookie")

        assert all("secure" in c.lower() for c in cookies)

    def test_custom_domain_signals(self, settings, site_store, lookup_cache):
        """Should resolve www.customsite.com to its tenant as indexable."""
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://www.customsite.com")

        body = client.get("/").json()

        assert body["tenant"] == "customsite-tenant-key"
        assert body["is_custom_domain"] is True
        assert body["noindex"] is False
        assert body["x_is_custom_domain"] == "true"

    def test_root_domain_passthrough(self, settings, site_store, lookup_cache):
        """Should attach no tenant signals on the apex."""
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://platform.io")

        response = client.get("/")

        assert response.json()["tenant"] is None
        assert "x-subdomain" not in response.headers
        assert response.headers.get_list("set-cookie") == []

    def test_spoofed_signal_headers_are_dropped(self, settings, site_store, lookup_cache):
        """Should never let a client pick the tenant through request headers."""
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://platform.io")

        body = client.get("/", headers={"x-subdomain": "acme", "x-is-custom-domain": "true"}).json()

        assert body["tenant"] is None
        assert body["x_subdomain"] is None

    def test_cookie_is_not_trusted(self, settings, site_store, lookup_cache):
        """Should re-derive the tenant from the host even when a cookie says otherwise."""
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://platform.io")

        body = client.get("/", cookies={"subdomain": "acme"}).json()

        assert body["tenant"] is None


class TestLocalhostOverride:
    """?subdomain= simulation."""

    def test_override_in_development(self, settings, site_store, lookup_cache):
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://localhost:8000")

        assert client.get("/?subdomain=acme").json()["tenant"] == "acme"

    def test_no_override_passes_through(self, settings, site_store, lookup_cache):
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://localhost:8000")

        assert client.get("/").json()["tenant"] is None

    def test_non_label_override_passes_through(self, settings, site_store, lookup_cache):
        """Should ignore an override that cannot be a subdomain instead of failing."""
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://localhost:8000")

        response = client.get("/", params={"subdomain": "日本"})

        assert response.status_code == 200
        assert response.json()["tenant"] is None
        assert "x-subdomain" not in response.headers

    def test_non_label_override_on_full_app(self, client_for):
        response = client_for("localhost:8000").get("/", params={"subdomain": "日本"})

        assert response.status_code == 200
        assert "Minisite Platform" in response.text

    def test_override_disabled_in_production(self, site_store, lookup_cache):
        settings = Settings(_env_file=None, root_domains=["platform.io"], environment="production")
        client = TestClient(echo_app(settings, site_store, lookup_cache), base_url="http://localhost:8000")

        assert client.get("/?subdomain=acme").json()["tenant"] is None


class TestUnmappedCustomDomain:
    """A custom domain with no tenant."""

    def test_returns_not_connected_page(self, client_for, site_store):
        client = client_for("random-unmapped.com")

        response = client.get("/")

        assert response.status_code == 404
        assert "text/html" in response.headers["content-type"]
        assert "Domain Not Connected" in response.text
        assert "random-unmapped.com" in response.text

    def test_second_request_uses_cache(self, client_for, site_store):
        client = client_for("random-unmapped.com")

        first = client.get("/")
        second = client.get("/about")

        assert first.status_code == second.status_code == 404
        assert site_store.custom_domain_queries == ["random-unmapped.com"]

    def test_store_failure_shows_not_connected(self, client_for, site_store):
        """Should degrade to the 404 page rather than a 5xx."""
        site_store.fail_custom_domain = True

        response = client_for("customsite.com").get("/")

        assert response.status_code == 404
        assert "Domain Not Connected" in response.text


class TestVerificationPath:
    """Custom domain ownership check."""

    def test_verification_path_on_unmapped_domain(self, client_for, site_store):
        """Should answer before any routing, even for unknown domains."""
        response = client_for("random-unmapped.com").get("/.well-known/minisite-verification")

        assert response.status_code == 200
        assert response.text == "OK"
        assert response.headers["x-minisite-verification"] == "verify-me"
        assert site_store.custom_domain_queries == []
