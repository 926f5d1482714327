"""Tests for the identity gate and its two resolvers."""

from __future__ import annotations

import json
import time
from datetime import timedelta

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa
from django.test import RequestFactory, TestCase
from jwt.algorithms import RSAAlgorithm

from apps.users.identity import (
    OpaqueSessionResolver,
    Role,
    SignedAssertionResolver,
    SigningKeyCache,
    candidate_credentials,
    extract_credential,
    resolve_role,
)
from apps.users.models import AuthSession
from apps.users.tests.factories import make_accommodation, make_admin, make_team_member

JWKS_URL = "https://issuer.example.com/.well-known/jwks.json"


def _rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _jwk(private_key, kid: str) -> dict:
    jwk = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
    jwk.update({"kid": kid, "use": "sig", "alg": "RS256"})
    return jwk


class FakeJWKSEndpoint:
    """Serves a mutable key set and counts fetches."""

    def __init__(self, *keys: dict):
        self.keys = list(keys)
        self.calls = 0

    def __call__(self, url: str) -> dict:
        assert url == JWKS_URL
        self.calls += 1
        return {"keys": list(self.keys)}


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class ExtractCredentialTests(TestCase):
    def setUp(self) -> None:
        self.factory = RequestFactory()

    def test_bearer_header_wins_over_cookie(self) -> None:
        request = self.factory.get("/", HTTP_AUTHORIZATION="Bearer header-token")
        request.COOKIES["session"] = "cookie-token"

        self.assertEqual(extract_credential(request, ["session"]), "header-token")

    def test_first_non_empty_cookie(self) -> None:
        request = self.factory.get("/")
        request.COOKIES["session"] = ""
        request.COOKIES["team_session"] = "team-token"

        self.assertEqual(extract_credential(request, ["session", "team_session"]), "team-token")

    def test_other_schemes_are_ignored(self) -> None:
        request = self.factory.get("/", HTTP_AUTHORIZATION="Basic dXNlcjpwYXNz")

        self.assertIsNone(extract_credential(request, ["session"]))

    def test_every_candidate_in_order(self) -> None:
        request = self.factory.get("/", HTTP_AUTHORIZATION="Bearer header-token")
        request.COOKIES["session"] = "stale-token"
        request.COOKIES["team_session"] = "team-token"

        self.assertEqual(
            candidate_credentials(request, ["session", "team_session"]),
            ["header-token", "stale-token", "team-token"],
        )


class ResolveRoleTests(TestCase):
    def test_admin_subjects_promote(self) -> None:
        self.assertEqual(resolve_role(None, {"sub": "user_1"}, ["user_1"]), Role.ADMIN)
        self.assertEqual(resolve_role("team", {"email": "owner@example.com"}, ["owner@example.com"]), Role.ADMIN)

    def test_claimed_role_is_used_otherwise(self) -> None:
        self.assertEqual(resolve_role("team", {"sub": "user_2"}, ["user_1"]), Role.TEAM)
        self.assertEqual(resolve_role("admin", {"sub": "user_2"}, []), Role.ADMIN)
        self.assertEqual(resolve_role("owner", {"sub": "user_2"}, []), Role.GUEST)
        self.assertEqual(resolve_role(None, {}, []), Role.GUEST)


class OpaqueSessionResolverTests(TestCase):
    def setUp(self) -> None:
        self.factory = RequestFactory()
        self.resolver = OpaqueSessionResolver(cookie_names=["session", "team_session"])

    def test_admin_sees_every_accommodation(self) -> None:
        loft = make_accommodation("Test Loft")
        admin = make_admin()
        _, token = AuthSession.issue(admin, AuthSession.Kind.ADMIN, timedelta(hours=1))

        identity = self.resolver.resolve(self.factory.get("/", HTTP_AUTHORIZATION=f"Bearer {token}"))

        assert identity is not None
        self.assertTrue(identity.is_admin)
        self.assertIn(loft.pk, identity.allowed_accommodation_ids)
        self.assertTrue(identity.can_access(loft.pk))
        self.assertEqual(identity.user, admin)

    def test_team_member_is_scoped(self) -> None:
        loft = make_accommodation("Test Loft")
        cabin = make_accommodation("Test Cabin")
        member = make_team_member("cleaner", accommodations=[loft])
        _, token = AuthSession.issue(member, AuthSession.Kind.TEAM, timedelta(hours=1))
        request = self.factory.get("/")
        request.COOKIES["team_session"] = token

        identity = self.resolver.resolve(request)

        assert identity is not None
        self.assertTrue(identity.is_team)
        self.assertEqual(identity.allowed_accommodation_ids, (loft.pk,))
        self.assertFalse(identity.can_access(cabin.pk))

    def test_unknown_token_resolves_to_none(self) -> None:
        request = self.factory.get("/", HTTP_AUTHORIZATION="Bearer not-a-session")

        self.assertIsNone(self.resolver.resolve(request))

    def test_stale_cookie_falls_through_to_next_credential(self) -> None:
        loft = make_accommodation("Test Loft")
        member = make_team_member("cleaner", accommodations=[loft])
        _, token = AuthSession.issue(member, AuthSession.Kind.TEAM, timedelta(hours=1))
        request = self.factory.get("/")
        request.COOKIES["session"] = "expired-or-unknown"
        request.COOKIES["team_session"] = token

        result = self.resolver.authenticate(request)

        assert result is not None
        identity, matched = result
        self.assertTrue(identity.is_team)
        self.assertEqual(identity.user, member)
        self.assertEqual(matched, token)


class SigningKeyCacheTests(TestCase):
    def test_keys_are_refetched_after_ttl(self) -> None:
        key = _rsa_key()
        endpoint = FakeJWKSEndpoint(_jwk(key, "k1"))
        clock = FakeClock()
        cache = SigningKeyCache(JWKS_URL, ttl=60, fetcher=endpoint, clock=clock)

        self.assertIsNotNone(cache.get("k1"))
        self.assertIsNotNone(cache.get("k1"))
        self.assertEqual(endpoint.calls, 1)

        clock.now += 61
        cache.get("k1")
        self.assertEqual(endpoint.calls, 2)

    def test_unknown_kid_forces_one_refresh(self) -> None:
        old_key, new_key = _rsa_key(), _rsa_key()
        endpoint = FakeJWKSEndpoint(_jwk(old_key, "old"))
        cache = SigningKeyCache(JWKS_URL, ttl=3600, fetcher=endpoint, clock=FakeClock())
        cache.get("old")

        endpoint.keys.append(_jwk(new_key, "new"))

        self.assertIsNotNone(cache.get("new"))
        self.assertEqual(endpoint.calls, 2)
        self.assertIsNone(cache.get("missing"))
        self.assertEqual(endpoint.calls, 3)


class SignedAssertionResolverTests(TestCase):
    def setUp(self) -> None:
        self.factory = RequestFactory()
        self.private_key = _rsa_key()
        self.endpoint = FakeJWKSEndpoint(_jwk(self.private_key, "k1"))
        self.resolver = SignedAssertionResolver(
            SigningKeyCache(JWKS_URL, fetcher=self.endpoint),
            admin_subjects=["owner@example.com"],
            cookie_names=["session"],
        )
        self.loft = make_accommodation("Test Loft")

    def _token(self, claims: dict, *, key=None, kid: str = "k1", algorithm: str = "RS256") -> str:
        payload = {"sub": "user_123", "exp": int(time.time()) + 300, **claims}
        return jwt.encode(payload, key or self.private_key, algorithm=algorithm, headers={"kid": kid})

    def _resolve(self, token: str):
        return self.resolver.resolve(self.factory.get("/", HTTP_AUTHORIZATION=f"Bearer {token}"))

    def test_admin_role_claim(self) -> None:
        identity = self._resolve(self._token({"public_metadata": {"role": "admin"}}))

        assert identity is not None
        self.assertEqual(identity.role, Role.ADMIN)
        self.assertEqual(identity.subject, "user_123")
        self.assertIn(self.loft.pk, identity.allowed_accommodation_ids)

    def test_team_role_claim_carries_accommodations(self) -> None:
        token = self._token({"publicMetadata": {"role": "team", "accommodations": [self.loft.pk, "x"]}})

        identity = self._resolve(token)

        assert identity is not None
        self.assertEqual(identity.role, Role.TEAM)
        self.assertEqual(identity.allowed_accommodation_ids, (self.loft.pk,))

    def test_configured_admin_subject(self) -> None:
        identity = self._resolve(self._token({"email": "owner@example.com"}))

        assert identity is not None
        self.assertTrue(identity.is_admin)

    def test_no_role_is_a_guest(self) -> None:
        identity = self._resolve(self._token({}))

        assert identity is not None
        self.assertEqual(identity.role, Role.GUEST)
        self.assertEqual(identity.allowed_accommodation_ids, ())

    def test_foreign_signature_is_rejected(self) -> None:
        token = self._token({"public_metadata": {"role": "admin"}}, key=_rsa_key())

        self.assertIsNone(self._resolve(token))

    def test_expired_assertion_is_rejected(self) -> None:
        token = self._token({"public_metadata": {"role": "admin"}, "exp": int(time.time()) - 10})

        self.assertIsNone(self._resolve(token))

    def test_symmetric_algorithms_are_rejected(self) -> None:
        token = self._token({"public_metadata": {"role": "admin"}}, key="x" * 32, algorithm="HS256")

        self.assertIsNone(self._resolve(token))
        self.assertEqual(self.endpoint.calls, 0)

    def test_garbage_token(self) -> None:
        self.assertIsNone(self._resolve("not.a.jwt"))

    def test_key_endpoint_failure_denies(self) -> None:
        def broken(url: str) -> dict:
            raise ConnectionError("JWKS endpoint down")

        resolver = SignedAssertionResolver(SigningKeyCache(JWKS_URL, fetcher=broken))

        self.assertIsNone(
            resolver.resolve(
                self.factory.get(
                    "/",
                    HTTP_AUTHORIZATION=f"Bearer {self._token({'public_metadata': {'role': 'admin'}})}",
                )
            )
        )
