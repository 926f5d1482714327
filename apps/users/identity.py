"""Identity gate.

Turns the credential presented with a request into an :class:`Identity`
(role plus accommodation scope). A deployment runs exactly one
:class:`SessionResolver`, chosen by ``settings.IDENTITY["RESOLVER"]``:

* :class:`OpaqueSessionResolver` looks the token up in ``AuthSession``.
* :class:`SignedAssertionResolver` verifies an RS256 token against keys
  published at a JWKS endpoint and reads the role from its claims.

Resolvers never raise. Any failure resolves to ``None`` and callers deny.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable

import jwt  # type: ignore
import requests  # type: ignore
from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore
from django.core.signals import setting_changed  # type: ignore
from django.dispatch import receiver  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

logger = logging.getLogger(__name__)


class Role:
    ADMIN = "admin"
    TEAM = "team"
    GUEST = "guest"


@dataclass(frozen=True)
class Identity:
    """Who is calling and which accommodations they may touch."""

    role: str
    allowed_accommodation_ids: tuple[int, ...] = ()
    subject: str = ""
    user: Any = None

    is_authenticated = True
    is_anonymous = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_team(self) -> bool:
        return self.role == Role.TEAM

    @property
    def pk(self):
        return getattr(self.user, "pk", None)

    def can_access(self, accommodation_id: int) -> bool:
        if self.is_admin:
            return True
        return int(accommodation_id) in self.allowed_accommodation_ids


def all_accommodation_ids() -> tuple[int, ...]:
    from apps.accommodations.models import Accommodation  # Local import to prevent circular dependency

    return tuple(Accommodation.objects.order_by("id").values_list("id", flat=True))


def identity_for_user(user) -> Identity:
    if user.is_admin:
        return Identity(Role.ADMIN, all_accommodation_ids(), subject=str(user.pk), user=user)
    return Identity(Role.TEAM, tuple(user.allowed_accommodation_ids()), subject=str(user.pk), user=user)


def candidate_credentials(request, cookie_names: Iterable[str]) -> list[str]:
    """Bearer header first, then every non-empty cookie in ``cookie_names`` order."""

    candidates: list[str] = []
    header = request.META.get("HTTP_AUTHORIZATION", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        candidates.append(value.strip())
    for name in cookie_names:
        token = request.COOKIES.get(name)
        if token and token not in candidates:
            candidates.append(token)
    return candidates


def extract_credential(request, cookie_names: Iterable[str]) -> str | None:
    candidates = candidate_credentials(request, cookie_names)
    return candidates[0] if candidates else None


def resolve_role(claimed_role: Any, claims: dict[str, Any], admin_subjects: Iterable[str]) -> str:
    """Single source of truth for the role carried by a signed assertion.

    ``admin_subjects`` is configuration: subjects (or e-mail addresses) listed
    there are administrators regardless of the claimed role.
    """

    admin_subjects = set(admin_subjects)
    if admin_subjects and (claims.get("sub") in admin_subjects or claims.get("email") in admin_subjects):
        return Role.ADMIN
    if claimed_role in (Role.ADMIN, Role.TEAM):
        return claimed_role
    return Role.GUEST


class SessionResolver(ABC):
    """Maps a request to an :class:`Identity` or ``None``."""

    supports_password_login = False

    def __init__(self, cookie_names: Iterable[str] = ("session", "team_session")):
        self.cookie_names = tuple(cookie_names)

    @classmethod
    def from_settings(cls, config: dict[str, Any]) -> "SessionResolver":
        return cls(cookie_names=config.get("COOKIE_NAMES", ()))

    def credentials(self, request) -> list[str]:
        return candidate_credentials(request, self.cookie_names)

    def authenticate(self, request) -> tuple[Identity, str] | None:
        """First candidate credential that resolves, with the identity it maps to.

        A stale cookie never shadows a valid credential presented after it.
        """

        for token in self.credentials(request):
            try:
                identity = self.resolve_token(token)
            except Exception:  # noqa: BLE001 - resolution failures always deny
                logger.warning("Credential resolution failed in %s", type(self).__name__, exc_info=True)
                continue
            if identity is not None:
                return identity, token
        return None

    def resolve(self, request) -> Identity | None:
        result = self.authenticate(request)
        return result[0] if result else None

    @abstractmethod
    def resolve_token(self, token: str) -> Identity | None:
        raise NotImplementedError


class OpaqueSessionResolver(SessionResolver):
    """Random tokens backed by unexpired ``AuthSession`` rows."""

    supports_password_login = True

    def resolve_token(self, token: str) -> Identity | None:
        from .models import AuthSession

        session = (
            AuthSession.objects.active()
            .select_related("user")
            .filter(token_digest=AuthSession.digest(token))
            .first()
        )
        if session is None or not session.user.is_active:
            return None
        return identity_for_user(session.user)


def fetch_jwks(url: str, timeout: float = 5) -> dict[str, Any]:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.json()


class SigningKeyCache:
    """Public signing keys indexed by ``kid``.

    Keys are refetched once ``ttl`` seconds have passed, and once more when
    a token names a key id the cache does not hold (key rotation).
    """

    def __init__(
        self,
        jwks_url: str,
        ttl: float = 3600,
        fetcher: Callable[[str], dict[str, Any]] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.jwks_url = jwks_url
        self.ttl = ttl
        self._fetcher = fetcher or fetch_jwks
        self._clock = clock
        self._keys: dict[str, Any] = {}
        self._fetched_at: float | None = None
        self._lock = threading.Lock()

    @property
    def is_stale(self) -> bool:
        return self._fetched_at is None or self._clock() - self._fetched_at >= self.ttl

    def refresh(self) -> None:
        with self._lock:
            document = self._fetcher(self.jwks_url)
            keys = {}
            for jwk in document.get("keys", []):
                kid = jwk.get("kid")
                if not kid or jwk.get("kty") != "RSA":
                    continue
                keys[kid] = jwt.PyJWK.from_dict(jwk, algorithm="RS256").key
            self._keys = keys
            self._fetched_at = self._clock()
        logger.info("Loaded %s signing keys from %s", len(keys), self.jwks_url)

    def get(self, kid: str):
        refreshed = False
        if self.is_stale:
            self.refresh()
            refreshed = True
        key = self._keys.get(kid)
        if key is None and not refreshed:
            self.refresh()
            key = self._keys.get(kid)
        return key


class SignedAssertionResolver(SessionResolver):
    """RS256 assertions issued by an external identity provider."""

    algorithms = ["RS256"]

    def __init__(
        self,
        key_cache: SigningKeyCache,
        admin_subjects: Iterable[str] = (),
        cookie_names: Iterable[str] = ("session",),
    ):
        super().__init__(cookie_names=cookie_names)
        self.key_cache = key_cache
        self.admin_subjects = tuple(admin_subjects)

    @classmethod
    def from_settings(cls, config: dict[str, Any]) -> "SignedAssertionResolver":
        jwks_url = config.get("JWKS_URL")
        if not jwks_url:
            raise ImproperlyConfigured("IDENTITY['JWKS_URL'] is required for signed assertions.")
        timeout = config.get("JWKS_TIMEOUT", 5)
        key_cache = SigningKeyCache(
            jwks_url,
            ttl=config.get("JWKS_CACHE_TTL", 3600),
            fetcher=lambda url: fetch_jwks(url, timeout=timeout),
        )
        return cls(
            key_cache,
            admin_subjects=config.get("ADMIN_SUBJECTS", ()),
            cookie_names=config.get("COOKIE_NAMES", ()),
        )

    def resolve_token(self, token: str) -> Identity | None:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError:
            return None
        kid = header.get("kid")
        if header.get("alg") not in self.algorithms or not kid:
            return None

        key = self.key_cache.get(kid)
        if key is None:
            logger.info("Unknown signing key id %s", kid)
            return None

        try:
            claims = jwt.decode(
                token,
                key=key,
                algorithms=self.algorithms,
                options={"verify_aud": False},
            )
        except jwt.PyJWTError as exc:
            logger.info("Rejected signed assertion: %s", exc)
            return None

        metadata = claims.get("public_metadata") or claims.get("publicMetadata") or {}
        role = resolve_role(metadata.get("role"), claims, self.admin_subjects)
        subject = str(claims.get("sub", ""))

        if role == Role.ADMIN:
            return Identity(Role.ADMIN, all_accommodation_ids(), subject=subject)
        if role == Role.TEAM:
            allowed = []
            for value in metadata.get("accommodations") or []:
                try:
                    allowed.append(int(value))
                except (TypeError, ValueError):
                    continue
            return Identity(Role.TEAM, tuple(sorted(set(allowed))), subject=subject)
        return Identity(Role.GUEST, (), subject=subject)


_resolver: SessionResolver | None = None


def build_resolver() -> SessionResolver:
    config = settings.IDENTITY
    resolver_class = import_string(config["RESOLVER"])
    return resolver_class.from_settings(config)


def get_resolver() -> SessionResolver:
    global _resolver
    if _resolver is None:
        _resolver = build_resolver()
    return _resolver


def set_resolver(resolver: SessionResolver | None) -> None:
    """Swap the live resolver (``None`` rebuilds it from settings on next use)."""

    global _resolver
    _resolver = resolver


@receiver(setting_changed)
def _reset_resolver(*, setting, **kwargs) -> None:
    if setting == "IDENTITY":
        set_resolver(None)
