"""Credential providers for Jira requests.

A JiraClient is built with exactly one CredentialProvider, chosen from
configuration:

- OsKeychainProvider: token (or password) stored in the OS keychain
- EnvironmentVariableProvider: token read from an environment variable
- StaticBasicAuthProvider: fixed username and password

Providers hand out Credential values, which know how to apply themselves
to an outgoing httpx.Request. CredentialAuth adapts a provider to the
httpx.Auth interface so the shared AsyncClient authenticates every request.

Secrets are never logged or included in exception messages.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator, Generator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx
import keyring
from keyring.errors import KeyringError

from jirakit.utils.errors import ConfigurationError

if TYPE_CHECKING:
    from jirakit.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_ENV_VAR = "JIRA_ACCESS_TOKEN"
DEFAULT_KEYCHAIN_SCOPE = "access_token"


class Credential(ABC):
    """A resolved credential that can authorize one request."""

    @property
    @abstractmethod
    def is_empty(self) -> bool:
        """True when there is nothing to send."""

    @abstractmethod
    def apply(self, request: httpx.Request) -> None:
        """Set the Authorization header on ``request``."""


@dataclass(frozen=True)
class BearerToken(Credential):
    """``Authorization: Bearer <token>``."""

    token: str = field(repr=False)

    @property
    def is_empty(self) -> bool:
        return not self.token

    def apply(self, request: httpx.Request) -> None:
        if self.is_empty:
            return
        request.headers["Authorization"] = f"Bearer {self.token}"


@dataclass(frozen=True)
class BasicCredential(Credential):
    """HTTP Basic authentication."""

    username: str
    password: str = field(repr=False)

    @property
    def is_empty(self) -> bool:
        return not self.username

    def apply(self, request: httpx.Request) -> None:
        if self.is_empty:
            return
        userpass = f"{self.username}:{self.password}".encode()
        request.headers["Authorization"] = "Basic " + base64.b64encode(userpass).decode("ascii")


class CredentialProvider(ABC):
    """Source of credentials for one Jira host.

    Subclasses implement credentials(); the domain is the host name of the
    Jira base URL and is used by backends that store secrets per host.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name."""
        pass

    @abstractmethod
    def credentials(self, domain: str) -> Credential:
        """Return the credential to send to ``domain``."""
        pass


class OsKeychainProvider(CredentialProvider):
    """Reads secrets from the OS keychain via ``keyring``.

    With no username, the bearer token is stored under service ``domain``
    and account ``scope``. With a username, the password for that account
    is used for Basic auth instead.

    Lookups are best effort: a missing entry or a keychain failure is
    logged and yields an empty credential. The server then rejects the
    request, which surfaces as AuthenticationFailure.
    """

    def __init__(self, scope: str = DEFAULT_KEYCHAIN_SCOPE, username: str | None = None) -> None:
        self._scope = scope
        self._username = username or None

    @property
    def name(self) -> str:
        return "OS keychain"

    def credentials(self, domain: str) -> Credential:
        account = self._username or self._scope
        try:
            secret = keyring.get_password(domain, account)
        except KeyringError as e:
            logger.warning(
                "Keychain lookup failed for %s (account %s): %s",
                domain,
                account,
                type(e).__name__,
            )
            secret = None

        if secret is None:
            logger.warning("No keychain entry for %s (account %s)", domain, account)
            secret = ""

        if self._username is not None:
            return BasicCredential(self._username, secret)
        return BearerToken(secret)


class EnvironmentVariableProvider(CredentialProvider):
    """Reads the token from environment variables, once, at construction.

    When ``username_variable`` is given, the token is sent as the password
    of a Basic credential for that user.

    Raises:
        ConfigurationError: If a variable is unset or empty
    """

    def __init__(
        self,
        variable: str = DEFAULT_TOKEN_ENV_VAR,
        username_variable: str | None = None,
    ) -> None:
        self._variable = variable
        self._token = self._read(variable)
        self._username = self._read(username_variable) if username_variable else None

    @staticmethod
    def _read(variable: str) -> str:
        value = os.environ.get(variable, "")
        if not value:
            raise ConfigurationError(f"Environment variable {variable} is not set")
        return value

    @property
    def name(self) -> str:
        return f"environment ({self._variable})"

    def credentials(self, domain: str) -> Credential:
        if self._username is not None:
            return BasicCredential(self._username, self._token)
        return BearerToken(self._token)


class StaticBasicAuthProvider(CredentialProvider):
    """Fixed username and password.

    Raises:
        ConfigurationError: If the username is empty
    """

    def __init__(self, username: str, password: str) -> None:
        if not username:
            raise ConfigurationError("Basic authentication requires a username")
        self._credential = BasicCredential(username, password)

    @property
    def name(self) -> str:
        return "basic"

    def credentials(self, domain: str) -> Credential:
        return self._credential


def create_credential_provider(settings: Settings) -> CredentialProvider:
    """Build the provider selected by ``settings.credential_source``.

    Raises:
        ConfigurationError: If the source is unknown or its inputs are missing
    """
    source = settings.credential_source.strip().lower()
    if source == "keychain":
        return OsKeychainProvider(
            scope=settings.keychain_scope or DEFAULT_KEYCHAIN_SCOPE,
            username=settings.username or None,
        )
    if source == "env":
        return EnvironmentVariableProvider(
            variable=settings.token_env_var or DEFAULT_TOKEN_ENV_VAR,
            username_variable=settings.username_env_var or None,
        )
    if source == "basic":
        return StaticBasicAuthProvider(settings.username, settings.password)
    raise ConfigurationError(f"Unknown credential source '{settings.credential_source}'")


class CredentialAuth(httpx.Auth):
    """httpx.Auth adapter asking a CredentialProvider for every request.

    Under an AsyncClient the provider runs in a worker thread, so a slow
    keychain (or an unlock prompt) does not block the event loop.
    """

    def __init__(self, provider: CredentialProvider, domain: str) -> None:
        self.provider = provider
        self.domain = domain

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        self.provider.credentials(self.domain).apply(request)
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        credential = await asyncio.to_thread(self.provider.credentials, self.domain)
        credential.apply(request)
        yield request


__all__ = [
    "BasicCredential",
    "BearerToken",
    "Credential",
    "CredentialAuth",
    "CredentialProvider",
    "EnvironmentVariableProvider",
    "OsKeychainProvider",
    "StaticBasicAuthProvider",
    "create_credential_provider",
]
