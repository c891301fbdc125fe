"""Authentication operations for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import base64
import hashlib
import re
import secrets
import time
import uuid
from typing import Any
from urllib.parse import parse_qs, urljoin, urlsplit

import jwt

from .._base import BaseClient
from ..api._oauth2_oidc import OAuth2OidcApi
from ..api._server_info import AuthenticateApi, ServerInfoApi
from ..constants import CLOUD_DEPLOYMENT_TYPE_KEY, FORGEOPS_DEPLOYMENT_TYPE_KEY
from ..exceptions import FrodoError
from ..utils.console import debug_message, print_error, print_message, verbose_message
from ..utils.forgerock import get_current_host, is_valid_url
from ._connection_profile import ConnectionProfileOps

MAX_AUTHENTICATION_STEPS = 3

ADMIN_CLIENT_ID = "idmAdminClient"
ADMIN_CLIENT_PASSWORD = "doesnotmatter"
REDIRECT_PATH = "/platform/appAuthHelperRedirect.html"
CLOUD_ADMIN_SCOPES = "openid fr:idm:* fr:idc:esv:*"
FORGEOPS_ADMIN_SCOPES = "openid fr:idm:*"
SERVICE_ACCOUNT_CLIENT_ID = "service-account"
SERVICE_ACCOUNT_SCOPES = "fr:am:* fr:idm:* fr:idc:esv:* fr:idc:promotion:*"
JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
SERVICE_ACCOUNT_JWT_LIFETIME = 180

_SEMANTIC_VERSION = re.compile(r"(\d\.\d\.\d(\.\d)*)")


def get_semantic_version(version_info: dict[str, Any]) -> str:
    """Extract ``7.2.0`` style versions from a server version info object.

    Raises:
        FrodoError: If the object has no usable ``version``.

    """
    found = _SEMANTIC_VERSION.search(str(version_info.get("version", "")))
    if not found:
        msg = "Cannot extract semantic version from version info object."
        raise FrodoError(msg)
    return found.group(1)


def create_code_verifier() -> str:
    return secrets.token_urlsafe(32)


def create_code_challenge(verifier: str) -> str:
    """Return the S256 PKCE challenge for ``verifier``."""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def get_token_audience(host: str) -> str:
    """Return the access token endpoint URL used as service account JWT audience.

    The port is always spelled out, e.g.
    ``https://tenant.example.com:443/am/oauth2/access_token``.
    """
    parts = urlsplit(host)
    port = parts.port or (443 if parts.scheme == "https" else 80)
    path = parts.path.rstrip("/")
    return f"{parts.scheme}://{parts.hostname}:{port}{path}/oauth2/access_token"


class AuthenticateOps:
    """Obtain session cookies and tokens for the configured tenant."""

    def __init__(self, client: BaseClient) -> None:
        self._server_info_api = ServerInfoApi(client)
        self._authenticate_api = AuthenticateApi(client)
        self._oauth2_api = OAuth2OidcApi(client)
        self._connection_profiles = ConnectionProfileOps(client)
        self._state = client.state

    async def get_cookie_name(self) -> str:
        try:
            server_info = await self._server_info_api.get_server_info()
        except FrodoError as e:
            msg = "Error getting cookie name"
            raise FrodoError(msg, e) from e
        debug_message(
            self._state, f"AuthenticateOps.get_cookie_name: {server_info['cookieName']}"
        )
        return server_info["cookieName"]

    def _answer_callbacks(
        self, payload: dict[str, Any], username: str, password: str
    ) -> bool:
        """Fill in the callbacks of a journey step.

        Returns:
            True when the payload should be submitted as the next step.

        Raises:
            FrodoError: When the journey asks for a factor that needs a person.

        """
        if "callbacks" not in payload:
            return False
        for callback in payload["callbacks"]:
            callback_type = callback.get("type")
            if callback_type == "SelectIdPCallback":
                providers = [v.get("provider") for v in callback["output"][0]["value"]]
                if "localAuthentication" in providers:
                    callback["input"][0]["value"] = "localAuthentication"
            elif callback_type == "HiddenValueCallback":
                value = str(callback["input"][0]["value"])
                if "webAuthnOutcome" in value:
                    msg = "Unsupported 2FA factor: WebAuthN"
                    raise FrodoError(msg)
                if "skip" in value:
                    callback["input"][0]["value"] = "Skip"
            elif callback_type == "NameCallback":
                if "code" in str(callback["output"][0]["value"]):
                    msg = "Unsupported 2FA factor: Code"
                    raise FrodoError(msg)
                callback["input"][0]["value"] = username
            elif callback_type == "PasswordCallback":
                callback["input"][0]["value"] = password
        return True

    async def get_session_token(self, username: str, password: str) -> str:
        """Log in with username and password and store the session token.

        Skippable second factors and admin federation prompts are answered
        automatically.

        Args:
            username: Account name
            password: Account password

        Returns:
            The session token, also stored as the state's cookie value.

        Raises:
            FrodoError: If the journey does not end in a session.

        """
        debug_message(self._state, "AuthenticateOps.get_session_token: start")
        headers = {"X-OpenAM-Username": username, "X-OpenAM-Password": password}
        try:
            response = await self._authenticate_api.step({}, headers)
            for _ in range(MAX_AUTHENTICATION_STEPS):
                if "tokenId" in response:
                    break
                if not self._answer_callbacks(response, username, password):
                    break
                response = await self._authenticate_api.step(response)
        except FrodoError as e:
            msg = f"Error authenticating {username}"
            raise FrodoError(msg, e) from e
        if "tokenId" not in response:
            msg = f"No session obtained for {username}"
            raise FrodoError(msg)
        self._state.cookie_value = response["tokenId"]
        debug_message(self._state, "AuthenticateOps.get_session_token: end")
        return response["tokenId"]

    async def get_am_version(self) -> str:
        try:
            version_info = await self._server_info_api.get_server_version_info()
        except FrodoError as e:
            msg = "Error getting AM version"
            raise FrodoError(msg, e) from e
        debug_message(self._state, f"Full version: {version_info.get('fullVersion')}")
        version = get_semantic_version(version_info)
        self._state.am_version = version
        return version

    def _get_redirect_uri(self) -> str:
        return urljoin(get_current_host(self._state), REDIRECT_PATH)

    async def get_auth_code(self, redirect_uri: str, code_challenge: str) -> str:
        """Authorize the admin client with the current session.

        Args:
            redirect_uri: Redirect URI registered for the admin client
            code_challenge: S256 PKCE challenge

        Returns:
            The authorization code from the redirect location.

        Raises:
            FrodoError: When the tenant does not redirect with a code.

        """
        scope = (
            CLOUD_ADMIN_SCOPES
            if self._state.get_deployment_type() == CLOUD_DEPLOYMENT_TYPE_KEY
            else FORGEOPS_ADMIN_SCOPES
        )
        form = {
            "redirect_uri": redirect_uri,
            "scope": scope,
            "response_type": "code",
            "client_id": ADMIN_CLIENT_ID,
            "csrf": self._state.cookie_value or "",
            "decision": "allow",
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }
        try:
            response = await self._oauth2_api.authorize(form)
        except FrodoError as e:
            msg = "Error getting authorization code"
            raise FrodoError(msg, e) from e
        location = response.headers.get("Location", "")
        code = parse_qs(urlsplit(location).query).get("code")
        if not code:
            msg = "auth code not found"
            raise FrodoError(msg)
        return code[0]

    async def get_access_token_for_user(self) -> str:
        """Run the PKCE authorization code flow for the logged-in user.

        Returns:
            The access token, also stored as the state's bearer token.

        Raises:
            FrodoError: If no code or no token can be obtained.

        """
        debug_message(self._state, "AuthenticateOps.get_access_token_for_user: start")
        verifier = create_code_verifier()
        redirect_uri = self._get_redirect_uri()
        code = await self.get_auth_code(redirect_uri, create_code_challenge(verifier))
        form = {
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
            "code": code,
            "code_verifier": verifier,
        }
        auth = None
        if self._state.get_deployment_type() == CLOUD_DEPLOYMENT_TYPE_KEY:
            auth = (ADMIN_CLIENT_ID, ADMIN_CLIENT_PASSWORD)
        else:
            form["client_id"] = ADMIN_CLIENT_ID
        try:
            response = await self._oauth2_api.access_token(form, auth)
        except FrodoError as e:
            msg = "Error getting access token for user"
            raise FrodoError(msg, e) from e
        self.set_bearer_token(response["access_token"])
        debug_message(self._state, "AuthenticateOps.get_access_token_for_user: end")
        return response["access_token"]

    def create_service_account_assertion(
        self, service_account_id: str, jwk: dict[str, Any]
    ) -> str:
        """Sign the JWT bearer assertion for a service account.

        Args:
            service_account_id: Service account id, used as issuer and subject
            jwk: The service account's private RSA key as a JSON Web Key

        Returns:
            The RS256-signed assertion.

        """
        payload = {
            "iss": service_account_id,
            "sub": service_account_id,
            "aud": get_token_audience(get_current_host(self._state)),
            "exp": int(time.time()) + SERVICE_ACCOUNT_JWT_LIFETIME,
            "jti": str(uuid.uuid4()),
        }
        try:
            key = jwt.PyJWK(jwk).key
            return jwt.encode(payload, key, algorithm="RS256")
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            msg = "Invalid service account key"
            raise FrodoError(msg, e) from e

    async def get_access_token_for_service_account(
        self, service_account_id: str, jwk: dict[str, Any]
    ) -> str:
        """Exchange a signed service account assertion for an access token.

        Returns:
            The access token.

        Raises:
            FrodoError: If the key is unusable or the tenant rejects the grant.

        """
        form = {
            "assertion": self.create_service_account_assertion(service_account_id, jwk),
            "client_id": SERVICE_ACCOUNT_CLIENT_ID,
            "grant_type": JWT_BEARER_GRANT_TYPE,
            "scope": SERVICE_ACCOUNT_SCOPES,
        }
        try:
            response = await self._oauth2_api.access_token(form)
        except FrodoError as e:
            msg = f"Error getting access token for service account {service_account_id}"
            raise FrodoError(msg, e) from e
        return response["access_token"]

    def set_bearer_token(self, token: str, use_for_am_apis: bool = False) -> None:
        self._state.bearer_token = token
        self._state.use_bearer_token_for_am_apis = use_for_am_apis

    def _has_user_credentials(self) -> bool:
        return bool(self._state.get_username() and self._state.get_password())

    def _has_service_account(self) -> bool:
        return bool(
            self._state.get_service_account_id() and self._state.get_service_account_jwk()
        )

    def _load_connection_profile(self) -> None:
        profile = self._connection_profiles.get_connection_profile()
        self._state.host = profile.tenant
        self._state.username = profile.username
        self._state.password = profile.password
        self._state.authentication_service = profile.authentication_service
        self._state.authentication_header_overrides = dict(
            profile.authentication_header_overrides
        )
        self._state.service_account_id = profile.svcacct_id
        self._state.service_account_jwk = profile.svcacct_jwk
        if profile.deployment_type and not self._state.deployment_type:
            self._state.deployment_type = profile.deployment_type

    async def _login_as_service_account(self) -> None:
        service_account_id = self._state.get_service_account_id()
        try:
            token = await self.get_access_token_for_service_account(
                service_account_id, self._state.get_service_account_jwk()
            )
            self.set_bearer_token(token, use_for_am_apis=True)
            await self.get_am_version()
        except FrodoError as e:
            msg = "Service account login error"
            raise FrodoError(msg, e) from e

    async def _login_as_user(self) -> None:
        await self.get_session_token(self._state.get_username(), self._state.get_password())
        await self.get_am_version()
        if (
            self._state.cookie_value
            and not self._state.bearer_token
            and self._state.get_deployment_type()
            in (CLOUD_DEPLOYMENT_TYPE_KEY, FORGEOPS_DEPLOYMENT_TYPE_KEY)
        ):
            await self.get_access_token_for_user()

    async def get_tokens(self, force_login_as_user: bool = False) -> bool:
        """Connect to the tenant with the configured or stored credentials.

        Credentials missing from the state are read from the connection
        profile matching the host, which may also expand a partial host into
        the full tenant URL. A service account, when configured, is preferred
        over the user unless ``force_login_as_user`` is set. User logins on
        cloud and ForgeOps tenants also obtain an access token for the IDM and
        environment APIs. Failures are reported through the state's print
        handler.

        Args:
            force_login_as_user: Ignore configured service account credentials

        Returns:
            True when a session was established.

        """
        debug_message(self._state, "AuthenticateOps.get_tokens: start")
        if not self._state.get_host():
            print_message(
                self._state, "No host specified and FRODO_HOST env variable not set!", "error"
            )
            return False
        try:
            if not (self._has_user_credentials() or self._has_service_account()):
                self._load_connection_profile()
            elif not is_valid_url(self._state.get_host()):
                self._state.host = self._connection_profiles.get_connection_profile().tenant
            use_service_account = not force_login_as_user and self._has_service_account()
            if not (use_service_account or self._has_user_credentials()):
                print_message(self._state, "Incomplete or no credentials!", "error")
                return False
            self._state.cookie_name = await self.get_cookie_name()
            if use_service_account:
                await self._login_as_service_account()
            else:
                await self._login_as_user()
        except FrodoError as e:
            print_error(self._state, e, e.get_combined_message())
            debug_message(self._state, "AuthenticateOps.get_tokens: end without tokens")
            return False
        verbose_message(self._state, f"AM version {self._state.am_version}")
        principal = (
            f"service account {self._state.get_service_account_id()}"
            if use_service_account
            else f"user {self._state.get_username()}"
        )
        print_message(
            self._state,
            f"Connected to {self._state.get_host()} [{self._state.get_realm()}] "
            f"as {principal}",
            "info",
        )
        debug_message(self._state, "AuthenticateOps.get_tokens: end with tokens")
        return True
