"""Connection profile operations for Frodo.

Profiles are kept in a JSON file keyed by tenant URL. Passwords, log API
secrets and service account keys are stored encrypted with the master key.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .._base import BaseClient
from ..exceptions import FrodoError
from ..models import ConnectionProfile, SecureConnectionProfile
from ..utils.console import debug_message, print_message, verbose_message
from ..utils.data_protection import DataProtection
from ..utils.forgerock import is_valid_url

# clear-text key -> encrypted key
_LEGACY_SECRETS = {
    "password": "encodedPassword",
    "logApiSecret": "encodedLogApiSecret",
    "svcacctJwk": "encodedSvcacctJwk",
}


def find_connection_profiles(
    profiles: dict[str, dict[str, Any]], host: str
) -> list[SecureConnectionProfile]:
    """Return every profile whose tenant URL contains ``host``."""
    return [
        SecureConnectionProfile.model_validate({**profile, "tenant": tenant})
        for tenant, profile in profiles.items()
        if host in tenant
    ]


class ConnectionProfileOps:
    """Store and look up tenant credentials on disk."""

    def __init__(self, client: BaseClient) -> None:
        self._state = client.state
        self._data_protection: DataProtection | None = None

    @property
    def data_protection(self) -> DataProtection:
        if self._data_protection is None:
            self._data_protection = DataProtection(self._state.get_master_key_path())
        return self._data_protection

    def get_connection_profiles_path(self) -> Path:
        return self._state.get_connection_profiles_path()

    def _read_profiles(self) -> dict[str, dict[str, Any]]:
        path = self.get_connection_profiles_path()
        if not path.exists():
            return {}
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            msg = f"Error reading connection profiles from {path}"
            raise FrodoError(msg, e) from e

    def _write_profiles(self, profiles: dict[str, dict[str, Any]]) -> None:
        path = self.get_connection_profiles_path()
        ordered = {tenant: profiles[tenant] for tenant in sorted(profiles)}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(ordered, indent=4), encoding="utf-8")
        except OSError as e:
            msg = f"Error writing connection profiles to {path}"
            raise FrodoError(msg, e) from e

    def init_connection_profiles(self) -> None:
        """Create the profiles file, or encrypt clear-text secrets left in it."""
        path = self.get_connection_profiles_path()
        if not path.exists():
            debug_message(self._state, f"Creating connection profiles file {path}")
            self._write_profiles({})
            return
        profiles = self._read_profiles()
        changed = False
        for profile in profiles.values():
            for clear_key, encoded_key in _LEGACY_SECRETS.items():
                if clear_key not in profile:
                    continue
                value = profile.pop(clear_key)
                if not isinstance(value, str):
                    value = json.dumps(value)
                profile[encoded_key] = self.data_protection.encrypt(value)
                changed = True
        if changed:
            self._write_profiles(profiles)

    def _find_one(self, host: str) -> SecureConnectionProfile:
        profiles = find_connection_profiles(self._read_profiles(), host)
        if not profiles:
            msg = (
                f"Profile for {host} not found. Please specify credentials on "
                "the command line."
            )
            raise FrodoError(msg)
        if len(profiles) > 1:
            tenants = ", ".join(str(p.tenant) for p in profiles)
            msg = f"Multiple matching profiles found for {host}: {tenants}"
            raise FrodoError(msg)
        return profiles[0]

    def _decrypt(self, value: str | None) -> str | None:
        return self.data_protection.decrypt(value) if value else None

    def get_connection_profile_by_host(self, host: str) -> ConnectionProfile:
        """Look up a profile by any unique part of its tenant URL.

        Args:
            host: Full tenant URL or a unique substring of one

        Returns:
            The profile with its secrets decrypted.

        Raises:
            FrodoError: When no profile or more than one profile matches.

        """
        self.init_connection_profiles()
        profile = self._find_one(host)
        jwk = self._decrypt(profile.encoded_svcacct_jwk)
        return ConnectionProfile(
            tenant=profile.tenant,
            username=profile.username,
            password=self._decrypt(profile.encoded_password),
            log_api_key=profile.log_api_key,
            log_api_secret=self._decrypt(profile.encoded_log_api_secret),
            authentication_service=profile.authentication_service,
            authentication_header_overrides=profile.authentication_header_overrides or {},
            deployment_type=profile.deployment_type,
            svcacct_id=profile.svcacct_id,
            svcacct_name=profile.svcacct_name,
            svcacct_jwk=json.loads(jwk) if jwk else None,
        )

    def get_connection_profile(self) -> ConnectionProfile:
        host = self._state.get_host()
        if not host:
            msg = "No host specified"
            raise FrodoError(msg)
        return self.get_connection_profile_by_host(host)

    def save_connection_profile(self, host: str) -> bool:
        """Save the current credentials under the tenant matching ``host``.

        An existing unique match is updated and becomes the state's host.
        Otherwise ``host`` must be a full URL and a new profile is added.

        Returns:
            True when the profile was written, False when ``host`` is neither
            a unique match nor a valid URL.

        """
        debug_message(self._state, f"ConnectionProfileOps.save_connection_profile: {host}")
        self.init_connection_profiles()
        profiles = self._read_profiles()
        matches = find_connection_profiles(profiles, host)
        if len(matches) == 1:
            verbose_message(self._state, f"Existing profile: {matches[0].tenant}")
            self._state.host = matches[0].tenant
        elif is_valid_url(host):
            verbose_message(self._state, f"New profile: {host}")
            self._state.host = host
        else:
            print_message(
                self._state, f"No existing profile found for {host}, and it is not a valid URL.",
                "error",
            )
            return False
        tenant = self._state.get_host()
        profile = profiles.get(tenant, {})
        if self._state.get_username():
            profile["username"] = self._state.get_username()
        if self._state.get_password():
            profile["encodedPassword"] = self.data_protection.encrypt(
                self._state.get_password()
            )
        if self._state.get_log_api_key():
            profile["logApiKey"] = self._state.get_log_api_key()
        if self._state.get_log_api_secret():
            profile["encodedLogApiSecret"] = self.data_protection.encrypt(
                self._state.get_log_api_secret()
            )
        if self._state.get_service_account_id():
            profile["svcacctId"] = self._state.get_service_account_id()
        if self._state.get_service_account_jwk():
            profile["encodedSvcacctJwk"] = self.data_protection.encrypt(
                json.dumps(self._state.get_service_account_jwk())
            )
        if self._state.get_authentication_service():
            profile["authenticationService"] = self._state.get_authentication_service()
            print_message(
                self._state,
                f"Saving authentication service: {profile['authenticationService']}",
                "info",
            )
        if self._state.authentication_header_overrides:
            profile["authenticationHeaderOverrides"] = dict(
                self._state.authentication_header_overrides
            )
        if self._state.get_deployment_type():
            profile["deploymentType"] = self._state.get_deployment_type()
        profile.pop("tenant", None)
        profiles[tenant] = profile
        self._write_profiles(profiles)
        return True

    def delete_connection_profile(self, host: str) -> None:
        """Delete the profile matching ``host``.

        Raises:
            FrodoError: When no profile or more than one profile matches.

        """
        profiles = self._read_profiles()
        profile = self._find_one(host)
        del profiles[profile.tenant]
        print_message(self._state, f"Deleted connection profile {profile.tenant}", "info")
        self._write_profiles(profiles)
