"""OAuth2 and OpenID Connect API for Frodo.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

from typing import Any

import httpx

from .._base import BaseClient, RequestConfig
from ..utils.forgerock import get_current_host

OAUTH2_API_VERSION = "protocol=2.1,resource=1.0"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class OAuth2OidcApi:
    """Raw access to the AM ``/oauth2`` endpoints of the root realm."""

    def __init__(self, client: BaseClient) -> None:
        self._client = client
        self._state = client.state

    async def authorize(self, form: dict[str, str]) -> httpx.Response:
        """Post an authorization decision with the current session cookie.

        Args:
            form: Authorization request parameters

        Returns:
            The redirect response carrying the authorization code.

        """
        config = RequestConfig(
            form_data=form,
            headers={"Content-Type": FORM_CONTENT_TYPE},
            api_version=OAUTH2_API_VERSION,
        )
        return await self._client.make_raw_request(
            "POST", f"{get_current_host(self._state)}/oauth2/authorize", config=config
        )

    async def access_token(
        self, form: dict[str, str], auth: tuple[str, str] | None = None
    ) -> dict[str, Any]:
        """Exchange a grant for tokens.

        The request carries no session cookie or bearer token; clients
        authenticate with ``auth`` or through the form.

        Args:
            form: Token request parameters
            auth: Optional client id and secret for basic authentication

        Returns:
            Token response with ``access_token``.

        """
        config = RequestConfig(
            form_data=form,
            headers={"Content-Type": FORM_CONTENT_TYPE},
            api_version=OAUTH2_API_VERSION,
            api="none",
            auth=auth,
        )
        return await self._client.make_request(
            "POST", f"{get_current_host(self._state)}/oauth2/access_token", config=config
        )
