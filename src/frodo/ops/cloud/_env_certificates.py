"""Environment certificate operations for Frodo.

Creating, activating and deactivating a certificate are asynchronous on the
platform side: the API call returns at once and the ``live`` flag follows
later. The ``wait`` options poll until the certificate reaches the requested
state or the retry budget is spent.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio

from ..._base import BaseClient
from ...api.cloud._env_certificates import EnvCertificatesApi
from ...exceptions import HTTP_SERVER_ERROR_CODE, FrodoError
from ...models import CertificateResponse
from ...utils.console import debug_message
from ...utils.polling import gather_settled, poll_until

DEFAULT_INTERVAL = 5.0
DEFAULT_RETRIES = 24


def _inactive_and_offline(certs: list[CertificateResponse]) -> bool:
    return all(not cert.active and not cert.live for cert in certs)


class EnvCertificatesOps:
    """Manage the tenant's uploaded TLS certificates."""

    def __init__(self, client: BaseClient) -> None:
        self._api = EnvCertificatesApi(client)
        self._state = client.state

    async def read_certificate(self, certificate_id: str) -> CertificateResponse:
        try:
            data = await self._api.get_certificate(certificate_id)
        except FrodoError as e:
            msg = f"Error reading certificate {certificate_id}"
            raise FrodoError(msg, e) from e
        return CertificateResponse.model_validate(data)

    async def read_certificates(self) -> list[CertificateResponse]:
        try:
            data = await self._api.get_certificates()
        except FrodoError as e:
            msg = "Error reading certificates"
            raise FrodoError(msg, e) from e
        return [CertificateResponse.model_validate(item) for item in data or []]

    async def is_certificate_active(self, certificate_id: str) -> bool:
        return (await self.read_certificate(certificate_id)).active

    async def is_certificate_live(self, certificate_id: str) -> bool:
        return (await self.read_certificate(certificate_id)).live

    async def _wait_for_live(
        self,
        cert: CertificateResponse,
        live: bool,
        interval: float,
        retries: int,
        timeout_message: str,
    ) -> CertificateResponse:
        if cert.live == live:
            return cert
        value, reached = await poll_until(
            lambda: self.is_certificate_live(cert.id),
            lambda current: current == live,
            interval=interval,
            retries=retries,
        )
        debug_message(self._state, f"EnvCertificatesOps: {cert.id} live={value}")
        if not reached:
            raise FrodoError(timeout_message)
        cert.live = live
        return cert

    async def create_certificate(
        self,
        active: bool,
        certificate: str,
        private_key: str,
        wait: bool = False,
        interval: float = DEFAULT_INTERVAL,
        retries: int = DEFAULT_RETRIES,
    ) -> CertificateResponse:
        """Upload a certificate.

        Args:
            active: Activate the certificate right away
            certificate: PEM encoded certificate chain
            private_key: PEM encoded private key
            wait: For active certificates, wait until the certificate is live
            interval: Seconds between status checks
            retries: Maximum number of status checks

        Returns:
            The created certificate.

        Raises:
            FrodoError: If the upload fails or the certificate does not go live in time.

        """
        debug_message(self._state, "EnvCertificatesOps.create_certificate: start")
        try:
            cert = CertificateResponse.model_validate(
                await self._api.create_certificate(active, certificate, private_key)
            )
            if active and wait:
                cert = await self._wait_for_live(
                    cert,
                    True,
                    interval,
                    retries,
                    f"Timeout waiting for new cert {cert.id} to go live",
                )
        except FrodoError as e:
            msg = "Error creating certificate"
            raise FrodoError(msg, e) from e
        debug_message(self._state, "EnvCertificatesOps.create_certificate: end")
        return cert

    async def update_certificate(
        self, certificate_id: str, active: bool
    ) -> CertificateResponse:
        try:
            data = await self._api.update_certificate(certificate_id, active)
        except FrodoError as e:
            msg = f"Error updating certificate {certificate_id}"
            raise FrodoError(msg, e) from e
        return CertificateResponse.model_validate(data)

    async def activate_certificate(
        self,
        certificate_id: str,
        wait: bool = False,
        interval: float = DEFAULT_INTERVAL,
        retries: int = DEFAULT_RETRIES,
    ) -> CertificateResponse:
        """Activate a certificate, optionally waiting until it is live."""
        cert = await self.update_certificate(certificate_id, True)
        if wait:
            cert = await self._wait_for_live(
                cert,
                True,
                interval,
                retries,
                f"Timeout waiting for activated cert {cert.id} to go live",
            )
        return cert

    async def deactivate_certificate(
        self,
        certificate_id: str,
        wait: bool = False,
        interval: float = DEFAULT_INTERVAL,
        retries: int = DEFAULT_RETRIES,
    ) -> CertificateResponse:
        """Deactivate a certificate, optionally waiting until it is offline."""
        cert = await self.update_certificate(certificate_id, False)
        if wait:
            cert = await self._wait_for_live(
                cert,
                False,
                interval,
                retries,
                f"Timeout waiting for deactivated cert {cert.id} to go offline",
            )
        return cert

    async def delete_certificate(
        self,
        certificate_id: str,
        force: bool = False,
        interval: float = DEFAULT_INTERVAL,
        retries: int = DEFAULT_RETRIES,
    ) -> CertificateResponse:
        """Delete a certificate.

        Without ``force`` the delete is attempted once. With ``force`` an
        active certificate is deactivated first, and the delete is retried
        while the platform answers with a server error because the
        certificate is still in use.

        Args:
            certificate_id: Certificate id
            force: Deactivate and retry as needed
            interval: Seconds between attempts
            retries: Maximum number of attempts

        Returns:
            The certificate as it was before deletion.

        """
        debug_message(self._state, "EnvCertificatesOps.delete_certificate: start")
        try:
            cert = CertificateResponse.model_validate(
                await self._api.get_certificate(certificate_id)
            )
            if not force:
                await self._api.delete_certificate(certificate_id)
                return cert
            if cert.active:
                cert = await self.deactivate_certificate(
                    certificate_id, wait=True, interval=interval, retries=retries
                )
            await self._delete_with_retry(certificate_id, interval, retries)
        except FrodoError as e:
            msg = f"Error deleting certificate {certificate_id}"
            raise FrodoError(msg, e) from e
        debug_message(self._state, "EnvCertificatesOps.delete_certificate: end")
        return cert

    async def _delete_with_retry(
        self, certificate_id: str, interval: float, retries: int
    ) -> None:
        remaining = retries
        while True:
            remaining -= 1
            await asyncio.sleep(interval)
            try:
                await self._api.delete_certificate(certificate_id)
                return
            except FrodoError as e:
                in_use = e.http_status == 500 and e.http_code == HTTP_SERVER_ERROR_CODE
                if not in_use or remaining <= 0:
                    debug_message(
                        self._state,
                        f"EnvCertificatesOps.delete_certificate: {e.message}, aborting",
                    )
                    raise
                debug_message(
                    self._state,
                    f"EnvCertificatesOps.delete_certificate: {e.message}, retrying...",
                )

    async def delete_certificates(
        self,
        force: bool = False,
        interval: float = DEFAULT_INTERVAL,
        retries: int = DEFAULT_RETRIES,
    ) -> list[CertificateResponse]:
        """Delete every certificate.

        With ``force``, active certificates are deactivated first and the
        deletes wait until every certificate is inactive and offline.

        Returns:
            The deleted certificates.

        Raises:
            FrodoError: Aggregating every failed delete.

        """
        debug_message(self._state, "EnvCertificatesOps.delete_certificates: start")
        errors: list[Exception] = []
        certs = await self.read_certificates()

        if force and not _inactive_and_offline(certs):
            await gather_settled(
                *(
                    self.deactivate_certificate(
                        cert.id, wait=True, interval=interval, retries=retries
                    )
                    for cert in certs
                    if cert.active
                )
            )
            polled, offline = await poll_until(
                self.read_certificates,
                _inactive_and_offline,
                interval=interval,
                retries=retries,
            )
            certs = polled if polled is not None else certs
            if not offline:
                errors.append(
                    FrodoError("Timeout waiting for deactivated certs to go offline")
                )

        deleted, rejected = await gather_settled(
            *(
                self.delete_certificate(
                    cert.id, force=force, interval=interval, retries=retries
                )
                for cert in certs
            )
        )
        errors.extend(rejected)
        if errors:
            msg = "Error deleting certificates"
            raise FrodoError(msg, errors)
        debug_message(self._state, "EnvCertificatesOps.delete_certificates: end")
        return deleted
