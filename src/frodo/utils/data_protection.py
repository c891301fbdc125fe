"""Symmetric encryption for secrets stored in connection profiles.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import base64
import os
import secrets
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from frodo.constants import FRODO_MASTER_KEY_KEY
from frodo.exceptions import FrodoError


class DataProtection:
    """Encrypt and decrypt strings with a key derived from the master key.

    The master key comes from ``FRODO_MASTER_KEY`` when set, otherwise from
    the master key file, which is created with a random key on first use.
    """

    def __init__(self, master_key_path: str | Path) -> None:
        self.master_key_path = Path(master_key_path)
        self._fernet: Fernet | None = None

    def _get_master_key(self) -> str:
        env_key = os.environ.get(FRODO_MASTER_KEY_KEY)
        if env_key:
            return env_key
        if self.master_key_path.exists():
            return self.master_key_path.read_text(encoding="utf-8").strip()
        master_key = base64.b64encode(secrets.token_bytes(32)).decode("ascii")
        self.master_key_path.parent.mkdir(parents=True, exist_ok=True)
        self.master_key_path.write_text(master_key, encoding="utf-8")
        self.master_key_path.chmod(0o600)
        return master_key

    def _get_fernet(self) -> Fernet:
        if self._fernet is None:
            kdf = HKDF(
                algorithm=hashes.SHA256(),
                length=32,
                salt=b"frodo",
                info=b"frodo-connection-profiles",
            )
            key = kdf.derive(self._get_master_key().encode("utf-8"))
            self._fernet = Fernet(base64.urlsafe_b64encode(key))
        return self._fernet

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string.

        Returns:
            Fernet token as text.

        """
        return self._get_fernet().encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        """Decrypt a string produced by :meth:`encrypt`.

        Raises:
            FrodoError: If the token was encrypted with a different master key.

        """
        try:
            return self._get_fernet().decrypt(token.encode("ascii")).decode("utf-8")
        except InvalidToken as e:
            msg = "Unable to decrypt value, the master key may have changed"
            raise FrodoError(msg, e) from e
