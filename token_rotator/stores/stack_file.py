"""YAML stack file store with Fernet-encrypted secrets.

Security Model:
- One file per stack: ``<work_dir>/Stack.<stack>.yaml``
- Plain values are stored as strings under ``config:``
- Secret values are stored as ``{secure: <token>}``, encrypted with Fernet
  (AES-128-CBC + HMAC)
- Encryption key derived from a passphrase with PBKDF2-HMAC-SHA256
- Salt stored in the file itself as ``encryptionsalt:``

File layout::

    encryptionsalt: 3q2+7w...
    config:
      npm-token:
        secure: gAAAAAB...
      npm-token-expires-at: "2024-01-31T00:00:00.000Z"
"""

import base64
import copy
import logging
import secrets
from pathlib import Path
from typing import Any, cast

import yaml
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from token_rotator.exceptions import ConfigKeyMissingError, EncryptionError, StoreError

logger = logging.getLogger(__name__)

SECURE_FIELD = "secure"


class StackFileStore:
    """Stack configuration kept in a local YAML file.

    This backend is useful when no infrastructure-automation CLI is
    installed, e.g. on a workstation keeping its own rotated tokens or in
    tests that need a real on-disk round trip.

    Security Considerations:
    - The passphrase must be protected
    - File permissions are restricted to 600 on every write
    - Non-secret entries (such as expiry timestamps) are readable in clear

    Example:
        >>> store = StackFileStore(Path("."), "prod", passphrase="correct horse")
        >>> store.set("npm-token", "npm_abc123", secret=True)
        >>> store.get("npm-token")
        'npm_abc123'
    """

    def __init__(self, work_dir: Path, stack: str, passphrase: str | None = None) -> None:
        """Initialize stack file store.

        Args:
            work_dir: Directory holding the stack file
            stack: Stack name
            passphrase: Passphrase for secret values. Only required once a
                secret value is read or written.
        """
        self.work_dir = work_dir
        self.stack = stack
        self.file_path = work_dir / f"Stack.{stack}.yaml"
        self._passphrase = passphrase
        self._fernet: Fernet | None = None
        self._document: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        return "stack-file"

    @staticmethod
    def _create_fernet(password: str, salt: bytes) -> Fernet:
        """Derive encryption key from passphrase.

        Uses PBKDF2-HMAC-SHA256 with 480,000 iterations (OWASP 2023 recommendation).
        """
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=480_000,
        )
        key = kdf.derive(password.encode("utf-8"))
        return Fernet(base64.urlsafe_b64encode(key))

    def _load(self) -> dict[str, Any]:
        """Load the stack document, creating an empty one if the file is absent.

        Raises:
            StoreError: If the file cannot be read or is not a YAML mapping
        """
        if self._document is not None:
            return self._document

        if not self.file_path.exists():
            self._document = {"config": {}}
            return self._document

        try:
            with open(self.file_path) as f:
                document = yaml.safe_load(f) or {}
        except OSError as e:
            raise StoreError(f"Cannot read stack file {self.file_path}: {e}") from e
        except yaml.YAMLError as e:
            raise StoreError(f"Invalid YAML in stack file {self.file_path}: {e}") from e

        if not isinstance(document, dict):
            raise StoreError(f"Stack file {self.file_path} must contain a YAML mapping")

        document.setdefault("config", {})
        if not isinstance(document["config"], dict):
            raise StoreError(f"'config' in {self.file_path} must be a mapping")

        self._document = cast(dict[str, Any], document)
        return self._document

    def _save(self, document: dict[str, Any]) -> None:
        """Write the stack document atomically.

        Raises:
            StoreError: If the file cannot be written
        """
        try:
            self.work_dir.mkdir(parents=True, exist_ok=True)
            temp_file = self.file_path.with_suffix(".tmp")
            with open(temp_file, "w") as f:
                yaml.safe_dump(document, f, default_flow_style=False, sort_keys=False)

            try:
                temp_file.chmod(0o600)
            except OSError as e:
                logger.warning(f"Could not set stack file permissions: {e}")

            temp_file.replace(self.file_path)
        except OSError as e:
            raise StoreError(f"Failed to write stack file {self.file_path}: {e}") from e

        self._document = document
        logger.debug(f"Saved stack file {self.file_path}")

    def _cipher(self) -> Fernet:
        """Return the Fernet cipher, generating a salt on first use.

        Raises:
            EncryptionError: If no passphrase was provided
        """
        if self._fernet is not None:
            return self._fernet

        if not self._passphrase:
            raise EncryptionError(
                f"A passphrase is required to access secrets in stack '{self.stack}'"
            )

        document = self._load()
        encoded_salt = document.get("encryptionsalt")
        if encoded_salt:
            salt = base64.b64decode(encoded_salt)
        else:
            salt = secrets.token_bytes(16)
            document["encryptionsalt"] = base64.b64encode(salt).decode("ascii")

        self._fernet = self._create_fernet(self._passphrase, salt)
        return self._fernet

    def get(self, key: str) -> str | None:
        entry = self._load()["config"].get(key)
        if entry is None:
            return None

        if isinstance(entry, dict):
            ciphertext = entry.get(SECURE_FIELD)
            if not isinstance(ciphertext, str):
                raise StoreError("Malformed secret entry", key=key)
            try:
                return self._cipher().decrypt(ciphertext.encode("ascii")).decode("utf-8")
            except InvalidToken as e:
                raise EncryptionError("Invalid passphrase or corrupted secret", key=key) from e

        return str(entry)

    def require_secret(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise ConfigKeyMissingError(f"Missing required configuration in stack '{self.stack}'", key=key)
        return value

    def set(self, key: str, value: str, secret: bool = False) -> None:
        cipher = self._cipher() if secret else None
        # The cached document only changes once the write succeeds
        document = copy.deepcopy(self._load())

        if cipher is not None:
            ciphertext = cipher.encrypt(value.encode("utf-8")).decode("ascii")
            document["config"][key] = {SECURE_FIELD: ciphertext}
        else:
            document["config"][key] = value

        self._save(document)
        logger.info(f"Stored {'secret' if secret else 'plain'} value in stack file: {key}")
