"""
Access Gate

A short numeric code guards the sensitive flows: exporting the ledger,
importing a backup over it, and opening the roster editor.

The first guarded action creates the code (entered twice); every later one
must present it. The engine never sees any of this; the gate runs before
the engine is asked for anything.

The code is kept only as a salted PBKDF2-SHA256 digest.
"""

from enum import Enum
import hashlib
import hmac
import json
from pathlib import Path
import re
import secrets
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from src.log import get_logger


logger = get_logger(__name__)

ACCESS_CODE_PATTERN = re.compile(r"^[0-9]{4}$")
_HASH_ITERATIONS = 100_000


class AccessGateError(Exception):
    """Base exception for access gate failures."""
    pass


class InvalidAccessCodeError(AccessGateError):
    """A new code is malformed or its confirmation does not match."""
    pass


class AccessDeniedError(AccessGateError):
    """The presented code is wrong."""
    pass


class GuardedAction(str, Enum):
    """Flows that require the access code."""
    EXPORT = "export"
    IMPORT = "import"
    EDIT_ROSTER = "edit_roster"


class AccessCredential(BaseModel):
    """Stored form of the access code."""

    salt: str = Field(..., description="Hex-encoded random salt")
    digest: str = Field(..., description="Hex-encoded PBKDF2-SHA256 digest")


def _hash_code(code: str, salt: bytes) -> str:
    return hashlib.pbkdf2_hmac("sha256", code.encode("ascii"), salt, _HASH_ITERATIONS).hex()


def validate_code_format(code: str) -> None:
    """
    Raises:
        InvalidAccessCodeError: Unless the code is exactly four digits
    """
    if not isinstance(code, str) or not ACCESS_CODE_PATTERN.match(code):
        raise InvalidAccessCodeError("The access code must be exactly 4 digits")


class AccessGate:
    """
    Guards sensitive actions behind a 4-digit code.

    If `credential_path` is given the credential is loaded from and saved
    to that file; otherwise it only lives as long as the gate.
    """

    def __init__(
        self,
        credential: Optional[AccessCredential] = None,
        credential_path: Optional[Path] = None,
    ):
        self._credential_path = Path(credential_path) if credential_path else None
        self._credential = credential
        if self._credential is None and self._credential_path is not None:
            self._credential = self._load_credential()

    @property
    def is_configured(self) -> bool:
        """Has a code been created yet?"""
        return self._credential is not None

    @property
    def credential(self) -> Optional[AccessCredential]:
        return self._credential

    def _load_credential(self) -> Optional[AccessCredential]:
        if not self._credential_path.exists():
            return None
        try:
            return AccessCredential.model_validate_json(
                self._credential_path.read_text(encoding="utf-8")
            )
        except (OSError, ValidationError) as e:
            raise AccessGateError(f"Unreadable access credential: {e}") from e

    def _save_credential(self) -> None:
        if self._credential_path is None:
            return
        self._credential_path.parent.mkdir(parents=True, exist_ok=True)
        self._credential_path.write_text(
            json.dumps(self._credential.model_dump()),
            encoding="utf-8",
        )

    def create_code(self, code: str, confirmation: str) -> None:
        """
        Set the access code.

        Raises:
            InvalidAccessCodeError: If the code is malformed or the two
                entries differ
        """
        validate_code_format(code)
        if code != confirmation:
            raise InvalidAccessCodeError("The access codes do not match")

        salt = secrets.token_bytes(16)
        self._credential = AccessCredential(salt=salt.hex(), digest=_hash_code(code, salt))
        self._save_credential()
        logger.info("access_code_created")

    def verify(self, code: str) -> None:
        """
        Check a presented code.

        Raises:
            AccessDeniedError: If no code exists yet or the code is wrong
        """
        if self._credential is None:
            raise AccessDeniedError("No access code has been set")
        if not isinstance(code, str) or not ACCESS_CODE_PATTERN.match(code):
            raise AccessDeniedError("The access code is incorrect")

        expected = self._credential.digest
        actual = _hash_code(code, bytes.fromhex(self._credential.salt))
        if not hmac.compare_digest(expected, actual):
            raise AccessDeniedError("The access code is incorrect")

    def authorize(
        self,
        action: GuardedAction,
        code: str,
        confirmation: Optional[str] = None,
    ) -> None:
        """
        Let one guarded action through, or raise.

        Before any code exists, the presented code (plus its confirmation)
        becomes the code and the action is allowed.

        Raises:
            InvalidAccessCodeError: While creating a code
            AccessDeniedError: If the code is wrong
        """
        try:
            if self.is_configured:
                self.verify(code)
            else:
                self.create_code(code, confirmation if confirmation is not None else "")
        except AccessGateError as e:
            logger.warning("access_denied", action=action.value, reason=str(e))
            raise

        logger.info("access_granted", action=action.value)
