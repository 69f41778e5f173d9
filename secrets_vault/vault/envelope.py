"""
Vault Envelope — the versioned on-disk structure around the ciphertext.

File format (version 1), pretty-printed JSON:

    {
      "version": 1,
      "salt": "<base64, 16 bytes>",
      "nonce": "<base64, 12 bytes>",
      "data": "<base64, AES-GCM ciphertext + 16-byte tag>"
    }

``version`` pins both this layout and the KDF parameter set, so a future
format cannot silently misdecode an old vault.
"""
import base64
import binascii
import logging

import orjson
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..conf import LOGGER_NAME
from ..exceptions import EnvelopeCorrupt, SerializationError
from .crypto import CURRENT_VERSION, KDF_PARAMS, NONCE_SIZE, SALT_SIZE, TAG_SIZE

logger = logging.getLogger(LOGGER_NAME)

_FIELDS = ("version", "salt", "nonce", "data")


def _b64encode(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


def _b64decode(name: str, value) -> bytes:
    if not isinstance(value, str):
        raise EnvelopeCorrupt(f"failed to decode {name}: not a string")
    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as err:
        raise EnvelopeCorrupt(f"failed to decode {name}: {err}") from err
    # reject non-canonical padding bits so every text edit is detected
    if _b64encode(decoded) != value:
        raise EnvelopeCorrupt(f"failed to decode {name}: non-canonical base64")
    return decoded


class Envelope(BaseModel):
    """Validated vault envelope."""

    model_config = ConfigDict(frozen=True)

    version: int = CURRENT_VERSION
    salt: bytes
    nonce: bytes
    ciphertext: bytes

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: int) -> int:
        """Only versions with a pinned KDF parameter set are supported."""
        if v not in KDF_PARAMS:
            raise ValueError(f"unsupported envelope version {v}")
        return v

    @field_validator("salt")
    @classmethod
    def validate_salt(cls, v: bytes) -> bytes:
        if len(v) != SALT_SIZE:
            raise ValueError(f"salt must be {SALT_SIZE} bytes, got {len(v)}")
        return v

    @field_validator("nonce")
    @classmethod
    def validate_nonce(cls, v: bytes) -> bytes:
        if len(v) != NONCE_SIZE:
            raise ValueError(f"nonce must be {NONCE_SIZE} bytes, got {len(v)}")
        return v

    @field_validator("ciphertext")
    @classmethod
    def validate_ciphertext(cls, v: bytes) -> bytes:
        if len(v) < TAG_SIZE:
            raise ValueError(
                f"ciphertext too short: {len(v)} bytes (minimum {TAG_SIZE})"
            )
        return v

    def encode(self) -> bytes:
        """Serialize the envelope to its on-disk JSON form."""
        doc = {
            "version": self.version,
            "salt": _b64encode(self.salt),
            "nonce": _b64encode(self.nonce),
            "data": _b64encode(self.ciphertext),
        }
        try:
            return orjson.dumps(doc, option=orjson.OPT_INDENT_2)
        except orjson.JSONEncodeError as err:
            raise SerializationError(f"failed to serialize vault: {err}") from err

    @classmethod
    def decode(cls, raw: bytes) -> "Envelope":
        """Parse and validate an on-disk envelope.

        Raises:
            EnvelopeCorrupt: If the structure is malformed in any way.
        """
        try:
            doc = orjson.loads(raw)
        except orjson.JSONDecodeError as err:
            raise EnvelopeCorrupt(f"failed to parse vault file: {err}") from err
        if not isinstance(doc, dict):
            raise EnvelopeCorrupt("failed to parse vault file: not an object")
        missing = [name for name in _FIELDS if name not in doc]
        if missing:
            raise EnvelopeCorrupt(
                f"failed to parse vault file: missing {', '.join(missing)}"
            )
        version = doc["version"]
        # bool is an int subclass
        if not isinstance(version, int) or isinstance(version, bool):
            raise EnvelopeCorrupt("failed to parse vault file: bad version")
        try:
            envelope = cls(
                version=version,
                salt=_b64decode("salt", doc["salt"]),
                nonce=_b64decode("nonce", doc["nonce"]),
                ciphertext=_b64decode("data", doc["data"]),
            )
        except ValidationError as err:
            raise EnvelopeCorrupt(
                f"failed to parse vault file: {err.errors()[0]['msg']}"
            ) from err
        logger.debug("Decoded envelope v%d", envelope.version)
        return envelope
