"""
Wire framing
============
Canonical JSON: sorted keys, no whitespace, UTF-8.

    {"data": "<b64>", "key": "<b64>", "kid": "<hex>",
     "timestamp": "<ISO-8601 UTC>", "v": 1}

data       base64(nonce || ciphertext || tag)
key        base64(RSA-OAEP wrapped symmetric key)
kid        id of the public key that wrapped it
timestamp  encode time, authenticated as GCM associated data
v          frame version

Unknown fields are ignored so newer senders can add optional ones.
"""

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Union

from .config import FRAME_VERSION
from .errors import MalformedMessageError, UnsupportedVersionError

REQUIRED_FIELDS = ("data", "key", "kid", "timestamp", "v")

SUPPORTED_VERSIONS = (FRAME_VERSION,)


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64decode(field: str, value: str) -> bytes:
    """Strict base64: only the canonical encoding of the bytes is accepted."""
    try:
        raw = base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise MalformedMessageError(f"Field {field!r} is not valid base64.") from exc
    # Nonzero padding bits decode to the same bytes.
    if b64encode(raw) != value:
        raise MalformedMessageError(f"Field {field!r} is not canonical base64.")
    return raw


def canonical_json_bytes(obj: dict) -> bytes:
    return json.dumps(obj, sort_keys=True, separators=(",", ":")).encode("utf-8")


def format_timestamp(when: datetime) -> str:
    return when.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """ISO-8601 instant; a trailing Z is accepted, a missing offset means UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        when = datetime.fromisoformat(text)
    except ValueError as exc:
        raise MalformedMessageError(f"Invalid timestamp: {value!r}") from exc
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


@dataclass(frozen=True)
class FramedMessage:
    ciphertext: bytes
    wrapped_key: bytes
    timestamp: datetime
    kid: str
    version: int = FRAME_VERSION

    def header_bytes(self) -> bytes:
        """Associated data binding the cleartext header to the ciphertext."""
        return canonical_json_bytes({
            "kid": self.kid,
            "timestamp": format_timestamp(self.timestamp),
            "v": self.version,
        })

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": b64encode(self.ciphertext),
            "key": b64encode(self.wrapped_key),
            "kid": self.kid,
            "timestamp": format_timestamp(self.timestamp),
            "v": self.version,
        }

    def to_bytes(self) -> bytes:
        return canonical_json_bytes(self.to_dict())

    def to_json(self) -> str:
        return self.to_bytes().decode("utf-8")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "FramedMessage":
        if not isinstance(raw, dict):
            raise MalformedMessageError("Frame must be a JSON object.")
        missing = [name for name in REQUIRED_FIELDS if name not in raw]
        if missing:
            raise MalformedMessageError(f"Frame missing required fields: {missing}")

        version = raw["v"]
        if isinstance(version, bool) or not isinstance(version, int):
            raise MalformedMessageError("Field 'v' must be an integer.")
        if version not in SUPPORTED_VERSIONS:
            raise UnsupportedVersionError(version)

        for name in ("data", "key", "kid", "timestamp"):
            if not isinstance(raw[name], str):
                raise MalformedMessageError(f"Field {name!r} must be a string.")

        return cls(
            ciphertext=b64decode("data", raw["data"]),
            wrapped_key=b64decode("key", raw["key"]),
            timestamp=parse_timestamp(raw["timestamp"]),
            kid=raw["kid"],
            version=version,
        )

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "FramedMessage":
        try:
            if isinstance(data, (bytes, bytearray)):
                data = bytes(data).decode("utf-8")
            raw = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedMessageError(f"Invalid frame JSON: {exc}") from exc
        return cls.from_dict(raw)

    @classmethod
    def parse(cls, message) -> "FramedMessage":
        """Accept a FramedMessage, a dict, or serialized JSON."""
        if isinstance(message, cls):
            return message
        if isinstance(message, dict):
            return cls.from_dict(message)
        if isinstance(message, (str, bytes, bytearray)):
            return cls.from_json(message)
        raise MalformedMessageError(f"Cannot parse frame from {type(message).__name__}.")
