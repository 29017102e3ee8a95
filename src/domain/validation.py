"""
Input shape validation shared by the registry components.

Length limits are measured in UTF-8 bytes.
"""

from .exceptions import InvalidData

MAX_NAME_BYTES = 253
MAX_METADATA_BYTES = 512
MAX_COMMENT_BYTES = 256
MAX_DETAILS_BYTES = 256
MAX_TOKEN_BYTES = 256
MAX_IDENTITY_CHARS = 128

MIN_RATING = -5
MAX_RATING = 5
MIN_REASON_CODE = 0
MAX_REASON_CODE = 255


def normalize_name(name: str) -> str:
    """
    Normalize a domain name for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return name.strip().lower()


def require_text(value: str, field: str, max_bytes: int, allow_empty: bool = False) -> str:
    if not isinstance(value, str):
        raise InvalidData(f"{field} must be text")
    if not value and not allow_empty:
        raise InvalidData(f"{field} must not be empty")
    try:
        encoded = value.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidData(f"{field} must be valid UTF-8") from None
    if len(encoded) > max_bytes:
        raise InvalidData(f"{field} exceeds {max_bytes} bytes")
    return value


def require_name(name: str) -> str:
    """Normalize and bound-check a domain name."""
    if not isinstance(name, str):
        raise InvalidData("name must be text")
    return require_text(normalize_name(name), "name", MAX_NAME_BYTES)


def is_valid_identity(identity: str) -> bool:
    return (
        isinstance(identity, str)
        and bool(identity.strip())
        and identity == identity.strip()
        and len(identity) <= MAX_IDENTITY_CHARS
        and _is_utf8(identity)
    )


def _is_utf8(value: str) -> bool:
    # Lone surrogates are valid str but cannot be encoded or hashed
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
