import re
import secrets
import time
from typing import Callable

from upload_broker.core.errors import ValidationError

NamespaceValidator = Callable[[str], bool]
Clock = Callable[[], float]
TokenFactory = Callable[[], str]

NAMESPACE_FIELD = "gameId"

_SEPARATORS = re.compile(r"[\\/]")
_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9._-]")


def pattern_validator(pattern: str) -> NamespaceValidator:
    compiled = re.compile(pattern)

    def _validate(namespace_id: str) -> bool:
        return compiled.fullmatch(namespace_id) is not None

    return _validate


DIGITS_PATTERN = r"^[0-9]+$"

digits_only = pattern_validator(DIGITS_PATTERN)


def namespace_validator(pattern: str) -> NamespaceValidator:
    if pattern == DIGITS_PATTERN:
        return digits_only
    return pattern_validator(pattern)


def default_token() -> str:
    return secrets.token_hex(4)


def sanitize_filename(filename: str) -> str:
    name = _SEPARATORS.sub("-", filename)
    name = _WHITESPACE.sub("_", name)
    name = _DISALLOWED.sub("", name)
    return name or "file"


def validate_namespace_id(
    namespace_id: str | None,
    validator: NamespaceValidator = digits_only,
) -> str:
    cleaned = (namespace_id or "").strip()
    if not cleaned:
        raise ValidationError(f"{NAMESPACE_FIELD} is required", field=NAMESPACE_FIELD)
    # Whatever the configured policy, the id must stay a single path segment.
    if _SEPARATORS.search(cleaned) or cleaned in {".", ".."} or not validator(cleaned):
        message = (
            f"{NAMESPACE_FIELD} must contain only digits"
            if validator is digits_only
            else f"{NAMESPACE_FIELD} contains invalid characters"
        )
        raise ValidationError(message, field=NAMESPACE_FIELD)
    return cleaned


def derive_key(
    namespace_id: str,
    file_name: str,
    *,
    prefix: str = "games",
    validator: NamespaceValidator = digits_only,
    clock: Clock = time.time,
    token_factory: TokenFactory = default_token,
) -> str:
    """Build ``<prefix>/<namespace>/<millis>-<token>-<name>`` for a new upload.

    The millisecond timestamp and random token keep concurrent uploads of the
    same file from colliding.
    """
    namespace = validate_namespace_id(namespace_id, validator)
    safe_name = sanitize_filename(file_name)
    millis = int(clock() * 1000)
    parts = [segment for segment in (prefix.strip("/"), namespace) if segment]
    return "/".join([*parts, f"{millis}-{token_factory()}-{safe_name}"])
