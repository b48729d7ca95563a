"""Collection and property name rules enforced before any request is made."""

from __future__ import annotations

import re
from typing import Any, Final

from keen_client.errors import ValidationError

MAX_COLLECTION_NAME_LENGTH: Final = 64
MAX_PROPERTY_NAME_LENGTH: Final = 256

_NON_ASCII: Final = re.compile(r"[^\x00-\x7F]")


def validate_collection_name(name: Any) -> str:
    """Return *name* unchanged if it is a usable collection name.

    Rules: non-blank string, ASCII only, at most 64 characters, and no
    leading ``$``.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("A collection name is required.", name=name)
    if len(name) > MAX_COLLECTION_NAME_LENGTH:
        raise ValidationError(
            f"Collection name may not be longer than {MAX_COLLECTION_NAME_LENGTH} characters.",
            name=name,
        )
    if _NON_ASCII.search(name):
        raise ValidationError("Collection name must contain only ASCII characters.", name=name)
    if name.startswith("$"):
        raise ValidationError("Collection name may not start with '$'.", name=name)
    return name


def validate_property_name(name: Any) -> str:
    """Return *name* unchanged if it is a usable property name.

    Rules: non-blank string, at most 256 characters, no ``.`` and no
    leading ``$``.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("A property name is required.", name=name)
    if len(name) > MAX_PROPERTY_NAME_LENGTH:
        raise ValidationError(
            f"Property name may not be longer than {MAX_PROPERTY_NAME_LENGTH} characters.",
            name=name,
        )
    if "." in name:
        raise ValidationError("Property name may not contain '.'.", name=name)
    if name.startswith("$"):
        raise ValidationError("Property name may not start with '$'.", name=name)
    return name


__all__ = [
    "MAX_COLLECTION_NAME_LENGTH",
    "MAX_PROPERTY_NAME_LENGTH",
    "validate_collection_name",
    "validate_property_name",
]
