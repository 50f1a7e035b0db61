# ABOUTME: Canonical identifier derivation shared by every stage that keys on element names
# ABOUTME: Element table, ingredient resolution and reverse index all go through normalize_identifier

import re

_SEPARATOR = "-"
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def normalize_identifier(name: str) -> str:
    """Turn a display name into its slug-form identifier.

    "Philosopher's Stone" -> "philosopher-s-stone". The result is idempotent
    under a second application and may be empty for names without any ASCII
    letters or digits.
    """
    slug = _NON_ALPHANUMERIC.sub(_SEPARATOR, name.lower())
    return slug.strip(_SEPARATOR)
