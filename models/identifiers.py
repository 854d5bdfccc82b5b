"""Opaque identifier generation."""

import random
import string

_ALPHABET = string.digits + string.ascii_lowercase


def new_id(length: int = 7) -> str:
    """Short random base-36 id. Unique enough for one garage, not for security."""
    return "".join(random.choices(_ALPHABET, k=length))
