"""Numeric one-time-passcode generation."""

import secrets

DEFAULT_CODE_LENGTH = 6


def generate_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """Return a uniformly random decimal code of exactly *length* digits.

    Leading zeros are kept (``"004821"`` is as likely as ``"904821"``).
    """
    if length < 1:
        raise ValueError("Code length must be positive")
    return f"{secrets.randbelow(10 ** length):0{length}d}"
