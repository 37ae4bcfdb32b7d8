"""
Request header helpers — framework-agnostic, pure functions.

Header names are matched case-insensitively, so ``X-Token-ReCaptcha`` and
``x-token-recaptcha`` are the same header.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Tuple, Union

from errors import ValidationError

RECAPTCHA_HEADER = "x-token-recaptcha"

HeaderSource = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def _iter_headers(headers: HeaderSource) -> Iterable[Tuple[str, str]]:
    if isinstance(headers, Mapping):
        return headers.items()
    return headers


def find_header(headers: HeaderSource, name: str) -> Optional[str]:
    """Return the value of header *name* (any casing), or None if absent.

    An empty value is returned as ``""``, not None.
    """
    wanted = name.lower()
    for key, value in _iter_headers(headers):
        if key.lower() == wanted:
            return value
    return None


def extract_token(headers: HeaderSource, header_key: str = RECAPTCHA_HEADER) -> str:
    """Return the reCAPTCHA token carried in *header_key*.

    Raises:
        ValidationError: the header is not present at all. An empty value is
            passed through; siteverify reports it as a missing/invalid response.
    """
    token = find_header(headers, header_key)
    if token is None:
        raise ValidationError("ReCaptcha token not provided.", field=header_key)
    return token
