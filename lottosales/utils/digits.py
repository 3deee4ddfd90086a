"""Lottery numbers are strings of ASCII digits; other Unicode digits are rejected."""

from __future__ import annotations

import re

_DIGITS = re.compile(r"[0-9]+")
NON_DIGIT = re.compile(r"[^0-9]")


def is_digit_string(value: str) -> bool:
    return _DIGITS.fullmatch(value) is not None
