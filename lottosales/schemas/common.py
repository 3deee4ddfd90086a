"""Field types shared by several schemas."""

from __future__ import annotations

from marshmallow import fields

from lottosales.utils.digits import is_digit_string


class DigitString(fields.Field):
    """Accepts `7`, `"07"` or `" 07 "`; loads as the trimmed digit string."""

    default_error_messages = {"invalid": "Must contain only digits."}

    def _deserialize(self, value, attr, data, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(value, bool):
            raise self.make_error("invalid")
        raw = str(value).strip()
        if not is_digit_string(raw):
            raise self.make_error("invalid")
        return raw

    def _serialize(self, value, attr, obj, **kwargs):  # type: ignore[no-untyped-def]
        return None if value is None else str(value)


def enum_value(value) -> str | None:  # type: ignore[no-untyped-def]
    return None if value is None else str(getattr(value, "value", value))
