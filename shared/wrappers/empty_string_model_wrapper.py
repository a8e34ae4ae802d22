from datetime import date, datetime
import re
from uuid import UUID
from pydantic import BaseModel, model_validator
from typing import Any, List, Union, get_args, get_origin

INVISIBLE_CHARS_PATTERN = re.compile(
    r'[‎‏‪-‮⁦-⁩﻿]')


def deep_clean(value: Any):
    """Recursively convert empty strings to None and strip invisible chars."""

    if isinstance(value, BaseModel):
        data = value.model_dump()
        cleaned = deep_clean(data)
        return type(value)(**cleaned)

    if isinstance(value, dict):
        return {k: deep_clean(v) for k, v in value.items()}

    if isinstance(value, list):
        return [deep_clean(v) for v in value]

    if isinstance(value, str):
        cleaned = INVISIBLE_CHARS_PATTERN.sub("", value).strip()
        return None if cleaned == "" else cleaned

    return value


def safe_parse_date(value: Any, as_datetime: bool = False):
    """Convert date strings to date/datetime, return None if invalid."""
    if value is None or value == "":
        return None

    if isinstance(value, (date, datetime)):
        return value

    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        return None

    return parsed if as_datetime else parsed.date()


def _date_kind(annotation):
    origin = get_origin(annotation)
    args = get_args(annotation) if origin is Union else (annotation,)
    if datetime in args:
        return datetime
    if date in args:
        return date
    return None


class EmptyStringModel(BaseModel):
    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    # STEP 1: Pre-clean input
    @model_validator(mode="before")
    @classmethod
    def clean_input(cls, values):
        if isinstance(values, dict):
            return deep_clean(values)
        return values

    # STEP 2: Convert invalid date strings into None
    @model_validator(mode="before")
    @classmethod
    def fix_dates(cls, values):
        if not isinstance(values, dict):
            return values

        for field_name, field in cls.model_fields.items():
            kind = _date_kind(field.annotation)
            if kind and field_name in values:
                values[field_name] = safe_parse_date(
                    values[field_name], as_datetime=kind is datetime)

        return values

    # STEP 3: After validation, swap None for UI friendly defaults
    @model_validator(mode="after")
    def finalize_nulls(self):
        for field_name, field in type(self).model_fields.items():
            if getattr(self, field_name) is not None:
                continue

            annotation = field.annotation
            origin = get_origin(annotation)
            args = get_args(annotation)

            # Dates stay None so the DB receives NULL
            if _date_kind(annotation):
                continue

            if origin in (list, List) or annotation in (list, List):
                object.__setattr__(self, field_name, [])
            elif annotation in (str, UUID) or (
                    origin is Union and any(a in (str, UUID) for a in args)):
                object.__setattr__(self, field_name, "")

        return self
