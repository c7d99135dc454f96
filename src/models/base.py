"""Base record classes for all dashboard models."""

import datetime
from abc import abstractmethod

from pydantic import BaseModel, ConfigDict, Field, field_validator


def date_to_text(value: object) -> object:
    """Store date-like values as ISO text; leave anything else untouched.

    Date fields keep the raw text so that an unparsable value never
    rejects the whole record.
    """
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


class BaseRecord(BaseModel):
    """Base class for all dashboard records.

    Records are immutable value snapshots produced by the record source.
    They are replaced wholesale on each refetch, never patched in place.

    Provides:
    - String ID (upstream integer keys are coerced)
    - Frozen, hashable instances
    - Standard serialization config
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        from_attributes=True,
    )

    id: str = Field(min_length=1, description="Record identifier from the source")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: object) -> object:
        """Accept integer primary keys."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class TerritoryRecord(BaseRecord):
    """A record tied to one territory by display name.

    ``territory`` is a display name, not a foreign key. Grouping and
    filtering compare it by plain string equality.
    """

    territory: str = Field(description="Territory display name")

    @property
    @abstractmethod
    def calendar_date(self) -> datetime.date | None:
        """Calendar date used for date-bounded filters and trends."""
