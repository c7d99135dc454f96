"""Territory model."""

from pydantic import Field

from src.models.base import BaseRecord


class Territory(BaseRecord):
    """A named geographic or administrative grouping.

    ``name`` is the grouping key used throughout the dashboard. Uniqueness
    of names within a dataset is assumed but not enforced.
    """

    name: str = Field(description="Territory display name")
