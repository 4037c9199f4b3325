"""Enumerated types used across projectsync."""

from __future__ import annotations

from enum import StrEnum


class FieldType(StrEnum):
    """Project v2 custom field data types that can be declared in config."""

    SINGLE_SELECT = "SINGLE_SELECT"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    ITERATION = "ITERATION"


class OptionColor(StrEnum):
    """The eight colors GitHub accepts for single-select options."""

    BLUE = "BLUE"
    GRAY = "GRAY"
    GREEN = "GREEN"
    ORANGE = "ORANGE"
    PINK = "PINK"
    PURPLE = "PURPLE"
    RED = "RED"
    YELLOW = "YELLOW"


class OwnerType(StrEnum):
    """Kind of account that owns a project."""

    ORGANIZATION = "organization"
    USER = "user"
