"""Enumerations shared by models, schemas and services."""

from __future__ import annotations

from enum import Enum


class HabitCategory(str, Enum):
    """Broad bucket a habit belongs to."""

    FITNESS = "fitness"
    NUTRITION = "nutrition"
    MINDFULNESS = "mindfulness"
    PRODUCTIVITY = "productivity"
    OTHER = "other"


class HabitColor(str, Enum):
    """Display colour of a habit card."""

    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    PURPLE = "purple"
    PINK = "pink"
    ORANGE = "orange"


class FrequencyType(str, Enum):
    """Supported frequency options for habits."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class GoalRelationship(str, Enum):
    """How a habit relates to a goal."""

    SUPPORTS = "supports"
    CONFLICTS = "conflicts"
    PREREQUISITE = "prerequisite"


class SortField(str, Enum):
    NAME = "name"
    CREATED_AT = "createdAt"
    CATEGORY = "category"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class GroupBy(str, Enum):
    """Bucket size for completion summaries."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


__all__ = [
    "FrequencyType",
    "GoalRelationship",
    "GroupBy",
    "HabitCategory",
    "HabitColor",
    "SortField",
    "SortOrder",
]
