"""
View State Schemas
==================
Session-scoped presentation state, passed explicitly into render and
navigation calls instead of living on the view objects.
"""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ViewType = Literal["week", "month", "year", "progress", "spec"]
DisplayMode = Literal["week", "month", "year"]


class DateRange(BaseModel):
    start: date
    end: date


class ViewState(BaseModel):
    """What the user is looking at. Immutable; navigation returns a copy."""

    model_config = ConfigDict(frozen=True)

    current_view: ViewType = "week"
    display_mode: DisplayMode = "week"
    selected_date: date = Field(default_factory=date.today)
    selected_exercise: Optional[str] = None
    selected_muscle_group: Optional[str] = None
    date_range: Optional[DateRange] = None
