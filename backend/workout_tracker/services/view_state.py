"""
View Navigation
===============
Pure transitions over ``ViewState``: step the calendar by one period,
jump to today, switch display mode, and resolve which dates (and which
entries) the current state shows.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Optional

from workout_tracker.config import get_settings
from workout_tracker.models.view import DisplayMode, ViewState
from workout_tracker.models.workout import WorkoutData
from workout_tracker.services.aggregation import get_data_for_date_range
from workout_tracker.services.dates import (
    get_month_dates,
    get_month_name,
    get_week_dates,
    get_year_dates,
)


def initial_view_state(today: Optional[date] = None) -> ViewState:
    """Fresh state using the configured default view."""
    settings = get_settings()
    current_view = settings.default_view
    if current_view not in ("week", "month", "year", "progress", "spec"):
        current_view = "week"
    display_mode = current_view if current_view in ("week", "month", "year") else "week"
    return ViewState(
        current_view=current_view,
        display_mode=display_mode,
        selected_date=today or date.today(),
    )


def _shift_months(d: date, months: int) -> date:
    """Move *d* by whole months, clamping the day to the target month's length."""
    month_index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _shift(state: ViewState, step: int) -> ViewState:
    current = state.selected_date
    if state.display_mode == "week":
        moved = current + timedelta(days=7 * step)
    elif state.display_mode == "month":
        moved = _shift_months(current, step)
    else:
        moved = _shift_months(current, 12 * step)
    return state.model_copy(update={"selected_date": moved})


def navigate_next(state: ViewState) -> ViewState:
    return _shift(state, 1)


def navigate_previous(state: ViewState) -> ViewState:
    return _shift(state, -1)


def navigate_today(state: ViewState, today: Optional[date] = None) -> ViewState:
    return state.model_copy(update={"selected_date": today or date.today()})


def with_display_mode(state: ViewState, mode: DisplayMode, anchor: Optional[date] = None) -> ViewState:
    """Switch calendar granularity; *anchor* re-centres on a clicked month/day."""
    update: dict = {"display_mode": mode}
    if anchor is not None:
        update["selected_date"] = anchor
    return state.model_copy(update=update)


def visible_dates(state: ViewState) -> list[str]:
    if state.display_mode == "week":
        return get_week_dates(state.selected_date)
    if state.display_mode == "month":
        return get_month_dates(state.selected_date)
    return get_year_dates(state.selected_date.year)


def visible_data(state: ViewState, data: WorkoutData) -> WorkoutData:
    """Entries inside the visible period, or the explicit date range if set."""
    if state.date_range is not None:
        return get_data_for_date_range(data, state.date_range.start, state.date_range.end)
    dates = visible_dates(state)
    return get_data_for_date_range(data, dates[0], dates[-1])


def period_title(state: ViewState, language: str = "ru") -> str:
    """Human label for the visible period, e.g. ``06.10 – 12.10.2025``."""
    d = state.selected_date
    if state.display_mode == "week":
        dates = get_week_dates(d)
        first, last = dates[0], dates[-1]
        return f"{first[8:10]}.{first[5:7]} – {last[8:10]}.{last[5:7]}.{last[:4]}"
    if state.display_mode == "month":
        return f"{get_month_name(d, language)} {d.year}"
    return str(d.year)

