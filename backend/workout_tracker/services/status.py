"""
Workout Status Helpers
======================
The four statuses are freely settable; the only fixed ordering is the
"advance to next" cycle used by one-click status toggles:

    planned -> done -> skipped -> illness -> planned
"""

from __future__ import annotations

from typing import Optional

from workout_tracker.models.workout import DEFAULT_STATUS, VALID_STATUSES, WorkoutStatus

STATUS_ORDER: tuple[WorkoutStatus, ...] = ("planned", "done", "skipped", "illness")

STATUS_LABELS: dict[str, dict[str, str]] = {
    "ru": {
        "done": "Выполнено",
        "planned": "Запланировано",
        "skipped": "Пропущено",
        "illness": "Болезнь",
    },
    "en": {
        "done": "Done",
        "planned": "Planned",
        "skipped": "Skipped",
        "illness": "Illness",
    },
}

STATUS_COLORS: dict[str, str] = {
    "done": "#28A745",
    "planned": "#007BFF",
    "skipped": "#FFC107",
    "illness": "#DC3545",
}

MUSCLE_GROUP_COLORS: dict[str, str] = {
    "грудь": "#FF6B6B",
    "спина": "#4ECDC4",
    "ноги": "#45B7D1",
    "плечи": "#96CEB4",
    "руки": "#FFEAA7",
    "пресс": "#DDA0DD",
    "кардио": "#98D8C8",
    "другое": "#DCDCDC",
}


def normalise_status(status: Optional[str]) -> WorkoutStatus:
    return status if status in VALID_STATUSES else DEFAULT_STATUS


def next_status(status: Optional[str]) -> WorkoutStatus:
    """The status after *status* in the toggle cycle.

    None or an unknown value advances as if it were ``planned``.
    """
    index = STATUS_ORDER.index(normalise_status(status))
    return STATUS_ORDER[(index + 1) % len(STATUS_ORDER)]


def status_to_class(status: Optional[str]) -> str:
    return f"status-{normalise_status(status)}"


def status_to_label(status: Optional[str], language: str = "ru") -> str:
    labels = STATUS_LABELS.get(language, STATUS_LABELS["ru"])
    return labels[normalise_status(status)]


def muscle_group_color(group: str) -> Optional[str]:
    return MUSCLE_GROUP_COLORS.get(group)


def readable_text_color(background: str) -> str:
    """``dark`` or ``light`` text for a ``#RRGGBB`` pill background.

    Uses perceived luminance; anything that is not a 6-digit hex color
    gets ``dark``.
    """
    hex_color = background.lstrip("#")
    if len(hex_color) != 6:
        return "dark"
    try:
        r, g, b = (int(hex_color[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return "dark"
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "dark" if luminance > 0.6 else "light"
