# course_enrollment/services/enrollment_workflow.py
"""Enrollment lifecycle rules shared by the backend and the client.

An enrollment starts ``pending`` and moves once, to ``approved`` or
``rejected``; both are terminal. The helpers here work on anything with a
``status`` attribute, so ORM rows and API payloads go through the same code.
"""
from __future__ import annotations

import datetime as dt
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, TypeVar, Union

from course_enrollment.core.enums import EnrollmentStatus

FILTER_ALL = "all"
FILTERS = (FILTER_ALL, *(s.value for s in EnrollmentStatus))

TERMINAL_STATUSES = frozenset({EnrollmentStatus.approved, EnrollmentStatus.rejected})

# action name -> resulting status
ACTIONS: Dict[str, EnrollmentStatus] = {
    "approve": EnrollmentStatus.approved,
    "reject": EnrollmentStatus.rejected,
}


class TransitionNotAllowed(ValueError):
    def __init__(self, current: EnrollmentStatus, action: str):
        self.current = current
        self.action = action
        super().__init__(f"Enrollment has already been {current.value}; cannot {action} it.")


class _HasStatus(Protocol):
    status: Union[EnrollmentStatus, str]


T = TypeVar("T", bound=_HasStatus)


def _status(value: Union[EnrollmentStatus, str]) -> EnrollmentStatus:
    return value if isinstance(value, EnrollmentStatus) else EnrollmentStatus(value)


# ---------------------------
# state machine
# ---------------------------

def can_transition(current: Union[EnrollmentStatus, str], target: Union[EnrollmentStatus, str]) -> bool:
    return _status(current) is EnrollmentStatus.pending and _status(target) in TERMINAL_STATUSES


def transition(current: Union[EnrollmentStatus, str], action: str) -> EnrollmentStatus:
    """Status reached by applying ``action`` ("approve"/"reject") to ``current``."""
    if action not in ACTIONS:
        raise ValueError(f"Unknown enrollment action: {action}")
    target = ACTIONS[action]
    current = _status(current)
    if not can_transition(current, target):
        raise TransitionNotAllowed(current, action)
    return target


def is_active(status: Union[EnrollmentStatus, str]) -> bool:
    """Active enrollments (anything not rejected) count toward the cap."""
    return _status(status) is not EnrollmentStatus.rejected


def count_active(items: Iterable[_HasStatus]) -> int:
    return sum(1 for e in items if is_active(e.status))


# ---------------------------
# filtering
# ---------------------------

def filter_enrollments(items: Iterable[T], status_filter: str = FILTER_ALL) -> List[T]:
    if status_filter not in FILTERS:
        raise ValueError(f"Unknown filter '{status_filter}', expected one of {', '.join(FILTERS)}")
    if status_filter == FILTER_ALL:
        return list(items)
    wanted = EnrollmentStatus(status_filter)
    return [e for e in items if _status(e.status) is wanted]


def status_counts(items: Iterable[_HasStatus]) -> Dict[str, int]:
    """Count per filter tab; ``all`` is always the sum of the three statuses."""
    counts = {s.value: 0 for s in EnrollmentStatus}
    for e in items:
        counts[_status(e.status).value] += 1
    counts[FILTER_ALL] = sum(counts.values())
    return {k: counts[k] for k in FILTERS}


# ---------------------------
# date / session selection
# ---------------------------

def candidate_dates(start: Optional[dt.date], end: Optional[dt.date]) -> List[dt.date]:
    """Every day from ``start`` to ``end`` inclusive; empty for a missing or inverted range."""
    if start is None or end is None or end < start:
        return []
    return [start + dt.timedelta(days=i) for i in range((end - start).days + 1)]


def selection_error(
    *,
    start: Optional[dt.date],
    end: Optional[dt.date],
    session_ids: Sequence[int],
    selected_date: Optional[dt.date],
    selected_session_id: Optional[int],
    date_required: bool = True,
) -> Optional[str]:
    """User-facing message describing why a date/session choice is invalid, or None."""
    if selected_date is None:
        if date_required:
            return "Please select a date for enrollment."
    elif start is None or end is None or not (start <= selected_date <= end):
        return "The selected date is outside the course dates."
    if selected_session_id is not None and selected_session_id not in session_ids:
        return "The selected session does not belong to this course."
    return None
