"""
Selection - Filter, search, pagination and single-subject selection.

SessionState is immutable; every transition returns a new state. Nothing here
renders or persists anything.
"""

import math
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Optional, Sequence, TypeVar

from esetracker.schemas import Subject, SubjectStatus

from .pacing import subject_status


PAGE_SIZE = 6
MAX_VISIBLE_PAGES = 5

T = TypeVar("T")


class SubjectFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    UPCOMING = "upcoming"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SessionState:
    """Ephemeral UI state. Never persisted."""
    filter: SubjectFilter = SubjectFilter.ALL
    search_query: str = ""
    selected_subject_id: Optional[str] = None
    current_page: int = 1
    page_size: int = field(default=PAGE_SIZE)


@dataclass(frozen=True)
class Page:
    """One page of a filtered list."""
    items: list
    page: int
    total_pages: int
    total_items: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


# -----------------------------------------------------------------------------
# Filtering and ordering
# -----------------------------------------------------------------------------

def filtered_subjects(
    subjects: Sequence[Subject],
    subject_filter: SubjectFilter | str = SubjectFilter.ALL,
    query: str = "",
    today: Optional[date] = None,
) -> list[Subject]:
    """
    Subjects matching the status filter and the name search, in catalog order.

    The search is a case-insensitive substring match on the subject name.
    """
    subject_filter = SubjectFilter(subject_filter)
    query = (query or "").strip().lower()

    result = []
    for subject in subjects:
        if subject_filter != SubjectFilter.ALL:
            if subject_status(subject, today).value != subject_filter.value:
                continue
        if query and query not in subject.name.lower():
            continue
        result.append(subject)
    return result


def chip_order(subjects: Sequence[Subject], today: Optional[date] = None) -> list[Subject]:
    """Active subjects first, then the rest; catalog order within each group."""
    active = [s for s in subjects if subject_status(s, today) == SubjectStatus.ACTIVE]
    others = [s for s in subjects if subject_status(s, today) != SubjectStatus.ACTIVE]
    return active + others


def select_options(subjects: Sequence[Subject], today: Optional[date] = None) -> list[str]:
    """
    Option IDs for the subject picker: the active group, then every other
    subject. Each ID appears once so stepping reaches every subject.
    """
    return [s.id for s in chip_order(subjects, today)]


def step_selection(options: Sequence[str], selected: Optional[str], step: int) -> Optional[str]:
    """
    Move the picker selection by `step` positions.

    Position 0 is the empty placeholder; moving past either end is a no-op.
    Repeated IDs in `options` are collapsed to their first position.
    """
    slots: list[Optional[str]] = [None, *dict.fromkeys(options)]
    try:
        index = slots.index(selected)
    except ValueError:
        index = 0
    target = index + step
    if target < 0 or target >= len(slots):
        return selected
    return slots[target]


# -----------------------------------------------------------------------------
# Pagination
# -----------------------------------------------------------------------------

def total_pages(total_items: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(total_items / page_size) if total_items > 0 else 0


def clamp_page(page: int, total: int) -> int:
    """Clamp a 1-based page into [1, max(1, total)]."""
    return min(max(1, page), max(1, total))


def paginate(items: Sequence[T], page: int = 1, page_size: int = PAGE_SIZE) -> Page:
    """Slice one page out of `items`, clamping the page number."""
    pages = total_pages(len(items), page_size)
    page = clamp_page(page, pages)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        total_pages=pages,
        total_items=len(items),
    )


def visible_page_numbers(current: int, total: int, max_visible: int = MAX_VISIBLE_PAGES) -> list[int]:
    """Window of page numbers centred on the current page."""
    if total <= 1:
        return []
    start = max(1, current - max_visible // 2)
    end = min(total, start + max_visible - 1)
    if end - start < max_visible - 1:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))


# -----------------------------------------------------------------------------
# State transitions
# -----------------------------------------------------------------------------

def set_filter(state: SessionState, subject_filter: SubjectFilter | str) -> SessionState:
    return replace(state, filter=SubjectFilter(subject_filter), current_page=1)


def set_search(state: SessionState, query: str) -> SessionState:
    return replace(state, search_query=(query or "").strip().lower(), current_page=1)


def select(state: SessionState, subject_id: Optional[str]) -> SessionState:
    return replace(state, selected_subject_id=subject_id or None)


def toggle_selection(state: SessionState, subject_id: str) -> SessionState:
    """Select a subject, or deselect it if it is already selected."""
    if state.selected_subject_id == subject_id:
        return replace(state, selected_subject_id=None)
    return replace(state, selected_subject_id=subject_id)


def clear_selection(state: SessionState) -> SessionState:
    return replace(state, selected_subject_id=None)


def go_to_page(state: SessionState, page: int) -> SessionState:
    return replace(state, current_page=page)


def next_page(state: SessionState, pages: int) -> SessionState:
    if state.current_page < pages:
        return replace(state, current_page=state.current_page + 1)
    return state


def prev_page(state: SessionState) -> SessionState:
    if state.current_page > 1:
        return replace(state, current_page=state.current_page - 1)
    return state
