"""Weekly schedule conflict checks and workload computation.

Everything here is pure: callers pass the persisted slots and the staged
slots of the current edit explicitly, and the staging session is a plain
object owned by the caller. Nothing is cached between calls.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::[0-5]\d)?$")


class DayOfWeek(str, Enum):
    LUNES = "Lunes"
    MARTES = "Martes"
    MIERCOLES = "Miércoles"
    JUEVES = "Jueves"
    VIERNES = "Viernes"


DAYS: list[DayOfWeek] = list(DayOfWeek)


class ScheduleError(Exception):
    message = "Horario inválido."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class MalformedSlotError(ScheduleError):
    message = "Completa día, inicio y fin"


class ConflictError(ScheduleError):
    message = "¡Choque de horarios! Este horario ya está ocupado en el curso."


class InternalDuplicateError(ScheduleError):
    message = "Ya agregaste un horario que se superpone con este."


class SessionStateError(ScheduleError):
    message = "Operación no permitida en el estado actual de la edición."


def _to_minutes(value: str) -> int:
    m = _TIME_PATTERN.match(value)
    if not m:
        raise MalformedSlotError(f"Hora inválida: {value}")
    return int(m.group(1)) * 60 + int(m.group(2))


def _normalize_time(value: str) -> str:
    minutes = _to_minutes(value)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_day(value: str | DayOfWeek) -> DayOfWeek:
    if isinstance(value, DayOfWeek):
        return value
    raw = (value or "").strip()
    for day in DayOfWeek:
        if raw.lower() in (day.value.lower(), day.name.lower()):
            return day
    raise MalformedSlotError(f"Día inválido: {raw}")


@dataclass(frozen=True)
class TimeSlot:
    day: DayOfWeek
    start: str
    end: str
    course_id: int
    subject_id: int | None = None

    @property
    def start_minutes(self) -> int:
        return _to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return _to_minutes(self.end)

    @property
    def duration_minutes(self) -> int:
        return max(0, self.end_minutes - self.start_minutes)

    def overlaps(self, other: "TimeSlot") -> bool:
        # Half-open intervals: touching endpoints do not overlap.
        if self.day != other.day:
            return False
        return self.start_minutes < other.end_minutes and self.end_minutes > other.start_minutes


def parse_slot(
    day: str | DayOfWeek | None,
    start: str | None,
    end: str | None,
    course_id: int,
    subject_id: int | None = None,
) -> TimeSlot:
    if not day or not (start or "").strip() or not (end or "").strip():
        raise MalformedSlotError()
    return TimeSlot(
        day=_parse_day(day),
        start=_normalize_time(start.strip()),
        end=_normalize_time(end.strip()),
        course_id=int(course_id),
        subject_id=subject_id,
    )


def is_pending_complete(day: str | None, start: str | None, end: str | None) -> bool:
    return bool((day or "").strip() and (start or "").strip() and (end or "").strip())


def validate_slot(slot: TimeSlot) -> None:
    if slot.end_minutes <= slot.start_minutes:
        raise MalformedSlotError("La hora de fin debe ser posterior a la hora de inicio.")


def has_overlap(
    candidate: TimeSlot,
    existing_slots: Iterable[TimeSlot],
    exclude_subject_id: int | None = None,
) -> bool:
    for slot in existing_slots:
        if slot.course_id != candidate.course_id:
            continue
        if exclude_subject_id is not None and slot.subject_id == exclude_subject_id:
            continue
        if candidate.overlaps(slot):
            return True
    return False


def has_internal_overlap(candidate: TimeSlot, staged_slots: Iterable[TimeSlot]) -> bool:
    return any(candidate.overlaps(slot) for slot in staged_slots)


def check_slot(
    candidate: TimeSlot,
    existing_slots: Iterable[TimeSlot],
    staged_slots: Iterable[TimeSlot],
    exclude_subject_id: int | None = None,
) -> None:
    validate_slot(candidate)
    if has_overlap(candidate, existing_slots, exclude_subject_id):
        logger.info(
            "schedule conflict course=%s day=%s %s-%s",
            candidate.course_id,
            candidate.day.value,
            candidate.start,
            candidate.end,
        )
        raise ConflictError()
    if has_internal_overlap(candidate, staged_slots):
        raise InternalDuplicateError()


def format_duration(total_minutes: int) -> str:
    hours, minutes = divmod(max(0, total_minutes), 60)
    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours} hs")
    if minutes > 0:
        parts.append(f"{minutes} min")
    return " ".join(parts) or "0 hs"


def compute_weekly_duration(slots: Iterable[TimeSlot]) -> str:
    return format_duration(sum(slot.duration_minutes for slot in slots))


class SessionState(str, Enum):
    EMPTY = "empty"
    STAGING = "staging"
    SAVING = "saving"
    COMMITTED = "committed"
    REJECTED = "rejected"


@dataclass
class StagingSession:
    """Slots being edited for one subject, not yet persisted.

    ``subject_id`` is None while creating a new subject.
    """

    course_id: int
    subject_id: int | None = None
    slots: list[TimeSlot] = field(default_factory=list)
    state: SessionState = SessionState.EMPTY

    def __post_init__(self) -> None:
        if self.slots and self.state == SessionState.EMPTY:
            self.state = SessionState.STAGING


def _require_state(session: StagingSession, *allowed: SessionState) -> None:
    if session.state not in allowed:
        raise SessionStateError()


def add_slot(session: StagingSession, candidate: TimeSlot, existing_slots: Iterable[TimeSlot]) -> None:
    _require_state(session, SessionState.EMPTY, SessionState.STAGING)
    check_slot(candidate, existing_slots, session.slots, session.subject_id)
    session.slots.append(candidate)
    session.state = SessionState.STAGING


def restage(
    course_id: int,
    subject_id: int | None,
    slots: Iterable[TimeSlot],
    existing_slots: Iterable[TimeSlot],
) -> StagingSession:
    """Rebuild a session from slots carried over from an earlier request.

    Every slot goes through ``add_slot`` again, so the result holds the same
    guarantees as a session staged one slot at a time against the current
    persisted state of ``course_id``.
    """
    existing = list(existing_slots)
    session = StagingSession(course_id=course_id, subject_id=subject_id)
    for slot in slots:
        add_slot(session, slot, existing)
    return session


def remove_slot(session: StagingSession, index: int) -> TimeSlot:
    _require_state(session, SessionState.EMPTY, SessionState.STAGING)
    if not 0 <= index < len(session.slots):
        raise IndexError(index)
    removed = session.slots.pop(index)
    session.state = SessionState.STAGING
    return removed


def begin_save(
    session: StagingSession,
    pending: TimeSlot | None,
    existing_slots: Iterable[TimeSlot],
) -> list[TimeSlot]:
    """Fold a still-pending slot into the session and move to SAVING.

    A pending slot that fails validation aborts the save and leaves the
    session untouched in STAGING.
    """
    _require_state(session, SessionState.EMPTY, SessionState.STAGING)
    if pending is not None:
        check_slot(pending, existing_slots, session.slots, session.subject_id)
        session.slots.append(pending)
    session.state = SessionState.SAVING
    return list(session.slots)


def commit(session: StagingSession) -> None:
    _require_state(session, SessionState.SAVING)
    session.state = SessionState.COMMITTED


def reject(session: StagingSession) -> None:
    _require_state(session, SessionState.SAVING)
    session.state = SessionState.REJECTED


def session_workload(session: StagingSession) -> str:
    return compute_weekly_duration(session.slots)
