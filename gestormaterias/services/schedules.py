from __future__ import annotations

import logging
from typing import Iterable

from ..extensions import db
from ..models import Horario, Materia
from .schedule_conflicts import DAYS, MalformedSlotError, TimeSlot, parse_slot

logger = logging.getLogger(__name__)

_DAY_ORDER = {day.value: i for i, day in enumerate(DAYS)}


def horario_to_slot(horario: Horario) -> TimeSlot | None:
    """Convert a stored row; rows with an unreadable day or time yield None."""
    try:
        return parse_slot(
            horario.dia_semana,
            horario.hora_inicio,
            horario.hora_fin,
            course_id=int(horario.id_curso),
            subject_id=int(horario.id_materia) if horario.id_materia is not None else None,
        )
    except MalformedSlotError:
        logger.warning(
            "skipping malformed horario id=%s dia=%r inicio=%r fin=%r",
            horario.id_horario,
            horario.dia_semana,
            horario.hora_inicio,
            horario.hora_fin,
        )
        return None


def rows_to_slots(rows: Iterable[Horario]) -> list[TimeSlot]:
    return [slot for slot in map(horario_to_slot, rows) if slot is not None]


def sort_slots(slots: Iterable[TimeSlot]) -> list[TimeSlot]:
    return sorted(slots, key=lambda s: (_DAY_ORDER.get(s.day.value, 99), s.start_minutes, s.end_minutes))


def load_course_slots(curso_id: int) -> list[TimeSlot]:
    return rows_to_slots(Horario.query.filter_by(id_curso=curso_id).all())


def load_subject_slots(materia_id: int) -> list[TimeSlot]:
    return sort_slots(rows_to_slots(Horario.query.filter_by(id_materia=materia_id).all()))


def replace_subject_schedules(materia: Materia, slots: Iterable[TimeSlot]) -> int:
    """Replace the persisted slot set of ``materia`` with ``slots``.

    Delete and insert are flushed in the caller's transaction; nothing is
    committed here, so a failure rolled back by the caller keeps the
    previous set intact.
    """
    Horario.query.filter_by(id_materia=materia.id_materia).delete()
    count = 0
    for slot in slots:
        db.session.add(
            Horario(
                dia_semana=slot.day.value,
                hora_inicio=slot.start,
                hora_fin=slot.end,
                id_curso=int(materia.id_curso),
                id_materia=int(materia.id_materia),
            )
        )
        count += 1
    db.session.flush()
    logger.info("replaced schedules materia=%s slots=%s", materia.id_materia, count)
    return count
