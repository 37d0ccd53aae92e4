from __future__ import annotations

from flask import Blueprint, abort, render_template, request

from ..constants import ROLE_ADMIN, ROLE_PROFESOR
from ..extensions import db
from ..models import Curso, Horario, Materia
from ..services.roles import role_required
from ..services.schedule_conflicts import DAYS, compute_weekly_duration
from ..services.schedules import horario_to_slot, sort_slots

horarios_bp = Blueprint("horarios", __name__)


@horarios_bp.get("/horarios")
@role_required(ROLE_ADMIN, ROLE_PROFESOR)
def index():
    cursos = Curso.query.order_by(Curso.anio.desc(), Curso.nombre.asc()).all()
    curso_id = request.args.get("curso", type=int)
    curso = None
    if curso_id is not None:
        curso = db.session.get(Curso, curso_id)
        if curso is None:
            abort(404)
    elif cursos:
        curso = cursos[0]

    grade: dict[str, dict[str, list[dict]]] = {}
    resumen: list[dict] = []
    if curso is not None:
        rows = (
            db.session.query(Horario, Materia.nombre)
            .outerjoin(Materia, Horario.id_materia == Materia.id_materia)
            .filter(Horario.id_curso == curso.id_curso)
            .all()
        )
        nombres: dict[int | None, str] = {}
        slots_by_materia: dict[int | None, list] = {}
        for horario, materia_nombre in rows:
            slot = horario_to_slot(horario)
            if slot is None:
                continue
            nombre = materia_nombre or "Sin materia"
            rango = f"{slot.start}-{slot.end}"
            grade.setdefault(rango, {}).setdefault(slot.day.value, []).append({"materia": nombre, "slot": slot})
            nombres[slot.subject_id] = nombre
            slots_by_materia.setdefault(slot.subject_id, []).append(slot)

        for materia_id in sorted(slots_by_materia, key=lambda k: (nombres[k], k or 0)):
            slots = sort_slots(slots_by_materia[materia_id])
            resumen.append({"materia": nombres[materia_id], "slots": slots, "carga": compute_weekly_duration(slots)})

    rangos = sorted(grade.keys())

    return render_template(
        "horarios/index.html",
        active_tab="horarios",
        cursos=cursos,
        curso=curso,
        days=DAYS,
        grade=grade,
        rangos=rangos,
        resumen=resumen,
    )
