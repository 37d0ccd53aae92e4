from __future__ import annotations

import logging

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from ..constants import ROLE_ADMIN, ROLE_PROFESOR
from ..extensions import db
from ..models import ContenidoClase, Curso, Horario, Materia, ProfesorMateria
from ..services import storage
from ..services.professors import get_or_create_profesor, list_professor_users
from ..services.roles import get_role, profesor_for, role_required
from ..services.schedule_conflicts import (
    DAYS,
    ConflictError,
    InternalDuplicateError,
    MalformedSlotError,
    ScheduleError,
    StagingSession,
    TimeSlot,
    add_slot,
    begin_save,
    commit,
    is_pending_complete,
    parse_slot,
    reject,
    remove_slot,
    restage,
    session_workload,
)
from ..services.schedules import load_course_slots, load_subject_slots, replace_subject_schedules, rows_to_slots, sort_slots

logger = logging.getLogger(__name__)

materias_bp = Blueprint("materias", __name__)

_PENDING_SAVE_MESSAGES = {
    ConflictError: "El horario que estás agregando choca con otro existente. Corrígelo antes de guardar.",
    InternalDuplicateError: "El horario que estás agregando se superpone con otro de la lista.",
}


def _safe_int(value: str | None) -> int | None:
    try:
        return int(value) if value not in (None, "") else None
    except ValueError:
        return None


def _empty_pending() -> dict:
    return {"dia": "", "inicio": "", "fin": ""}


def _read_form() -> dict:
    return {
        "materia_id": _safe_int((request.form.get("materia_id") or "").strip()),
        "nombre": (request.form.get("nombre") or "").strip(),
        "descripcion": (request.form.get("descripcion") or "").strip(),
        "carga_horaria": (request.form.get("carga_horaria") or "").strip(),
        "id_curso": _safe_int((request.form.get("id_curso") or "").strip()),
        "usuario_profesor": _safe_int((request.form.get("usuario_profesor") or "").strip()),
        "pending": {
            "dia": (request.form.get("nuevo_dia") or "").strip(),
            "inicio": (request.form.get("nuevo_inicio") or "").strip(),
            "fin": (request.form.get("nuevo_fin") or "").strip(),
        },
    }


def _read_staged(course_id: int | None, subject_id: int | None) -> list[TimeSlot]:
    dias = request.form.getlist("horario_dia")
    inicios = request.form.getlist("horario_inicio")
    fines = request.form.getlist("horario_fin")
    slots: list[TimeSlot] = []
    for dia, inicio, fin in zip(dias, inicios, fines):
        slots.append(parse_slot(dia, inicio, fin, course_id=course_id or 0, subject_id=subject_id))
    return slots


def _render_form(state: dict, slots: list[TimeSlot], *, error: str | None = None, status: int = 200):
    cursos = Curso.query.order_by(Curso.anio.desc(), Curso.nombre.asc()).all()
    return (
        render_template(
            "materias/form.html",
            active_tab="materias",
            form=state,
            slots=slots,
            cursos=cursos,
            professor_users=list_professor_users(),
            days=DAYS,
            error=error,
        ),
        status,
    )


@materias_bp.get("/materias")
@role_required(ROLE_ADMIN, ROLE_PROFESOR)
def index():
    query = Materia.query.order_by(Materia.nombre.asc())
    if get_role(current_user) == ROLE_PROFESOR:
        profesor = profesor_for(current_user)
        if profesor is None:
            materias = []
        else:
            materias = (
                query.join(ProfesorMateria, ProfesorMateria.id_materia == Materia.id_materia)
                .filter(ProfesorMateria.id_profesor == profesor.id_profesor)
                .all()
            )
    else:
        materias = query.all()

    slots_by_materia: dict[int, list[TimeSlot]] = {}
    materia_ids = [int(m.id_materia) for m in materias]
    if materia_ids:
        for slot in rows_to_slots(Horario.query.filter(Horario.id_materia.in_(materia_ids)).all()):
            slots_by_materia.setdefault(slot.subject_id, []).append(slot)
    slots_by_materia = {k: sort_slots(v) for k, v in slots_by_materia.items()}

    return render_template(
        "materias/index.html",
        active_tab="materias",
        materias=materias,
        slots_by_materia=slots_by_materia,
    )


@materias_bp.get("/materias/nueva")
@role_required(ROLE_ADMIN)
def nueva():
    state = {
        "materia_id": None,
        "nombre": "",
        "descripcion": "",
        "carga_horaria": "",
        "id_curso": None,
        "usuario_profesor": None,
        "pending": _empty_pending(),
    }
    return _render_form(state, [])


@materias_bp.get("/materias/<int:materia_id>/editar")
@role_required(ROLE_ADMIN)
def editar(materia_id: int):
    materia = db.session.get(Materia, materia_id)
    if materia is None:
        abort(404)

    profesor = materia.profesor
    state = {
        "materia_id": int(materia.id_materia),
        "nombre": materia.nombre,
        "descripcion": materia.descripcion or "",
        "carga_horaria": materia.carga_horaria or "",
        "id_curso": int(materia.id_curso),
        "usuario_profesor": int(profesor.usuario_id) if profesor and profesor.usuario_id else None,
        "pending": _empty_pending(),
    }
    return _render_form(state, load_subject_slots(materia.id_materia))


@materias_bp.post("/materias/form")
@role_required(ROLE_ADMIN)
def form_post():
    state = _read_form()
    accion = (request.form.get("accion") or "guardar").strip()
    course_id = state["id_curso"]
    subject_id = state["materia_id"]

    try:
        staged = _read_staged(course_id, subject_id)
    except MalformedSlotError as exc:
        return _render_form(state, [], error=exc.message, status=400)

    session = StagingSession(course_id=course_id or 0, subject_id=subject_id, slots=staged)

    if accion == "agregar":
        return _handle_add(state, session)
    if accion.startswith("quitar-"):
        index = _safe_int(accion.removeprefix("quitar-"))
        if index is None or not 0 <= index < len(session.slots):
            return _render_form(state, session.slots, error="Horario inexistente.", status=400)
        remove_slot(session, index)
        state["carga_horaria"] = session_workload(session)
        return _render_form(state, session.slots)
    return _handle_save(state, session)


def _handle_add(state: dict, session: StagingSession):
    pending = state["pending"]
    if not is_pending_complete(pending["dia"], pending["inicio"], pending["fin"]):
        return _render_form(state, session.slots, error=MalformedSlotError.message, status=400)
    if not state["id_curso"]:
        return _render_form(state, session.slots, error="Selecciona un curso primero", status=400)

    try:
        candidate = parse_slot(pending["dia"], pending["inicio"], pending["fin"], course_id=state["id_curso"])
        add_slot(session, candidate, load_course_slots(state["id_curso"]))
    except ScheduleError as exc:
        return _render_form(state, session.slots, error=exc.message, status=400)

    state["pending"] = _empty_pending()
    state["carga_horaria"] = session_workload(session)
    return _render_form(state, session.slots)


def _handle_save(state: dict, session: StagingSession):
    if not state["nombre"] or not state["id_curso"]:
        return _render_form(state, session.slots, error="Nombre y curso son obligatorios", status=400)
    if db.session.get(Curso, state["id_curso"]) is None:
        return _render_form(state, session.slots, error="Curso inexistente.", status=400)

    materia: Materia | None = None
    if state["materia_id"] is not None:
        materia = db.session.get(Materia, state["materia_id"])
        if materia is None:
            abort(404)

    existing = load_course_slots(state["id_curso"])
    # The course may have changed or filled up since the slots were staged.
    try:
        session = restage(state["id_curso"], state["materia_id"], session.slots, existing)
    except ScheduleError as exc:
        return _render_form(state, session.slots, error=exc.message, status=400)

    staged = list(session.slots)
    pending = state["pending"]
    try:
        candidate = None
        if is_pending_complete(pending["dia"], pending["inicio"], pending["fin"]):
            candidate = parse_slot(pending["dia"], pending["inicio"], pending["fin"], course_id=state["id_curso"])
        slots = begin_save(session, candidate, existing)
    except ScheduleError as exc:
        message = _PENDING_SAVE_MESSAGES.get(type(exc), exc.message)
        return _render_form(state, session.slots, error=message, status=400)

    carga_horaria = state["carga_horaria"] or session_workload(session)
    try:
        if materia is None:
            materia = Materia(
                nombre=state["nombre"],
                descripcion=state["descripcion"],
                carga_horaria=carga_horaria,
                id_curso=state["id_curso"],
            )
            db.session.add(materia)
        else:
            materia.nombre = state["nombre"]
            materia.descripcion = state["descripcion"]
            materia.carga_horaria = carga_horaria
            materia.id_curso = state["id_curso"]
        db.session.flush()

        materia.asignaciones.clear()
        db.session.flush()
        if state["usuario_profesor"] is not None:
            profesor = get_or_create_profesor(state["usuario_profesor"])
            if profesor is not None:
                materia.asignaciones.append(ProfesorMateria(id_profesor=profesor.id_profesor))

        replace_subject_schedules(materia, slots)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        reject(session)
        logger.exception("error saving materia id=%s", state["materia_id"])
        return _render_form(state, staged, error="Error al guardar materia", status=500)

    commit(session)
    flash("Materia actualizada" if state["materia_id"] else "Materia creada")
    return redirect(url_for("materias.index"))


@materias_bp.post("/materias/<int:materia_id>/delete")
@role_required(ROLE_ADMIN)
def delete(materia_id: int):
    materia = db.session.get(Materia, materia_id)
    if materia is None:
        abort(404)

    contenidos = ContenidoClase.query.filter_by(id_materia=materia_id).all()
    archivos = [(c.archivo_path, c.archivo_url) for c in contenidos if c.archivo_path or c.archivo_url]

    for contenido in contenidos:
        db.session.delete(contenido)
    db.session.flush()
    Horario.query.filter_by(id_materia=materia_id).delete()
    db.session.delete(materia)
    db.session.commit()

    for key, url in archivos:
        storage.delete_quietly(key, url)

    flash("Materia eliminada")
    return redirect(url_for("materias.index"))
