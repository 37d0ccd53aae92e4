"""HTTP error pages and logging of unhandled errors."""
import logging

from flask import Flask, jsonify, render_template, request

from .extensions import db

log = logging.getLogger("gestormaterias.errors")


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(403)
    def _forbidden(exc):
        if _wants_json():
            return jsonify({"error": "Forbidden"}), 403
        return render_template("errors/acceso_denegado.html", role=None), 403

    @app.errorhandler(404)
    def _not_found(exc):
        if _wants_json():
            return jsonify({"error": "Not found"}), 404
        return render_template("errors/404.html"), 404

    @app.errorhandler(500)
    def _internal_error(exc):
        db.session.rollback()
        log.exception("Unhandled error path=%s", request.path)
        if _wants_json():
            return jsonify({"error": "Internal server error"}), 500
        return render_template("errors/500.html"), 500
