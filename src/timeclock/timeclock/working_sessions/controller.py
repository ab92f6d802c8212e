from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_duration, to_iso
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    DomainError,
    InvalidTransition,
    MalformedActionLog,
    PersistenceFailure,
    SessionNotFound,
    ValidationError,
)
from ..container import Container
from ..time_trackings.model import TimeTracking
from .model import WorkingSession

_STATUS_CODES = (
    (SessionNotFound, 404),
    (ValidationError, 400),
    (InvalidTransition, 409),
    (MalformedActionLog, 422),
    (PersistenceFailure, 503),
)


def session_to_dict(ws: WorkingSession) -> dict:
    return {
        "session_id": ws.session_id,
        "user_id": ws.user_id,
        "location_id": ws.location_id,
        "status": ws.status.value,
        "starts_at": to_iso(ws.starts_at),
        "ends_at": to_iso(ws.ends_at),
        "actions": [
            {"action_type": a.action_type.value, "action_time": to_iso(a.action_time)} for a in ws.actions
        ],
    }


def time_tracking_to_dict(tt: TimeTracking) -> dict:
    return {
        "time_tracking_id": tt.time_tracking_id,
        "location_id": tt.location_id,
        "starts_at": to_iso(tt.starts_at),
        "ends_at": to_iso(tt.ends_at),
        "manual_pause": tt.manual_pause,
        "worked_hours": format_duration(tt.worked_duration),
        "pause_times": [{"starts_at": to_iso(p.starts_at), "ends_at": to_iso(p.ends_at)} for p in tt.pause_times],
    }


def _error_response(exc: DomainError):
    for exc_type, code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            body = {"success": False, "message": str(exc)}
            if isinstance(exc, InvalidTransition):
                body["current_state"] = getattr(exc.current_state, "value", exc.current_state)
                body["transition"] = exc.transition
            return jsonify(body), code
    return jsonify({"success": False, "message": str(exc)}), 400


def register(app: Flask, container: Container) -> None:
    service = container.working_session_service

    def _run_transition(session_id: int, transition_name: str):
        try:
            ws = getattr(service, transition_name)(session_id)
        except DomainError as e:
            return _error_response(e)
        return jsonify({"success": True, "session": session_to_dict(ws)}), 200

    @app.route("/working-sessions", methods=["POST"], endpoint="working_session_start")
    def start():
        data = request.get_json(silent=True) or {}
        try:
            user_id = int(data.get("user_id") or 0)
            location_id = int(data.get("location_id") or 0)
        except (TypeError, ValueError):
            return jsonify({"success": False, "message": "user_id and location_id must be integers"}), 400

        try:
            ws = service.start(user_id, location_id)
        except DomainError as e:
            return _error_response(e)
        return jsonify({"success": True, "session": session_to_dict(ws)}), 201

    @app.route("/working-sessions/<int:session_id>", methods=["GET"], endpoint="working_session_show")
    def show(session_id: int):
        try:
            ws = service.get_session(session_id)
        except DomainError as e:
            return _error_response(e)
        return jsonify({"success": True, "session": session_to_dict(ws)}), 200

    @app.route("/working-sessions/<int:session_id>/pause", methods=["POST"], endpoint="working_session_pause")
    def pause(session_id: int):
        return _run_transition(session_id, "pause")

    @app.route("/working-sessions/<int:session_id>/resume", methods=["POST"], endpoint="working_session_resume")
    def resume(session_id: int):
        return _run_transition(session_id, "resume")

    @app.route("/working-sessions/<int:session_id>/stop", methods=["POST"], endpoint="working_session_stop")
    def stop(session_id: int):
        return _run_transition(session_id, "stop")

    @app.route("/users/<int:user_id>/time-trackings", methods=["GET"], endpoint="user_time_trackings")
    def time_trackings(user_id: int):
        limit = request.args.get("limit", DEFAULT_HISTORY_LIMIT, type=int)
        try:
            rows = service.get_time_trackings(user_id, limit=limit)
        except DomainError as e:
            return _error_response(e)
        return jsonify({"success": True, "time_trackings": [time_tracking_to_dict(t) for t in rows]}), 200
