from __future__ import annotations

from functools import wraps

from flask import Flask, g, jsonify, request, session

from ..container import Container
from ..core.enums import RefreshScope
from ..core.exceptions import (
    DomainError,
    ForbiddenView,
    NoActiveModal,
    NotFound,
    SessionTerminated,
)
from ..payroll.model import PayrollPeriod
from ..session.controller import SessionController
from ..session.factory import FailedSession
from .serializers import (
    attendance_json,
    employee_json,
    metrics_json,
    payroll_json,
    view_state_json,
)

_STATUS_BY_ERROR = (
    (ForbiddenView, 403),
    (NotFound, 404),
    (NoActiveModal, 409),
    (SessionTerminated, 409),
)


def _status_for(error: DomainError) -> int:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(error, kind):
            return status
    return 400


def _period_from(source) -> PayrollPeriod | None:
    year = source.get("year")
    month = source.get("month")
    if not year or not month:
        return None
    try:
        return PayrollPeriod.for_month(int(year), int(month))
    except ValueError:
        raise DomainError("Invalid payroll period") from None


def register(app: Flask, container: Container) -> None:
    sessions = container.sessions

    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        return jsonify({"error": str(e), "type": type(e).__name__}), _status_for(e)

    def session_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            current = sessions.get(session.get("session_token"))
            if current is None:
                return jsonify({"error": "Please log in to continue"}), 401
            if isinstance(current, FailedSession):
                return _failed_json(current), 503
            g.dashboard = current
            return view(*args, **kwargs)

        return wrapper

    def _failed_json(failed: FailedSession) -> dict:
        return {"error": failed.error_message, "view": view_state_json(failed.current_view_state())}

    def _dashboard() -> SessionController:
        return g.dashboard

    @app.route("/api/session", methods=["POST"], endpoint="open_session")
    def open_dashboard_session():
        payload = request.get_json(silent=True) or {}
        try:
            employee_id = int(payload.get("employee_id"))
        except (TypeError, ValueError):
            return jsonify({"error": "employee_id is required"}), 400

        sessions.close(session.get("session_token"))
        token, current = sessions.open(employee_id)
        session["session_token"] = token

        if isinstance(current, FailedSession):
            return jsonify(_failed_json(current)), 503
        return jsonify(
            {
                "employee_id": current.context.employee_id,
                "role": current.context.role.value,
                "view": view_state_json(current.current_view_state()),
            }
        ), 201

    @app.route("/api/session/retry", methods=["POST"], endpoint="retry_session")
    def retry_session():
        token = session.get("session_token")
        current = sessions.get(token)
        if not isinstance(current, FailedSession):
            return jsonify({"error": "Nothing to retry"}), 409

        rebuilt = current.retry()
        sessions.replace(token, rebuilt)
        if isinstance(rebuilt, FailedSession):
            return jsonify(_failed_json(rebuilt)), 503
        return jsonify({"view": view_state_json(rebuilt.current_view_state())}), 201

    @app.route("/api/session/logout", methods=["POST"], endpoint="logout")
    def logout():
        sessions.close(session.pop("session_token", None))
        return jsonify({"view": {"current_view": "LoggedOut", "previous_view": None, "terminal": True}})

    @app.route("/api/session/view", methods=["GET"], endpoint="current_view")
    @session_required
    def current_view():
        return jsonify({"view": view_state_json(_dashboard().current_view_state())})

    @app.route("/api/session/view", methods=["POST"], endpoint="request_view")
    @session_required
    def request_view():
        name = (request.get_json(silent=True) or {}).get("name", "")
        ok = _dashboard().request_view(name)
        body = {"ok": ok, "view": view_state_json(_dashboard().current_view_state())}
        return jsonify(body), 200 if ok else 403

    @app.route("/api/session/modal/close", methods=["POST"], endpoint="close_modal")
    @session_required
    def close_modal():
        ok = _dashboard().close_modal()
        body = {"ok": ok, "view": view_state_json(_dashboard().current_view_state())}
        return jsonify(body), 200 if ok else 409

    @app.route("/api/session/refresh", methods=["POST"], endpoint="refresh")
    @session_required
    def refresh():
        raw = (request.get_json(silent=True) or {}).get("scope", RefreshScope.CURRENT_VIEW.value)
        try:
            scope = RefreshScope(str(raw).upper())
        except ValueError:
            return jsonify({"error": f"Unknown scope {raw!r}"}), 400
        ok = _dashboard().refresh_now(scope)
        errors = {k.value: v for k, v in _dashboard().view_errors().items()}
        return jsonify({"ok": ok, "errors": errors}), 200 if ok else 409

    @app.route("/api/session/clock", methods=["GET"], endpoint="clock")
    @session_required
    def clock():
        return jsonify({"clock": _dashboard().clock_text()})

    @app.route("/api/session/attendance", methods=["GET"], endpoint="attendance")
    @session_required
    def attendance():
        body = attendance_json(_dashboard().attendance_report())
        body["error"] = _dashboard().view_errors().get(RefreshScope.ATTENDANCE)
        return jsonify(body)

    @app.route("/api/session/metrics", methods=["GET"], endpoint="metrics")
    @session_required
    def metrics():
        return jsonify(metrics_json(_dashboard().metrics_snapshot()))

    @app.route("/api/session/payroll", methods=["GET"], endpoint="payroll")
    @session_required
    def payroll():
        period = _period_from(request.args)
        return jsonify(payroll_json(_dashboard().payroll_record(period)))

    @app.route("/api/session/payroll/period", methods=["POST"], endpoint="select_payroll_period")
    @session_required
    def select_payroll_period():
        period = _period_from(request.get_json(silent=True) or {})
        if period is None:
            return jsonify({"error": "year and month are required"}), 400
        return jsonify(payroll_json(_dashboard().select_payroll_period(period)))

    @app.route("/api/session/payroll/calculate", methods=["POST"], endpoint="calculate_payroll")
    @session_required
    def calculate_payroll():
        payload = request.get_json(silent=True) or {}
        period = _period_from(payload)
        if payload.get("recalculate"):
            record = _dashboard().recalculate_payroll(period)
        else:
            record = _dashboard().calculate_payroll(period)
        return jsonify(payroll_json(record))

    @app.route("/api/session/payroll/history", methods=["GET"], endpoint="payroll_history")
    @session_required
    def payroll_history():
        return jsonify({"records": [payroll_json(r) for r in _dashboard().payroll_history()]})

    @app.route("/api/session/directory", methods=["GET"], endpoint="directory")
    @session_required
    def directory():
        term = request.args.get("q", "").strip()
        if term:
            rows = _dashboard().search_directory(term)
        else:
            _dashboard().refresh_now(RefreshScope.DIRECTORY)
            rows = _dashboard().directory_listing()
        return jsonify(
            {
                "employees": [employee_json(e) for e in rows],
                "error": _dashboard().view_errors().get(RefreshScope.DIRECTORY),
            }
        )
