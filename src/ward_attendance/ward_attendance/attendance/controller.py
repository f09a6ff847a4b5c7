from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import optional_coordinate, optional_int, optional_str
from ..core.exceptions import AttendanceRejected, ValidationError
from ..container import Container
from ..organization.model import CallerIdentity

logger = logging.getLogger(__name__)


def _payload() -> dict:
    """JSON body, or form fields for multipart uploads from the mobile client."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _location(data: dict) -> tuple:
    return (
        optional_coordinate(data.get("latitude"), "latitude", limit=90.0),
        optional_coordinate(data.get("longitude"), "longitude", limit=180.0),
    )


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Authentication required"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _caller() -> CallerIdentity:
        return CallerIdentity.from_session(session)

    def _rejected(e: AttendanceRejected):
        return jsonify(e.to_dict()), e.reason.http_status

    def _bad_request(e: ValidationError):
        return jsonify({"success": False, "code": "INVALID_INPUT", "message": str(e)}), 400

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @login_required
    def mark_worker_attendance():
        data = _payload()
        try:
            latitude, longitude = _location(data)
            try:
                timestamp = parse_iso_datetime(optional_str(data.get("timestamp")))
            except ValueError:
                raise ValidationError("timestamp must be an ISO-8601 date-time")

            record = container.marking_service.mark_worker(
                _caller(),
                worker_id=optional_str(data.get("worker_id")),
                ward_id=optional_int(data.get("ward_id"), "ward_id"),
                latitude=latitude,
                longitude=longitude,
                now=timestamp,
                photo_url=optional_str(data.get("photo_url")),
            )
        except AttendanceRejected as e:
            return _rejected(e)
        except ValidationError as e:
            return _bad_request(e)
        except Exception:
            logger.exception("Unexpected error while marking worker attendance")
            return jsonify({"success": False, "message": "System error while marking attendance"}), 500

        return jsonify({"success": True, "message": "Attendance marked", "data": record.to_dict()}), 201

    @app.route("/api/attendance/mark-all", methods=["POST"], endpoint="attendance_mark_all")
    @login_required
    def mark_all_workers_present():
        data = _payload()
        try:
            latitude, longitude = _location(data)
            result = container.marking_service.mark_all_present(_caller(), latitude=latitude, longitude=longitude)
        except AttendanceRejected as e:
            return _rejected(e)
        except ValidationError as e:
            return _bad_request(e)
        except Exception:
            logger.exception("Unexpected error while bulk marking attendance")
            return jsonify({"success": False, "message": "System error while marking attendance"}), 500

        if result.newly_marked == 0:
            message = "All workers were already marked present today"
        else:
            message = f"Marked {result.newly_marked} worker(s) present"
        return jsonify({"success": True, "message": message, "data": result.to_dict()}), 200

    @app.route("/api/attendance/roster/today", methods=["GET"], endpoint="attendance_roster_today")
    @login_required
    def today_roster():
        try:
            summary = container.marking_service.get_today_roster(_caller())
        except AttendanceRejected as e:
            return _rejected(e)
        except Exception:
            logger.exception("Unexpected error while loading today's roster")
            return jsonify({"success": False, "message": "System error while loading roster"}), 500

        return jsonify({"success": True, "data": summary.to_dict()}), 200
