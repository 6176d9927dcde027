from __future__ import annotations

import json
from numbers import Real
from typing import Any, Optional

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import parse_iso_datetime
from ..common.http import json_body, parse_bool
from ..container import Container
from ..core.enums import Role
from ..security.decorators import bearer_required


def _parse_descriptor(value: Any) -> Optional[list[float]]:
    """faceDescriptor arrives as a JSON string (multipart) or a list (JSON body).

    Anything that is not a list of numbers is ignored, like an absent descriptor.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, list):
        return None
    if not all(isinstance(v, Real) and not isinstance(v, bool) for v in value):
        return None
    return [float(v) for v in value]


def register(app: Flask, container: Container) -> None:
    login_required = bearer_required(container.tokens, role=Role.USER)

    @app.route("/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @login_required
    def attendance_mark():
        data = json_body()
        image = request.files.get("image")
        image_bytes = image.read() if image is not None else None

        result = container.attendance_service.mark(
            g.claims.user_id,
            data.get("type"),
            image=image_bytes,
            filename=image.filename if image is not None else None,
            descriptor=_parse_descriptor(data.get("faceDescriptor")),
            use_cloud_vision=parse_bool(data.get("useCloudVision")),
        )
        attendance = result.attendance
        return jsonify({
            "message": f"Attendance marked as {attendance.type.value} successfully",
            "attendance": attendance.to_dict(),
            "faceRecognition": result.face_recognition.to_dict() if result.face_recognition else None,
        }), 201

    @app.route("/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def attendance_list():
        start = parse_iso_datetime(request.args.get("startDate"), "startDate")
        end = parse_iso_datetime(request.args.get("endDate"), "endDate")

        rows = container.attendance_service.list_for_user(g.claims.user_id, start=start, end=end)
        return jsonify({
            "message": "Attendance records retrieved successfully",
            "attendance": [r.to_dict() for r in rows],
            "count": len(rows),
        }), 200

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        rows = container.attendance_service.today(g.claims.user_id)
        return jsonify({
            "message": "Today's attendance retrieved successfully",
            "attendance": [r.to_dict() for r in rows],
            "count": len(rows),
        }), 200
