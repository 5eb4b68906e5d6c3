from __future__ import annotations

from flask import Flask, Response, g, request

from ..common.web import capability_required, error_response, internal_error, json_body, login_required, ok
from ..core.exceptions import DomainError
from ..core.permissions import Capability
from ..container import Container
from ..reports.export import summary_matrix_csv


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.users_repo)
    service = container.attendance_service
    summaries = container.attendance_summary_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    @auth
    @capability_required(Capability.CLOCK_ATTENDANCE)
    def clock_in():
        try:
            data = json_body()
            result = service.clock_in(
                g.current_user.user_id,
                store_id=data.get("store_id"),
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                login_time=data.get("login_time"),
            )
            return ok(result.as_dict(), message="Clocked in successfully", status=201)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("clock in")

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    @auth
    @capability_required(Capability.CLOCK_ATTENDANCE)
    def clock_out():
        try:
            data = json_body()
            result = service.clock_out(
                g.current_user.user_id,
                latitude=data.get("latitude"),
                longitude=data.get("longitude"),
                logout_time=data.get("logout_time"),
                work_date=data.get("work_date"),
            )
            return ok(result.as_dict(), message="Clocked out successfully")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("clock out")

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @auth
    @capability_required(Capability.CLOCK_ATTENDANCE)
    def attendance_status():
        try:
            view = service.get_status(
                g.current_user.user_id,
                attendance_date=request.args.get("date"),
            )
            return ok(view.as_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("load attendance status")

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @auth
    @capability_required(Capability.VIEW_ATTENDANCE)
    def attendance_list():
        try:
            records = service.list_records(
                user_id=request.args.get("user_id"),
                store_id=request.args.get("store_id"),
                start_date=request.args.get("start_date"),
                end_date=request.args.get("end_date"),
            )
            return ok([r.as_dict() for r in records])
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("list attendance records")

    def _build_matrix():
        return summaries.build_summary_matrix(
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
            store_id=request.args.get("store_id"),
            user_id=request.args.get("user_id"),
        )

    @app.route("/api/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @auth
    @capability_required(Capability.VIEW_ATTENDANCE_SUMMARY)
    def attendance_summary():
        try:
            matrix = _build_matrix()
            body = matrix.as_dict()
            return ok(body["data"], columns=body["columns"], meta=body["meta"])
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("build attendance summary")

    @app.route("/api/attendance/summary.csv", methods=["GET"], endpoint="attendance_summary_csv")
    @auth
    @capability_required(Capability.VIEW_ATTENDANCE_SUMMARY)
    def attendance_summary_csv():
        try:
            matrix = _build_matrix()
            filename = f"attendance_{matrix.start_date.isoformat()}_{matrix.end_date.isoformat()}.csv"
            return Response(
                summary_matrix_csv(matrix),
                mimetype="text/csv",
                headers={"Content-Disposition": f"attachment; filename={filename}"},
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("export attendance summary")
