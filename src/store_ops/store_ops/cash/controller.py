from __future__ import annotations

from flask import Flask, g, request

from ..common.web import capability_required, error_response, internal_error, json_body, login_required, ok
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import AlreadyOpenedConflict, DomainError
from ..core.permissions import Capability
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.users_repo)
    service = container.cash_register_service

    @app.route("/api/cash/open", methods=["POST"], endpoint="cash_open")
    @auth
    @capability_required(Capability.OPERATE_REGISTER)
    def cash_open():
        try:
            data = json_body()
            result = service.open_register(
                user_id=g.current_user.user_id,
                store_id=data.get("store_id"),
                register_date=data.get("register_date"),
                opening_cash=data.get("opening_cash"),
                notes=data.get("notes"),
            )
            return ok(result.as_dict(), message="Cash register opened successfully", status=201)
        except AlreadyOpenedConflict as e:
            return error_response(e, data=e.result.as_dict(), updated=e.updated)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("open cash register")

    @app.route("/api/cash/close", methods=["POST"], endpoint="cash_close")
    @auth
    @capability_required(Capability.OPERATE_REGISTER)
    def cash_close():
        try:
            data = json_body()
            result = service.close_register(
                store_id=data.get("store_id"),
                register_date=data.get("register_date"),
                closing_cash=data.get("closing_cash"),
                notes=data.get("notes"),
            )
            return ok(result.as_dict(), message="Cash register closed successfully")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("close cash register")

    @app.route("/api/cash/today", methods=["GET"], endpoint="cash_today")
    @auth
    @capability_required(Capability.OPERATE_REGISTER)
    def cash_today():
        try:
            statuses = service.get_status(
                viewer=g.current_user,
                register_date=request.args.get("date"),
                store_id=request.args.get("store_id"),
            )
            return ok([s.as_dict() for s in statuses])
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("load cash register status")

    @app.route("/api/cash/history", methods=["GET"], endpoint="cash_history")
    @auth
    @capability_required(Capability.VIEW_REGISTER_HISTORY)
    def cash_history():
        try:
            page = service.history(
                store_id=request.args.get("store_id"),
                start_date=request.args.get("start_date"),
                end_date=request.args.get("end_date"),
                page=request.args.get("page", 1),
                limit=request.args.get("limit", DEFAULT_HISTORY_LIMIT),
            )
            return ok(page.as_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("load cash register history")

    @app.route("/api/cash/monthly", methods=["GET"], endpoint="cash_monthly")
    @auth
    @capability_required(Capability.VIEW_MONTHLY_REGISTERS)
    def cash_monthly():
        try:
            report = service.monthly_report(
                viewer=g.current_user,
                year=request.args.get("year"),
                month=request.args.get("month"),
                store_id=request.args.get("store_id"),
            )
            return ok(report.as_dict())
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("build monthly cash register report")
