from __future__ import annotations

from flask import Flask, g

from ..common.web import capability_required, error_response, internal_error, json_body, login_required, ok
from ..core.exceptions import DomainError
from ..core.permissions import Capability
from ..container import Container
from .service import amounts_as_dict


def register(app: Flask, container: Container) -> None:
    auth = login_required(container.users_repo)
    service = container.sales_service

    @app.route("/api/sales", methods=["POST"], endpoint="sales_create")
    @auth
    @capability_required(Capability.RECORD_SALES)
    def sales_create():
        try:
            sale = service.record_sale(user_id=g.current_user.user_id, payload=json_body())
            return ok(sale.as_dict(), message="Sale recorded successfully", status=201)
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("record sale")

    @app.route("/api/sales/<int:sale_id>", methods=["PUT"], endpoint="sales_update")
    @auth
    @capability_required(Capability.EDIT_SALES)
    def sales_update(sale_id: int):
        try:
            amounts = service.update_sale_amounts(sale_id=sale_id, payload=json_body())
            return ok(
                {"sale_id": sale_id, **amounts_as_dict(amounts)},
                message="Sale updated successfully",
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return internal_error("update sale")
