from __future__ import annotations

from flask import Flask, request

from ..container import Container
from ..core.constants import ERROR_TOKEN

ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def register(app: Flask, container: Container) -> None:
    """Plain-text endpoints polled by the terminals (not JSON)."""

    def _reply(body: str):
        status = 500 if body == ERROR_TOKEN else 200
        return app.response_class(body, status=status, mimetype="text/plain")

    def _payload() -> str:
        return request.get_data(as_text=True) or ""

    @app.route("/iclock/cdata", methods=["GET"], endpoint="iclock_handshake")
    def iclock_handshake():
        return _reply(container.iclock_service.register(request.args.get("SN")))

    @app.route("/iclock/cdata", methods=["POST"], endpoint="iclock_cdata")
    def iclock_cdata():
        return _reply(container.iclock_service.ingest(request.args.get("SN"), _payload()))

    @app.route("/iclock/getrequest", methods=ANY_METHOD, endpoint="iclock_getrequest")
    def iclock_getrequest():
        return _reply(container.iclock_service.heartbeat(request.args.get("SN")))

    @app.route("/iclock/querydata", methods=["POST"], endpoint="iclock_querydata")
    def iclock_querydata():
        return _reply(container.iclock_service.ingest_query_response(request.args.get("SN"), _payload()))
