"""
Administrative HTTP API.

Thin adapter over ActionRelay: request bodies are validated with pydantic,
core errors are mapped to status codes, and everything else is the core's job.
Handlers are plain `def` so FastAPI runs them on its worker thread pool.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from actions.errors import DuplicateName, InvalidInput, NotFound, RequestConstructionError
from actions.service import ActionRelay
from utils.audit import audit_log

logger = logging.getLogger(__name__)


class ActionCreate(BaseModel):
    name: str = ""
    url: str = ""
    method: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""


class ActionUpdate(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None
    method: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    body: Optional[str] = None


def create_app(relay: ActionRelay) -> FastAPI:
    app = FastAPI(
        title="Companion Proxy",
        summary="Stored HTTP request templates, replayed on demand.",
    )
    app.state.relay = relay

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": "Invalid JSON request body"})

    @app.get("/actions")
    def list_actions() -> List[Dict[str, Any]]:
        return [a.to_dict() for a in relay.list_actions()]

    @app.post("/actions")
    def create_action(payload: ActionCreate) -> Dict[str, Any]:
        try:
            action = relay.create_action(
                payload.name,
                payload.url,
                method=payload.method,
                headers=payload.headers,
                body=payload.body,
            )
        except (InvalidInput, DuplicateName) as e:
            raise HTTPException(status_code=400, detail=str(e))
        audit_log(event="action_create", action_id=action.id, name=action.name, source="api")
        return action.to_dict()

    @app.get("/actions/{action_id}")
    def get_action(action_id: str) -> Dict[str, Any]:
        try:
            return relay.get_action(action_id).to_dict()
        except NotFound as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.put("/actions/{action_id}")
    def update_action(action_id: str, payload: ActionUpdate) -> Dict[str, Any]:
        try:
            action = relay.update_action(action_id, **payload.model_dump(exclude_unset=True))
        except NotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        except (InvalidInput, DuplicateName) as e:
            raise HTTPException(status_code=400, detail=str(e))
        audit_log(event="action_update", action_id=action.id, name=action.name, source="api")
        return action.to_dict()

    @app.delete("/actions/{action_id}", status_code=204)
    def delete_action(action_id: str) -> Response:
        logger.info("Received DELETE request for action ID: %s", action_id)
        try:
            relay.delete_action(action_id)
        except NotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        audit_log(event="action_delete", action_id=action_id, source="api")
        return Response(status_code=204)

    @app.get("/trigger/{name}", response_class=PlainTextResponse)
    def trigger(name: str) -> str:
        try:
            success, message = relay.trigger_by_name(name)
        except NotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        except RequestConstructionError as e:
            audit_log(event="trigger", name=name, ok=False, error=str(e), source="api")
            raise HTTPException(status_code=500, detail=f"Request creation error: {e}")
        audit_log(event="trigger", name=name, ok=success, message=message, source="api")
        return f"Action triggered: {message} (Success: {str(success).lower()})"

    @app.get("/logs")
    def list_logs() -> List[Dict[str, Any]]:
        return [e.to_dict() for e in relay.list_logs()]

    return app
