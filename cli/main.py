from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, NoReturn, Optional

import typer

from actions.errors import RelayError, RequestConstructionError
from actions.service import ActionRelay
from cli.ui import show_action, show_actions, show_error, show_logs, show_message, show_trigger
from configs import settings
from utils.audit import audit_log

app = typer.Typer(help="Companion Proxy: store HTTP request templates and replay them on demand.")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diagnostics to stderr."),
) -> None:
    level = "DEBUG" if verbose else settings.log_level("WARNING")
    logging.basicConfig(level=level, format=settings.LOG_FORMAT)
    if ctx.invoked_subcommand is None:
        # bare invocation: show help, then serve with defaults
        typer.echo(ctx.get_help())
        cmd_server(host=None, port=None)


def _relay() -> ActionRelay:
    relay = ActionRelay()
    relay.load()
    return relay


def _emit(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2))


def _fail(message: str, pretty: bool) -> NoReturn:
    if pretty:
        show_error(message)
    else:
        _emit({"ok": False, "error": message})
    raise typer.Exit(code=1)


def _parse_headers(values: Optional[List[str]], pretty: bool) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for raw in values or []:
        key, sep, value = raw.partition(":")
        if not sep or not key.strip():
            _fail("Invalid header format. Expected Key:Value", pretty)
        headers[key.strip()] = value.strip()
    return headers


@app.command("server")
def cmd_server(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address."),
    port: Optional[int] = typer.Option(None, "--port", help="Port number for the server."),
) -> None:
    import uvicorn

    from server.api import create_app

    logging.getLogger().setLevel(settings.log_level())
    relay = _relay()
    uvicorn.run(
        create_app(relay),
        host=host or settings.server_host(),
        port=port or settings.server_port(),
        log_level=settings.log_level().lower(),
    )


@app.command("add")
def cmd_add(
    name: str = typer.Option(..., "--name", help="Unique name for the action."),
    url: str = typer.Option(..., "--url", help="URL for the action."),
    method: str = typer.Option("POST", "--method", help="HTTP method to use."),
    header: Optional[List[str]] = typer.Option(None, "--header", help='Header as "Key:Value"; repeatable.'),
    body: str = typer.Option("", "--body", help="Request body."),
    pretty: bool = typer.Option(False, "--pretty/--no-pretty"),
) -> None:
    headers = _parse_headers(header, pretty)
    relay = _relay()
    try:
        action = relay.create_action(name, url, method=method, headers=headers, body=body)
    except RelayError as e:
        _fail(str(e), pretty)
    audit_log(event="action_create", action_id=action.id, name=action.name, source="cli")
    if pretty:
        show_action(action.to_dict(), "Added")
    else:
        _emit({"ok": True, "action": action.to_dict()})


@app.command("edit")
def cmd_edit(
    action_id: str = typer.Option(..., "--id", help="ID of the action to edit."),
    name: Optional[str] = typer.Option(None, "--name", help="New name."),
    url: Optional[str] = typer.Option(None, "--url", help="New URL."),
    method: Optional[str] = typer.Option(None, "--method", help="New HTTP method."),
    header: Optional[List[str]] = typer.Option(
        None, "--header", help='Replaces ALL headers; "Key:Value", repeatable.'),
    body: Optional[str] = typer.Option(None, "--body", help="New request body."),
    pretty: bool = typer.Option(False, "--pretty/--no-pretty"),
) -> None:
    # an absent --header leaves the headers alone; any --header replaces them wholesale
    headers = _parse_headers(header, pretty) if header else None
    relay = _relay()
    try:
        action = relay.update_action(action_id, name=name, url=url, method=method,
                                     headers=headers, body=body)
    except RelayError as e:
        _fail(str(e), pretty)
    audit_log(event="action_update", action_id=action.id, name=action.name, source="cli")
    if pretty:
        show_action(action.to_dict(), "Edited")
    else:
        _emit({"ok": True, "action": action.to_dict()})


@app.command("delete")
def cmd_delete(
    action_id: str = typer.Option(..., "--id", help="ID of the action to delete."),
    pretty: bool = typer.Option(False, "--pretty/--no-pretty"),
) -> None:
    relay = _relay()
    try:
        relay.delete_action(action_id)
    except RelayError as e:
        _fail(str(e), pretty)
    audit_log(event="action_delete", action_id=action_id, source="cli")
    if pretty:
        show_message(f"Deleted action with id: {action_id}")
    else:
        _emit({"ok": True, "deleted": action_id})


@app.command("list")
def cmd_list(pretty: bool = typer.Option(False, "--pretty/--no-pretty")) -> None:
    actions = sorted(_relay().list_actions(), key=lambda a: a.name)
    data = [a.to_dict() for a in actions]
    if pretty:
        show_actions(data)
    else:
        _emit({"actions": data})


@app.command("trigger")
def cmd_trigger(
    action_id: Optional[str] = typer.Option(None, "--id", help="ID of the action to trigger."),
    name: Optional[str] = typer.Option(None, "--name", help="Name of the action to trigger."),
    pretty: bool = typer.Option(False, "--pretty/--no-pretty"),
) -> None:
    if bool(action_id) == bool(name):
        _fail("Exactly one of --id or --name is required.", pretty)
    relay = _relay()
    target = action_id or name
    try:
        if action_id:
            success, message = relay.trigger_by_id(action_id)
        else:
            success, message = relay.trigger_by_name(name)
    except RequestConstructionError as e:
        audit_log(event="trigger", target=target, ok=False, error=str(e), source="cli")
        _fail(f"Error triggering action: {e}", pretty)
    except RelayError as e:
        _fail(str(e), pretty)
    audit_log(event="trigger", target=target, ok=success, message=message, source="cli")
    if pretty:
        show_trigger(target, success, message)
    else:
        _emit({"ok": success, "response": message,
               "message": f"Action triggered: {message} (Success: {str(success).lower()})"})


@app.command("logs")
def cmd_logs(pretty: bool = typer.Option(False, "--pretty/--no-pretty")) -> None:
    entries = [e.to_dict() for e in _relay().list_logs()]
    if pretty:
        show_logs(entries)
    else:
        _emit({"logs": entries})


if __name__ == "__main__":
    app()
