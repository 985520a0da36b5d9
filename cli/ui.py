# cli/ui.py
from __future__ import annotations
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Rendered into a capture buffer and printed as plain text so it always shows
_console = Console(force_terminal=True, soft_wrap=True)


def _render(renderable: Any) -> str:
    with _console.capture() as cap:
        _console.print(renderable)
    return cap.get()


def _print_table(title: str, headers: List[str], rows: List[List[str]]) -> None:
    table = Table(title=title, show_header=True, show_lines=True)
    for h in headers:
        table.add_column(h)
    for r in rows:
        table.add_row(*[str(x) for x in r])
    print(_render(table), end="", flush=True)


def _print_panel(text: str) -> None:
    print(_render(Panel.fit(text)), end="", flush=True)


# --- public helpers -----------------------------------------------------------
def show_actions(actions: List[Dict[str, Any]]) -> None:
    if not actions:
        _print_panel("No actions found.")
        return
    rows: List[List[str]] = []
    for a in actions:
        headers = ", ".join(f"{k}: {v}" for k, v in (a.get("headers") or {}).items())
        rows.append([a.get("id", ""), a.get("name", ""), a.get("method", ""),
                    a.get("url", ""), headers, (a.get("body") or "")[:60]])
    _print_table("Actions", ["ID", "Name", "Method", "URL", "Headers", "Body"], rows)


def show_action(action: Dict[str, Any], verb: str) -> None:
    headers = action.get("headers") or {}
    lines = [
        f"{verb} action",
        f"ID: {action.get('id', '')}",
        f"Name: {action.get('name', '')}",
        f"URL: {action.get('url', '')}",
        f"Method: {action.get('method', '')}",
        f"Headers: {headers}",
        f"Body: {action.get('body', '')}",
    ]
    _print_panel("\n".join(lines))


def show_logs(entries: List[Dict[str, Any]]) -> None:
    if not entries:
        _print_panel("No logs found.")
        return
    rows: List[List[str]] = []
    for i, e in enumerate(entries, start=1):
        ok = "true" if e.get("success") else "false"
        rows.append([str(i), e.get("timestamp", ""), e.get("action_id", ""),
                    ok, (e.get("response") or "")[-120:]])
    _print_table("Execution Log", ["#", "Timestamp", "Action ID", "OK", "Response"], rows)


def show_trigger(target: str, success: bool, message: str) -> None:
    status = "SUCCESS" if success else "FAILED"
    _print_panel(f"{status}\nAction: {target}\n{message}")


def show_error(message: str) -> None:
    _print_panel(f"ERROR\n{message}")


def show_message(text: str) -> None:
    _print_panel(text)
