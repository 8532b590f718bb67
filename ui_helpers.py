import os
import json
from typing import List, Any
from rich.console import Console
from rich.table import Table

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_user_list(users: List[Any]) -> None:
    """Print users in the current output mode.
    - plain: 'id - Full Name <email> [Role]' lines, or 'No users found.'
    - json: JSON array of the public user fields
    - rich: Rich table
    """
    mode = get_output_mode()

    if not users:
        print("No users found.")
        return

    if mode == "json":
        print(json.dumps([u.to_dict() for u in users], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Users", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Full Name", style="white")
        table.add_column("Email", style="white")
        table.add_column("Phone", style="white")
        table.add_column("Role", style="green")
        for u in users:
            table.add_row(str(u.id), u.full_name, u.email, u.phone, u.role)
        _console.print(table)
    else:
        for u in users:
            print(f"{u.id} - {u.full_name} <{u.email}> [{u.role}]")


def print_message_list(messages: List[Any]) -> None:
    """Print contact messages in the current output mode."""
    mode = get_output_mode()

    if not messages:
        print("No contact messages.")
        return

    if mode == "json":
        print(json.dumps([m.to_dict() for m in messages], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="✉️  Contact Messages", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("From", style="white")
        table.add_column("Subject", style="green")
        table.add_column("Message", style="white")
        table.add_column("Received", style="dim")
        for m in messages:
            table.add_row(str(m.id), f"{m.name} <{m.email}>", m.subject, m.message, m.created_at or "")
        _console.print(table)
    else:
        for m in messages:
            print(f"{m.id} - [{m.subject}] {m.name} <{m.email}>: {m.message}")
