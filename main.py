import subprocess
import sys
from typing import Optional

import typer

from config import settings
from database import initialize_database
from store import ContactMessageStore, NotFound, StoreError, UserStore
from ui_helpers import set_output_mode, print_user_list, print_message_list

APP_NAME = "Library Desk CLI"

app = typer.Typer(help=APP_NAME)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    if output:
        set_output_mode(output)


@app.command("init-db")
def cli_init_db(db_file: Optional[str] = typer.Option(None, "--db-file", help="SQLite file to initialize")):
    """Create the users and contact_messages tables if they are missing."""
    path = initialize_database(db_file)
    print(f"Database ready: {path}")


@app.command("users")
def cli_users():
    """List all users, newest first."""
    try:
        print_user_list(UserStore().list_users())
    except StoreError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)


@app.command("user")
def cli_user(user_id: int):
    """Find a user by id and show the details."""
    try:
        user = UserStore().find_user(user_id)
    except StoreError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    if user:
        print("User Found")
        print(f"Name: {user.full_name}")
        print(f"Email: {user.email}")
        print(f"Phone: {user.phone}")
        print(f"Role: {user.role}")
    else:
        print(f"User {user_id} not found.")


@app.command("contacts")
def cli_contacts():
    """List all contact messages, newest first."""
    try:
        print_message_list(ContactMessageStore().list_messages())
    except StoreError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)


@app.command("remove-user")
def cli_remove_user(user_id: int):
    """Delete a user by id."""
    try:
        UserStore().delete(user_id)
        print(f"User {user_id} has been removed.")
    except NotFound:
        print(f"User {user_id} not found.")
    except StoreError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)


@app.command("remove-contact")
def cli_remove_contact(message_id: int):
    """Delete a contact message by id."""
    try:
        ContactMessageStore().delete(message_id)
        print(f"Message {message_id} has been removed.")
    except NotFound:
        print(f"Message {message_id} not found.")
    except StoreError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Run the API with uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    print(f"Starting API on http://{host}:{port}/")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:create_app",
        "--factory",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        args.append("--reload")
    try:
        subprocess.run(args)
    except FileNotFoundError:
        print("Error: `uvicorn` could not be started. Make sure it is installed.")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
