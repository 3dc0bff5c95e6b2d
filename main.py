"""bh - command-line client for the Bullhorn ATS REST API.

Usage:
    bh auth login                                 # Start a session
    bh get Candidate 42 --fields id,firstName     # Fetch one record
    bh search JobOrder --query "isOpen:1"         # Lucene search
    bh query Placement --where "id > 100"         # SQL-like query
    bh create Candidate firstName=Jane lastName=Doe
    bh update Candidate 42 status="Active"
    bh delete Candidate 42 --force
    bh meta Candidate
    bh entities
"""

import logging
from contextlib import contextmanager
from typing import Annotated, Optional

import typer
from rich.markup import escape

import auth_utils
import config
import display
import token_store
from bullhorn_api import BullhornApi
from display import console, err_console
from errors import ApiError, BullhornCliError
from fields import parse_fields

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="bh",
    help="Command-line client for the Bullhorn ATS REST API.",
    no_args_is_help=True,
    add_completion=False,
)
auth_app = typer.Typer(help="Manage Bullhorn authentication (login, logout, status).", no_args_is_help=True)
app.add_typer(auth_app, name="auth")


# ============================================
# Shared Options
# ============================================
FieldsOption = Annotated[
    str,
    typer.Option("--fields", "-f", help="Comma-separated list of fields to return (e.g. \"id,name,email\")"),
]

OutputOption = Annotated[
    str,
    typer.Option("--output", "-o", help="Output format (table or json)"),
]

CountOption = Annotated[int, typer.Option("--count", "-c", help="Number of records to return per page")]

StartOption = Annotated[int, typer.Option("--start", help="The starting index for pagination")]


# ============================================
# Session and error helpers
# ============================================
def get_store():
    return token_store.TokenStore()


def refresh_session(store):
    err_console.print("[yellow]Session expired. Refreshing token...[/yellow]")
    bh_rest_token = auth_utils.refresh(store)
    err_console.print("[green]✅ Session renewed.[/green]")
    return bh_rest_token


def get_api():
    store = get_store()
    return BullhornApi(store, refresh=lambda: refresh_session(store))


def report_error(error, failed=None, hints=None):
    if failed:
        err_console.print(f"[red]❌ {escape(failed)}[/red]")
    err_console.print(f"[red]{escape(str(error))}[/red]")

    hint = error.hint
    if hints and isinstance(error, ApiError) and error.status_code in hints:
        hint = hints[error.status_code]
    if hint:
        err_console.print(f"[yellow]{escape(hint)}[/yellow]")


@contextmanager
def command_errors(failed=None, hints=None):
    """Report any CLI error and exit 1."""
    try:
        yield
    except BullhornCliError as e:
        logger.debug("Command failed", exc_info=True)
        report_error(e, failed, hints)
        raise typer.Exit(1)


def require_api():
    with command_errors():
        return get_api()


def version_callback(value: bool):
    if value:
        console.print(f"{config.PROJECT_NAME} {config.VERSION}")
        raise typer.Exit()


@app.callback()
def callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit"),
    ] = None,
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ============================================
# auth
# ============================================
def _ask(text, default, secret=False):
    return typer.prompt(text, default=default or None, hide_input=secret, show_default=not secret)


@auth_app.command("login")
def auth_login(
    username: Annotated[Optional[str], typer.Option("--username", help="Bullhorn username")] = None,
    password: Annotated[Optional[str], typer.Option("--password", help="Bullhorn password")] = None,
    client_id: Annotated[Optional[str], typer.Option("--client-id", help="API client id")] = None,
    client_secret: Annotated[Optional[str], typer.Option("--client-secret", help="API client secret")] = None,
):
    """Authenticate with the Bullhorn API and save the session."""
    defaults = config.login_defaults()
    username = username or _ask("Enter your Bullhorn username", defaults["username"])
    password = password or _ask("Enter your Bullhorn password", defaults["password"], secret=True)
    client_id = client_id or _ask("Enter your Bullhorn API Client ID", defaults["client_id"])
    client_secret = client_secret or _ask(
        "Enter your Bullhorn API Client Secret", defaults["client_secret"], secret=True
    )

    store = get_store()
    with command_errors("Authentication failed."):
        with err_console.status("Authenticating with Bullhorn...") as status:
            auth_utils.login(store, username, password, client_id, client_secret, progress=status.update)

    err_console.print("[green]✅ Successfully authenticated![/green]")
    console.print("Your API session is now active.")


@auth_app.command("logout")
def auth_logout():
    """Clear stored credentials and end the current session."""
    auth_utils.logout(get_store())
    err_console.print("[green]✅ Successfully logged out.[/green]")
    console.print("All stored credentials and session data have been removed.")


@auth_app.command("status")
def auth_status():
    """Check the current authentication status."""
    store = get_store()
    if store.is_logged_in():
        console.print("[green]✅ You are logged in.[/green]")
        console.print(f"   REST URL: {store.get(token_store.REST_URL)}", highlight=False)
    else:
        console.print("[yellow]❌ You are not logged in.[/yellow]")
        console.print("   Run [cyan]bh auth login[/cyan] to authenticate.")


# ============================================
# Read commands
# ============================================
@app.command()
def get(
    entity_type: Annotated[str, typer.Argument(help="The type of entity (e.g. Candidate, JobOrder)")],
    entity_id: Annotated[int, typer.Argument(help="The numeric ID of the entity record")],
    fields: FieldsOption = "*",
    output: OutputOption = "table",
):
    """Fetch a single entity record by its ID."""
    with command_errors():
        display.check_output(output)
    api = require_api()

    with command_errors("Failed to fetch record."):
        with err_console.status(f"Fetching {entity_type} {entity_id}..."):
            data = api.get(f"entity/{entity_type}/{entity_id}", params={"fields": fields})
    record = data.get("data") or {}

    err_console.print("[green]✅ Fetch successful![/green]")
    if output == "json":
        display.print_json(record)
    else:
        display.print_record(entity_type, entity_id, record)


def _print_found(records, output, empty_message):
    if not records:
        err_console.print(f"[yellow]{empty_message}[/yellow]")
        return
    err_console.print(f"[green]✅ Found {len(records)} records.[/green]")
    if output == "json":
        display.print_json(records)
    else:
        display.print_records(records)


@app.command()
def search(
    entity_type: Annotated[str, typer.Argument(help="The type of entity to search (e.g. Candidate, JobOrder)")],
    query: Annotated[
        str, typer.Option("--query", "-q", help="The Lucene query string (e.g. \"isDeleted:0 AND name:John*\")")
    ],
    fields: FieldsOption = "id,name",
    count: CountOption = 15,
    start: StartOption = 0,
    sort: Annotated[
        Optional[str],
        typer.Option("--sort", "-s", help="Field to sort by (prepend - for descending, e.g. \"-dateAdded\")"),
    ] = None,
    output: OutputOption = "table",
):
    """Search for entity records using a Lucene query."""
    with command_errors():
        display.check_output(output)
    api = require_api()

    params = {"query": query, "fields": fields, "count": count, "start": start}
    if sort:
        params["sort"] = sort

    hints = {400: "This may be due to an invalid Lucene query syntax. Please check your --query value."}
    with command_errors("Search request failed.", hints):
        with err_console.status(f"Searching for {entity_type} records..."):
            data = api.get(f"search/{entity_type}", params=params)

    _print_found(data.get("data"), output, "No records found matching your query.")


@app.command("query")
def query_(
    entity_type: Annotated[str, typer.Argument(help="The type of entity to query (e.g. Candidate, JobOrder)")],
    where: Annotated[
        str, typer.Option("--where", "-w", help="The SQL-like WHERE clause (e.g. \"id > 100 AND name = 'John'\")")
    ],
    fields: FieldsOption = "id",
    count: CountOption = 15,
    start: StartOption = 0,
    order_by: Annotated[
        Optional[str],
        typer.Option("--orderBy", "--order-by", help="Field to sort by (add DESC for descending, e.g. \"name DESC\")"),
    ] = None,
    output: OutputOption = "table",
):
    """Query for entity records using a SQL-like WHERE clause."""
    with command_errors():
        display.check_output(output)
    api = require_api()

    params = {"where": where, "fields": fields, "count": count, "start": start}
    if order_by:
        params["orderBy"] = order_by

    hints = {400: "This may be due to an invalid SQL-like WHERE clause. Check your syntax."}
    with command_errors("Query request failed.", hints):
        with err_console.status(f"Querying for {entity_type} records..."):
            data = api.post(f"query/{entity_type}", json={"params": params})

    _print_found(data.get("data"), output, "No records found matching your WHERE clause.")


@app.command()
def meta(
    entity_type: Annotated[str, typer.Argument(help="The entity to get metadata for (e.g. Candidate)")],
    fields: Annotated[
        str, typer.Option("--fields", "-f", help="Comma-separated list of fields to get metadata for")
    ] = "*",
    output: OutputOption = "table",
):
    """Get metadata for a Bullhorn entity (fields, types, etc.)."""
    with command_errors():
        display.check_output(output)
    api = require_api()

    hints = {404: f"The entity type \"{entity_type}\" may be invalid."}
    with command_errors("Failed to fetch metadata.", hints):
        with err_console.status(f"Fetching metadata for {entity_type}..."):
            metadata = api.get(f"meta/{entity_type}", params={"fields": fields})

    err_console.print("[green]✅ Successfully fetched metadata![/green]")
    if output == "json":
        display.print_json(metadata)
    else:
        display.print_meta(entity_type, metadata)


# ============================================
# Write commands
# ============================================
@app.command()
def create(
    entity_type: Annotated[str, typer.Argument(help="The type of entity to create (e.g. Candidate, Note)")],
    fields: Annotated[
        list[str], typer.Argument(help="Space-separated key=value pairs (e.g. firstName=\"John Doe\" status=New)")
    ],
):
    """Create a new entity record."""
    with command_errors():
        body = parse_fields(fields)
    api = require_api()

    hints = {400: "This may be due to missing required fields or incorrect data types."}
    with command_errors(f"Failed to create {entity_type}.", hints):
        with err_console.status(f"Creating new {entity_type}..."):
            data = api.post(f"entity/{entity_type}", json=body)
        new_id = data.get("changedEntityId")
        if not new_id:
            raise ApiError("API response did not include the new entity ID.")

    err_console.print("[green]✅ Successfully created record![/green]")
    console.print(f"New {entity_type} ID: {new_id}", highlight=False)


@app.command()
def update(
    entity_type: Annotated[str, typer.Argument(help="The type of entity to update (e.g. Candidate, JobOrder)")],
    entity_id: Annotated[int, typer.Argument(help="The numeric ID of the entity record to update")],
    fields: Annotated[list[str], typer.Argument(help="Space-separated key=value pairs for the fields to update")],
):
    """Update an existing entity record by its ID."""
    with command_errors():
        body = parse_fields(fields)
    api = require_api()

    hints = {400: "This may be due to invalid field names, incorrect data types, or read-only fields."}
    with command_errors(f"Failed to update {entity_type}.", hints):
        with err_console.status(f"Updating {entity_type} {entity_id}..."):
            data = api.post(f"entity/{entity_type}/{entity_id}", json=body)
        if data.get("changedEntityId") != entity_id:
            raise ApiError("API response did not confirm the update for the correct entity ID.")

    err_console.print("[green]✅ Successfully updated record![/green]")
    console.print(f"{entity_type} {entity_id} has been updated.", highlight=False)


@app.command()
def delete(
    entity_type: Annotated[str, typer.Argument(help="The type of entity to delete")],
    entity_id: Annotated[int, typer.Argument(help="The numeric ID of the entity record")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Bypass the confirmation prompt")] = False,
):
    """Delete an entity record."""
    api = require_api()
    if not force:
        confirmed = typer.confirm(
            f"Are you sure you want to DELETE {entity_type} {entity_id}? This action cannot be undone.",
            default=False,
        )
        if not confirmed:
            console.print("[blue]Deletion cancelled.[/blue]")
            return

    hints = {
        404: "The record you are trying to delete does not exist.",
        400: "The record may have dependencies that prevent it from being deleted.",
    }
    with command_errors(f"Failed to delete {entity_type}.", hints):
        with err_console.status(f"Deleting {entity_type} {entity_id}..."):
            api.delete(f"entity/{entity_type}/{entity_id}")

    err_console.print("[green]✅ Successfully deleted record.[/green]")


# ============================================
# Offline commands
# ============================================
@app.command()
def entities():
    """Display a flowchart of major Bullhorn entities and their relationships."""
    display.print_entities()


@app.command()
def test():
    """A simple test command to check if the CLI is working."""
    console.print("[green]✅ Bullhorn CLI is set up correctly![/green]")


def run():
    app()


if __name__ == "__main__":
    run()
