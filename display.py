import json

from rich.console import Console
from rich.table import Table

from errors import ValidationError

console = Console()
err_console = Console(stderr=True)

OUTPUT_FORMATS = ("table", "json")


def check_output(output):
    if output not in OUTPUT_FORMATS:
        raise ValidationError(f"Unknown output format '{output}'.", hint="Use 'table' or 'json'.")
    return output


def cell(value):
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def print_json(data):
    # Plain print keeps the output pipeable
    print(json.dumps(data, indent=2))


def print_record(entity_type, entity_id, record):
    table = Table(title=f"Details for {entity_type} {entity_id}", show_lines=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in record.items():
        table.add_row(key, cell(value))
    console.print(table)


def print_records(records):
    columns = []
    for record in records:
        for key in record:
            if key not in columns:
                columns.append(key)

    table = Table(show_lines=True)
    for col in columns:
        table.add_column(col)
    for record in records:
        table.add_row(*[cell(record.get(col)) for col in columns])
    console.print(table)


def print_meta(entity_type, metadata):
    fields = metadata.get("fields") or []
    if not fields:
        console.print("[yellow]No field information returned for this entity.[/yellow]")
        return

    table = Table(title=f"Fields for {metadata.get('label') or entity_type}")
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Data Type")
    table.add_column("Label")
    table.add_column("Required", justify="center")
    table.add_column("Read-Only", justify="center")
    for f in fields:
        table.add_row(
            cell(f.get("name")),
            cell(f.get("type")),
            cell(f.get("dataType")),
            cell(f.get("label")),
            "[green]✔[/green]" if f.get("required") else "[red]✖[/red]",
            "[yellow]✔[/yellow]" if f.get("readOnly") else "",
        )
    console.print(table)


ENTITY_FLOWCHART = r"""
[bold yellow]Bullhorn Core Entity Flowchart[/bold yellow]

                  [bold cyan][ ClientCorporation ][/bold cyan]
                      [dim](The Company)[/dim]
                            [dim]|[/dim]
                            [dim]| has...[/dim]
                            [dim]|[/dim]
                  [dim]+-----------------+[/dim]
                  [dim]|                 |[/dim]
        [bold cyan][ ClientContact ][/bold cyan]       [bold cyan][ JobOrder ][/bold cyan]
         [dim](Contact Person)[/dim]        [dim](Job Opening)[/dim]
                  [dim]|                 |[/dim]
                  [dim]| opens...        | is submitted to...[/dim]
                  [dim]+-----------------+[/dim]
                                      [dim]|[/dim]
                                      [dim]|[/dim]
                               [bold cyan][ JobSubmission ][/bold cyan]
                                 [dim](Application)[/dim]
                                [dim]/            \\[/dim]
                               [dim]/              \ is for...[/dim]
                              [dim]/                \\[/dim]
                             [dim]/                  \\[/dim]
              [bold cyan][ Candidate ][/bold cyan]                 [dim]... and results in a...[/dim]
              [dim](The Person)[/dim]                        [dim]|[/dim]
                                                  [dim]|[/dim]
                                            [bold cyan][ Placement ][/bold cyan]
                                               [dim](A Hire)[/dim]

[dim]- - - - - - - - - - - - - - - - - - - - - - - - - - - - - - - -[/dim]

[bold yellow]Commonly Associated Entities:[/bold yellow]
  [bold cyan][ Note ][/bold cyan] [dim]can be attached to =>[/dim] [bold cyan][ Candidate ][/bold cyan], [bold cyan][ JobOrder ][/bold cyan], [bold cyan][ ClientContact ][/bold cyan], etc.
"""


def print_entities():
    console.print(ENTITY_FLOWCHART, highlight=False, soft_wrap=True)
