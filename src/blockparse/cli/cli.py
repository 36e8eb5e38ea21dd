"""CLI entrypoint: Typer app definition and command registration"""

import typer

from blockparse.cli.commands import parse_cmd, serialize_cmd, validate_cmd


app = typer.Typer(name="blockparse", no_args_is_help=True, help="Delimited block document parser")

app.command(name="parse")(parse_cmd)
app.command(name="validate")(validate_cmd)
app.command(name="serialize")(serialize_cmd)
