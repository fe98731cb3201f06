"""Record CRUD commands."""

from typing import Annotated

import typer

from dynarecord.cli.context import CLIContext
from dynarecord.cli.output import OutputFormatter
from dynarecord.cli.parsing import parse_attributes, parse_identity, read_json_file

app = typer.Typer(help="Save, find, list and delete records")

TypeArgument = Annotated[str, typer.Argument(help="Record type name, e.g. Post (table: posts)")]
IdentityOption = Annotated[
    str,
    typer.Option("--identity", "-i", help="Identity attribute name"),
]


def _load_attributes(data_json: str | None, from_file: str | None) -> dict:
    if from_file:
        return read_json_file(from_file)
    if data_json:
        return parse_attributes(data_json)
    raise typer.BadParameter("Either provide attributes as JSON string or use --from-file")


@app.command("insert")
def records_insert(
    ctx: typer.Context,
    type_name: TypeArgument,
    data_json: Annotated[
        str | None,
        typer.Argument(help="Attributes as JSON object"),
    ] = None,
    from_file: Annotated[
        str | None,
        typer.Option("--from-file", "-f", help="Load attributes from JSON file"),
    ] = None,
    identity: IdentityOption = "id",
) -> None:
    """Insert a new record and print its identity.

    Examples:

        dynarecord records insert Post '{"title": "Le Wagon"}'

        dynarecord records insert User --from-file user.json
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        attributes = _load_attributes(data_json, from_file)
        if identity in attributes:
            raise typer.BadParameter(
                f"Attributes must not include '{identity}' when inserting; "
                f"use 'records update' to change an existing record"
            )
        record = cli_ctx.record_type(type_name, identity)(attributes)
        record.save()
        formatter.print_success(
            f"Inserted {type_name}",
            {identity: record.identity_value},
        )
    except typer.BadParameter:
        raise
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("update")
def records_update(
    ctx: typer.Context,
    type_name: TypeArgument,
    data_json: Annotated[
        str | None,
        typer.Argument(help="Attributes as JSON object, identity included"),
    ] = None,
    from_file: Annotated[
        str | None,
        typer.Option("--from-file", "-f", help="Load attributes from JSON file"),
    ] = None,
    identity: IdentityOption = "id",
) -> None:
    """Update the attributes given, keyed by the identity.

    Examples:

        dynarecord records update User '{"id": 3, "name": "Rafa", "age": 22}'
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        attributes = _load_attributes(data_json, from_file)
        if attributes.get(identity) is None:
            raise typer.BadParameter(f"Attributes must include '{identity}' to update")
        record = cli_ctx.record_type(type_name, identity)(attributes)
        record.save()
        formatter.print_success(f"Updated {type_name}", {identity: record.identity_value})
    except typer.BadParameter:
        raise
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("get")
def records_get(
    ctx: typer.Context,
    type_name: TypeArgument,
    record_id: Annotated[str, typer.Argument(help="Identity value")],
    identity: IdentityOption = "id",
) -> None:
    """Get a record by identity.

    Examples:

        dynarecord records get Post 1
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        record = cli_ctx.record_type(type_name, identity).find(parse_identity(record_id))
        if record is None:
            formatter.print_error(Exception(f"{type_name} not found: {record_id}"))
            raise typer.Exit(code=1)
        formatter.print_record(record)
    except typer.Exit:
        raise
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("list")
def records_list(
    ctx: typer.Context,
    type_name: TypeArgument,
    identity: IdentityOption = "id",
) -> None:
    """List every record of a type, in storage order.

    Examples:

        dynarecord records list Post
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        cls = cli_ctx.record_type(type_name, identity)
        formatter.print_records(cls.table_name(), cls.all())
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("delete")
def records_delete(
    ctx: typer.Context,
    type_name: TypeArgument,
    record_id: Annotated[str, typer.Argument(help="Identity value")],
    identity: IdentityOption = "id",
) -> None:
    """Delete a record by identity.

    Examples:

        dynarecord records delete Post 1
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        value = parse_identity(record_id)
        record = cli_ctx.record_type(type_name, identity)({identity: value})
        record.destroy()
        formatter.print_success(f"Deleted {type_name}", {identity: value})
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()


@app.command("sql")
def records_sql(
    ctx: typer.Context,
    type_name: TypeArgument,
    data_json: Annotated[str, typer.Argument(help="Attributes as JSON object")],
    identity: IdentityOption = "id",
) -> None:
    """Show the statement saving these attributes would run, without running it.

    Examples:

        dynarecord records sql User '{"id": 3, "name": "Rafa", "age": 22}'
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        record = cli_ctx.record_type(type_name, identity)(parse_attributes(data_json))
        formatter.print_statement(record.save_statement())
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)
    finally:
        cli_ctx.close()
