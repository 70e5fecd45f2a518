"""Command-line front end for the toydb catalog.

The SQL parser is an external collaborator: statements arrive here already
parsed, one JSON document per line, e.g.

    {"kind": "create_database", "name": "shop"}
    {"kind": "create_table", "name": "users",
     "columns": [{"name": "id", "data_type": "INT", "is_primary_key": true}]}
"""

import logging
from pathlib import Path

import click
from alembic import command
from alembic.config import Config
from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from toydb_meta import db as db_module
from toydb_meta.exceptions import CatalogError
from toydb_meta.schemas import parse_statement_json
from toydb_meta.session import CatalogSession

log = logging.getLogger()

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def prompt_for(session: CatalogSession) -> str:
    """Prompt text showing the current database, if any."""
    name = session.current_database_name()
    return "> " if name is None else f"{name}> "


def run_line(session: CatalogSession, line: str) -> bool:
    """Parses and handles one statement line, echoing display rows.

    Failures are logged and swallowed so that the caller's loop can move on
    to the next statement.

    Returns:
        `True` if the statement succeeded.
    """
    try:
        rows = session.handle(parse_statement_json(line))
    except ValidationError as ex:
        log.error("Invalid statement: %s", ex)
        return False
    except CatalogError as ex:
        log.error("%s", ex)
        return False

    for row in rows or []:
        click.echo("\t".join(row))
    return True


@click.group()
@click.option(
    "--database-uri",
    envvar="TOYDB_DATABASE_URI",
    default=db_module.db_url,
    show_default=True,
    help="SQLAlchemy URI of the metadata store.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def cli(ctx: click.Context, database_uri: str, verbose: bool):
    """Schema catalog for toydb."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(message)s",
    )
    ctx.obj = {"database_uri": database_uri}


@cli.command()
@click.option(
    "--reset", is_flag=True, help="Clear old catalog data and re-create (dangerous)."
)
@click.pass_context
def init(ctx: click.Context, reset: bool):
    """Creates the catalog tables if they do not exist."""
    engine = db_module.make_engine(ctx.obj["database_uri"])
    if reset:
        db_module.reset_schema(engine)
    else:
        db_module.init_schema(engine)
    engine.dispose()
    click.echo("Catalog initialized.")


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=ALEMBIC_INI,
    show_default=True,
    help="Path to alembic.ini.",
)
@click.pass_context
def migrate(ctx: click.Context, config_path: Path):
    """Upgrades the catalog schema to the latest alembic revision."""
    config = Config(str(config_path))
    config.set_main_option("script_location", str(config_path.parent / "alembic"))
    config.set_main_option("sqlalchemy.url", ctx.obj["database_uri"])
    config.attributes["configure_logger"] = False
    command.upgrade(config, "head")


@cli.command()
@click.argument("statements", type=click.File("r"))
@click.pass_context
def apply(ctx: click.Context, statements):
    """Applies parsed statements (JSON lines) from STATEMENTS ("-" for stdin).

    Each statement is its own transaction. A failing statement is reported
    and skipped; the exit code is 1 if any statement failed.
    """
    engine = db_module.make_engine(ctx.obj["database_uri"])
    db_module.init_schema(engine)
    session = CatalogSession(sessionmaker(engine))

    failures = 0
    try:
        for line in statements:
            if line.strip() and not run_line(session, line):
                failures += 1
    finally:
        engine.dispose()
    if failures:
        ctx.exit(1)


@cli.command()
@click.pass_context
def shell(ctx: click.Context):
    """Reads parsed statements (one JSON document per line) interactively."""
    engine = db_module.make_engine(ctx.obj["database_uri"])
    db_module.init_schema(engine)
    session = CatalogSession(sessionmaker(engine))

    try:
        while True:
            try:
                line = click.prompt(
                    prompt_for(session),
                    prompt_suffix="",
                    default="",
                    show_default=False,
                )
            except click.Abort:
                break
            if line.strip():
                run_line(session, line)
    finally:
        engine.dispose()


if __name__ == "__main__":
    cli()
