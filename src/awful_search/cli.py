"""CLI for awful-search: list filter kinds and compose query strings."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from awful_search.core.filters.filter_set import FilterSet
from awful_search.core.filters.kinds import FilterKind, all_kinds, kind_for_label
from awful_search.core.filters.search_filter import SearchFilter
from awful_search.core.filters.storage import dump_filters, load_filters
from awful_search.core.query.builder import build_query
from awful_search.errors import UnknownFilterKindError
from awful_search.identity import FileIdentity, StaticIdentity
from awful_search.logging_config import configure_logging
from awful_search.protocols import IdentityProtocol

app = typer.Typer(help="Forums search: build queries from free text and filters.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


@app.command()
def kinds() -> None:
    """List the available filter kinds."""
    for kind in all_kinds():
        editable = "" if kind.is_editable else "  (uses your username)"
        typer.echo(f"  {kind.name:<12} {kind.label:<18} {kind.template}{editable}")


def _resolve_kind(name: str) -> FilterKind:
    """Resolve a kind by identifier (USER_ID, user_id) or by label (User ID)."""
    kind = kind_for_label(name)
    if kind is not None:
        return kind
    try:
        return FilterKind[name.strip().upper().replace("-", "_").replace(" ", "_")]
    except KeyError:
        raise UnknownFilterKindError(name) from None


def _parse_filter(option: str, identity: IdentityProtocol) -> SearchFilter:
    """Parse a KIND=VALUE option; fixed kinds may omit =VALUE."""
    name, _, value = option.partition("=")
    kind = _resolve_kind(name)
    return SearchFilter.for_kind(kind, value, identity=identity)


@app.command()
def query(
    text: str = typer.Argument("", help="Free search text"),
    filter_options: Annotated[
        list[str] | None,
        typer.Option("--filter", "-f", help="Filter as KIND=VALUE, e.g. user_id=5"),
    ] = None,
    username: Annotated[
        str | None,
        typer.Option("--username", "-u", help="Username for MY_USERNAME filters"),
    ] = None,
    load: Annotated[
        Path | None,
        typer.Option("--load", "-l", help="Start from filters saved in this file"),
    ] = None,
    save: Annotated[
        Path | None,
        typer.Option("--save", "-s", help="Save the resulting filters to this file"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Build the query string for free text plus filters."""
    identity: IdentityProtocol = (
        StaticIdentity(username=username) if username is not None else FileIdentity()
    )

    filters = FilterSet()
    if load is not None:
        if not load.exists():
            logger.error("Filter file not found: {}", load)
            raise typer.Exit(1)
        try:
            filters = load_filters(load.read_text(encoding="utf-8"), identity=identity)
        except ValueError as e:
            logger.error("Cannot read filter file {}: {}", load, e)
            raise typer.Exit(1) from e

    for option in filter_options or []:
        try:
            filters.append(_parse_filter(option, identity))
        except (UnknownFilterKindError, ValueError) as e:
            logger.error("Bad filter {!r}: {}", option, e)
            raise typer.Exit(1) from e

    if save is not None:
        save.parent.mkdir(parents=True, exist_ok=True)
        save.write_text(dump_filters(filters), encoding="utf-8")
        logger.info("Saved {} filters to {}", len(filters), save)

    query_string = build_query(text, filters)
    if not query_string:
        logger.error("Nothing to search for: give search text or at least one filter")
        raise typer.Exit(1)

    if output_json:
        data = {
            "query": query_string,
            "filters": [
                {**f.to_dict(), "label": f.kind.label, "rendered": f.render()} for f in filters
            ],
        }
        typer.echo(json.dumps(data, indent=2))
    else:
        typer.echo(query_string)
