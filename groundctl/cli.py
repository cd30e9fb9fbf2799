"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from groundctl.core.errors import GroundctlError
from groundctl.core.service import GroundService

app = typer.Typer(help="Headless drone ground-station sample screens driven by scripted scenarios")


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Log reference and session activity"),
) -> None:
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _build_service() -> GroundService:
    service = GroundService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("screens")
def list_screens() -> None:
    """List the available sample screens and their controls."""
    try:
        service = _build_service()
        for screen in service.list_screens():
            typer.echo(f"{screen.name}: {screen.title}")
            if screen.actions:
                typer.echo(f"  actions: {', '.join(screen.actions)}")
            if screen.selectors:
                typer.echo(f"  selectors: {', '.join(screen.selectors)}")
    except GroundctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("palettes")
def list_palettes() -> None:
    """List the thermal palettes."""
    try:
        service = _build_service()
        palettes = service.list_palettes()
        if not palettes:
            typer.echo("No palettes loaded")
            raise typer.Exit(code=1)

        for palette in palettes:
            typer.echo(f"{palette.id}: {palette.name} ({palette.kind}, {len(palette.colors)} colors)")
    except GroundctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("scenarios")
def list_scenarios(
    screen: str | None = typer.Option(None, "--screen", help="Only scenarios of this screen"),
) -> None:
    """List the scripted scenarios."""
    try:
        service = _build_service()
        scenarios = service.list_scenarios(screen)
        if not scenarios:
            typer.echo("No scenarios found")
            return

        for scenario in scenarios:
            typer.echo(f"{scenario.id} [{scenario.screen}]: {scenario.name} ({len(scenario.steps)} steps)")
    except GroundctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("run")
def run_screen(
    screen: str,
    scenario: str | None = typer.Option(None, "--scenario", help="Scenario ID"),
) -> None:
    """Play a scenario on SCREEN against the simulated SDK.

    The screen's widgets are printed after every step.
    """
    try:
        service = _build_service()
        for result in service.run_scenario(screen, scenario):
            typer.echo(f"[{result.index}] {result.step}")
            for line in result.surface:
                typer.echo(f"  {line}")
    except GroundctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
