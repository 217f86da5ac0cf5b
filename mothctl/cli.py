"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from mothctl.core.errors import MothctlError
from mothctl.core.model import LIST, OperationRequest
from mothctl.core.parser import parse_arguments
from mothctl.core.service import MothService

__version__ = "1.0.0"

app = typer.Typer(
    help=(
        "Configure AudioMoth USB Microphones over USB HID.\n\n"
        "OPERATION is one of LIST, RESTORE, CONFIG, LED <on|off> or UPDATE, followed by "
        "settings keywords and optional 16 character device IDs."
    ),
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mothctl {__version__}")
        raise typer.Exit()


def _list_devices(service: MothService) -> None:
    for device in service.list_devices():
        typer.echo(f"{device.serial} - {device.label}kHz {service.profile.name}")


def _send_command(service: MothService, request: OperationRequest) -> None:
    report = service.dispatch(request)
    if report.no_devices:
        typer.echo(f"Warning: No {service.profile.name}s found.", err=True)
        return

    command = report.operation.upper()
    for outcome in report.outcomes:
        if outcome.ok:
            typer.echo(f"Sent {command} command to device ID {outcome.serial}.")
        elif outcome.status == "not_found":
            typer.echo(f"Error: {outcome.detail}", err=True)
        else:
            typer.echo(f"Error: Problem communicating with device ID {outcome.serial}.", err=True)


@app.command(context_settings={"ignore_unknown_options": True})
def main(
    tokens: list[str] | None = typer.Argument(None, metavar="OPERATION [ARGS]...", show_default=False),
    debug: bool = typer.Option(False, "--debug", help="Log HID packets and skipped devices"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Send LIST, RESTORE, CONFIG, LED or UPDATE to attached devices."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if not tokens:
        return

    try:
        request = parse_arguments(tokens)
        service = MothService()
        if request.operation == LIST:
            _list_devices(service)
        else:
            _send_command(service, request)
    except MothctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
