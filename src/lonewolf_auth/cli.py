"""CLI entry point for lonewolf-auth."""

from __future__ import annotations

import base64
import logging
import sys
import time
from pathlib import Path

import click
from rich.console import Console

from lonewolf_auth.exceptions import MfaError

console = Console()
err_console = Console(stderr=True)

EXIT_REJECTED = 1
EXIT_ERROR = 2


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """LoneWolf Auth: TOTP enrollment and verification."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


@main.command()
def secret() -> None:
    """Print a new random secret."""
    from lonewolf_auth.mfa.totp import generate_random_string

    click.echo(generate_random_string())


@main.command()
@click.argument("account_name")
@click.option("--issuer", default=None, help="Issuer label (defaults to MFA_DEFAULT_ISSUER).")
@click.option("--qr-out", type=click.Path(dir_okay=False, path_type=Path), help="Write the QR PNG here.")
@click.option("--json", "as_json", is_flag=True, help="Print the enrollment as JSON.")
def enroll(account_name: str, issuer: str | None, qr_out: Path | None, as_json: bool) -> None:
    """Create a secret and QR code for ACCOUNT_NAME."""
    from lonewolf_auth.config import settings
    from lonewolf_auth.mfa.totp import enroll as do_enroll

    try:
        enrollment = do_enroll(issuer if issuer is not None else settings.mfa_default_issuer, account_name)
    except MfaError as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(EXIT_ERROR)

    if qr_out is not None:
        qr_out.write_bytes(base64.b64decode(enrollment.qr_code))

    if as_json:
        console.print_json(enrollment.model_dump_json())
        return

    console.print(f"[bold]Secret:[/bold] {enrollment.secret}")
    console.print(f"[bold]URI:[/bold] {enrollment.uri}", soft_wrap=True)
    if qr_out is not None:
        console.print(f"[bold]QR code:[/bold] {qr_out}")


@main.command()
@click.argument("secret")
def code(secret: str) -> None:
    """Show the current code for SECRET."""
    from lonewolf_auth.mfa.totp import build_config, current_code

    try:
        step = build_config(secret).step
        now = time.time()
        value = current_code(secret, clock=lambda: now)
    except MfaError as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(EXIT_ERROR)

    remaining = step - int(now) % step
    console.print(f"[bold]{value}[/bold] (valid for {remaining}s)")


@main.command()
@click.argument("code")
@click.argument("secret")
@click.option("--window", type=click.IntRange(min=0), default=None, help="Steps of tolerance on each side.")
def verify(code: str, secret: str, window: int | None) -> None:
    """Check CODE against SECRET."""
    from lonewolf_auth.mfa.totp import verify as do_verify

    try:
        ok = do_verify(code, secret, valid_window=window)
    except MfaError as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(EXIT_ERROR)

    if ok:
        console.print("[green]Code verified[/green]")
    else:
        console.print("[red]Code rejected[/red]")
        sys.exit(EXIT_REJECTED)


@main.command("settings")
def show_settings() -> None:
    """Show effective configuration."""
    from lonewolf_auth.config import settings

    console.print("[bold]LoneWolf Auth Settings[/bold]")
    console.print(f"  Valid window: {settings.mfa_valid_window} step(s)")
    console.print(f"  Default issuer: {settings.mfa_default_issuer}")
    console.print(f"  QR box size: {settings.qr_box_size}px, border {settings.qr_border}")
    console.print(f"  Master key: {'set' if settings.lonewolf_master_key else 'not set'}")


if __name__ == "__main__":
    main()
