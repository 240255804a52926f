"""CLI for registrar trust chain verification.

Commands:
    verify                  Verify the current revision of a registrar object
    verify-change-request   Verify the final approval of a change request

Configuration comes from the environment (and a .env file in the working
directory); command line options override it. Exit code is 0 when the
target verified and 1 otherwise.
"""

import asyncio
import json
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from registrar_trust import __version__
from registrar_trust.application.dtos.verification import (
    ChangeRequestVerification,
    ObjectVerification,
)
from registrar_trust.bootstrap.logging import configure_structlog
from registrar_trust.bootstrap.verifier import (
    create_object_store,
    create_trust_chain_verifier,
)
from registrar_trust.config.verifier_config import VerifierConfig
from registrar_trust.domain.exceptions import RegistrarTrustError
from registrar_trust.domain.models.registrar_object import ObjectType
from registrar_trust.domain.models.timestamps import from_unix_timestamp
from registrar_trust.infrastructure.observability import (
    generate_correlation_id,
    set_correlation_id,
)


class OutputFormat(str, Enum):
    """Output format options."""

    text = "text"
    json = "json"


class ObjectKind(str, Enum):
    """Registrar objects that carry signed revisions."""

    domain = "domain"
    host = "host"
    contact = "contact"
    approver = "approver"
    approverset = "approverset"


app = typer.Typer(
    name="registrar-trust",
    help="Verify that registrar objects are backed by a trusted signature chain",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"registrar-trust version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Registrar trust chain verifier.

    Every registrar object changes only through change requests whose
    final approval is signed. These commands check that the signature
    chains back to a pinned trust anchor and that the live object is
    exactly what was signed.
    """
    load_dotenv()


ApiUrlOption = typer.Option(
    None,
    "--api-url",
    "-u",
    help="Registrar base URL (default: REGISTRAR_API_URL)",
)
AnchorOption = typer.Option(
    None,
    "--anchor",
    "-a",
    help="Trust anchor public key file (armored OpenPGP). Repeatable. "
    "Default: TRUST_ANCHOR_FILES",
)
SnapshotOption = typer.Option(
    None,
    "--snapshot",
    "-s",
    help="Registrar snapshot file (JSON) for offline verification",
)
FormatOption = typer.Option(
    OutputFormat.text,
    "--format",
    "-o",
    help="Output format: text or json",
)
VerboseOption = typer.Option(
    False,
    "--verbose",
    help="Log each verification step to stderr",
)


@app.command()
def verify(
    kind: ObjectKind = typer.Argument(..., help="Kind of registrar object"),
    object_id: int = typer.Argument(..., help="Object ID"),
    at: Optional[int] = typer.Option(
        None,
        "--at",
        help="Verify the object as it was at this unix timestamp (default: now)",
    ),
    api_url: Optional[str] = ApiUrlOption,
    anchor: Optional[list[Path]] = AnchorOption,
    snapshot: Optional[Path] = SnapshotOption,
    output_format: OutputFormat = FormatOption,
    verbose: bool = VerboseOption,
) -> None:
    """Verify the current revision of a registrar object.

    Example:
        registrar-trust verify domain 42 --anchor root.asc
        registrar-trust verify approverset 3 --snapshot registrar.json --at 1700000000
    """
    config = _load_config(api_url, verbose)
    correlation_id = _start_run()
    at_time = from_unix_timestamp(at) if at is not None else datetime.now(timezone.utc)

    result = _run(
        _verify_object_async(
            ObjectType(kind.value), object_id, at_time, config, anchor, snapshot
        )
    )

    revision_id = None
    if result.obj is not None:
        revision_id = result.obj.current_revision.id
    report = {
        "verified": result.verified,
        "object_type": kind.value,
        "object_id": object_id,
        "at": int(at_time.timestamp()),
        "revision_id": revision_id,
        "errors": _error_list(result.errors),
        "correlation_id": correlation_id,
    }
    label = f"{ObjectType(kind.value).display_name} {object_id}"
    if revision_id is not None:
        label = f"{label} (revision {revision_id})"
    _output_report(report, label, output_format.value)


@app.command()
def verify_change_request(
    change_request_id: int = typer.Argument(..., help="Change request ID"),
    api_url: Optional[str] = ApiUrlOption,
    anchor: Optional[list[Path]] = AnchorOption,
    snapshot: Optional[Path] = SnapshotOption,
    output_format: OutputFormat = FormatOption,
    verbose: bool = VerboseOption,
) -> None:
    """Verify the final approval of a change request.

    Checks that the approval is signed by a trust anchor, or by a
    verified member of the approver set that rendered it, and that it
    approves the change.

    Example:
        registrar-trust verify-change-request 1201 --anchor root.asc
    """
    config = _load_config(api_url, verbose)
    correlation_id = _start_run()

    result = _run(
        _verify_change_request_async(change_request_id, config, anchor, snapshot)
    )

    attestation = result.attestation
    report = {
        "verified": result.verified,
        "change_request_id": change_request_id,
        "object_type": attestation.object_type if attestation else None,
        "approval_id": attestation.approval_id if attestation else None,
        "errors": _error_list(result.errors),
        "correlation_id": correlation_id,
    }
    label = f"Change request {change_request_id}"
    if attestation is not None:
        label = f"{label} ({attestation.object_type})"
    _output_report(report, label, output_format.value)


async def _verify_object_async(
    object_type: ObjectType,
    object_id: int,
    at_time: datetime,
    config: VerifierConfig,
    anchors: Optional[list[Path]],
    snapshot: Optional[Path],
) -> ObjectVerification[Any]:
    """Async implementation of object verification."""
    store = create_object_store(config, snapshot)
    try:
        verifier = create_trust_chain_verifier(
            config, store, anchor_files=anchors or None
        )
        return await verifier.get_verified(object_type, object_id, at_time)
    finally:
        await store.close()


async def _verify_change_request_async(
    change_request_id: int,
    config: VerifierConfig,
    anchors: Optional[list[Path]],
    snapshot: Optional[Path],
) -> ChangeRequestVerification:
    """Async implementation of change request verification."""
    store = create_object_store(config, snapshot)
    try:
        verifier = create_trust_chain_verifier(
            config, store, anchor_files=anchors or None
        )
        return await verifier.verify_change_request(change_request_id)
    finally:
        await store.close()


def _load_config(api_url: Optional[str], verbose: bool) -> VerifierConfig:
    try:
        config = VerifierConfig.from_environment()
        if api_url:
            config = replace(config, api_url=api_url)
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}", style="bold")
        raise typer.Exit(code=1)
    configure_structlog(config.environment, verbose=verbose)
    return config


def _start_run() -> str:
    correlation_id = generate_correlation_id()
    set_correlation_id(correlation_id)
    return correlation_id


def _run(coroutine: Any) -> Any:
    """Run a verification, turning setup failures into exit code 1."""
    try:
        return asyncio.run(coroutine)
    except (RegistrarTrustError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}", style="bold")
        raise typer.Exit(code=1)


def _error_list(errors: tuple[RegistrarTrustError, ...]) -> list[dict[str, str]]:
    return [{"type": type(error).__name__, "message": str(error)} for error in errors]


def _output_report(report: dict[str, Any], label: str, output_format: str) -> None:
    """Output a verification report in the requested format."""
    if output_format == "json":
        console.print_json(json.dumps(report))
    else:
        if report["verified"]:
            console.print(f"[green]VERIFIED[/green] - {label}")
        else:
            console.print(f"[red]NOT VERIFIED[/red] - {label}")
        for error in report["errors"]:
            console.print(f"  {error['type']}: {error['message']}", highlight=False)

    if not report["verified"]:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
