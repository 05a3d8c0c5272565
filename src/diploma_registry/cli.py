"""CLI entry point for the diploma registry.

Each command loads the snapshot file, runs one registry operation and, for
mutating commands that succeed, writes the snapshot back.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from .audit_log import AuditLog
from .core.config import Settings, load_settings
from .core.errors import ConfigError
from .core.ids import transcript_digest
from .core.models import OperationResult
from .identity import CallerContext
from .issuers import StaticIssuerAllowList
from .observability.logger import setup_logging
from .payments import InMemoryValueLedger
from .registry.service import DiplomaRegistry
from .storage.snapshot import load_snapshot, restore_registry, save_snapshot


@dataclass
class _Env:
    settings: Settings
    state_path: Path


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


def _open(env: _Env) -> tuple[DiplomaRegistry, InMemoryValueLedger, StaticIssuerAllowList, CallerContext]:
    if not env.state_path.exists():
        raise click.ClickException(
            f"No registry at {env.state_path}. Run 'diploma-registry init' first."
        )
    identity = CallerContext()
    audit = AuditLog(
        persist_path=env.settings.audit.persist_path,
        max_memory_entries=env.settings.audit.max_memory_entries,
    )
    registry, ledger, issuers = restore_registry(
        load_snapshot(env.state_path), identity, audit_log=audit
    )
    return registry, ledger, issuers, identity


def _mutate(env: _Env, caller: str, action: Callable[[DiplomaRegistry], OperationResult]) -> None:
    registry, ledger, issuers, identity = _open(env)
    with identity.acting_as(caller):
        result = action(registry)
    if result.ok:
        save_snapshot(registry, ledger, issuers, env.state_path)
    _finish(result)


def _finish(result: OperationResult) -> None:
    if result.ok:
        _echo_json({"ok": True, "value": result.value})
        return
    assert result.error is not None
    _echo_json(
        {
            "ok": False,
            "error": result.error.name,
            "code": int(result.error),
            "message": result.message,
        }
    )
    raise SystemExit(1)


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None, help="TOML config file path")
@click.option("--state", "state_path", default=None, help="Snapshot file (overrides state_path setting)")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, state_path: str | None) -> None:
    """Diploma registry."""
    settings = load_settings(config_path)
    setup_logging(settings.observability.log_level, settings.observability.log_format)
    ctx.obj = _Env(settings=settings, state_path=Path(state_path or settings.state_path))


@main.command()
@click.option("--issuer", "issuers", multiple=True, help="Recognised issuer (repeatable)")
@click.option("--max-diplomas", default=None, type=int, help="Capacity ceiling override")
@click.option("--mint-fee", default=None, type=int, help="Mint fee override")
@click.option("--force", is_flag=True, help="Overwrite an existing snapshot")
@click.pass_obj
def init(env: _Env, issuers: tuple[str, ...], max_diplomas: int | None, mint_fee: int | None, force: bool) -> None:
    """Deploy a fresh registry."""
    if env.state_path.exists() and not force:
        raise click.ClickException(f"{env.state_path} already exists (use --force)")

    governance = env.settings.governance.model_copy()
    if max_diplomas is not None:
        governance.max_diplomas = max_diplomas
    if mint_fee is not None:
        governance.mint_fee = mint_fee

    try:
        config = governance.to_config()
    except ConfigError as exc:
        raise click.BadParameter(exc.message) from exc

    allow_list = StaticIssuerAllowList([*env.settings.authorized_issuers, *issuers])
    ledger = InMemoryValueLedger()
    registry = DiplomaRegistry(
        identity=CallerContext(),
        value_transfer=ledger,
        issuers=allow_list,
        config=config,
    )
    snapshot = save_snapshot(registry, ledger, allow_list, env.state_path)
    _echo_json(
        {
            "state": str(env.state_path),
            "issuers": snapshot.authorized_issuers,
            "max_diplomas": snapshot.governance.max_diplomas,
            "mint_fee": snapshot.governance.mint_fee,
        }
    )


# ---------------------------------------------------------------------------
# Governance
# ---------------------------------------------------------------------------

@main.command("set-authority")
@click.argument("principal")
@click.option("--caller", required=True, help="Calling principal")
@click.pass_obj
def set_authority(env: _Env, principal: str, caller: str) -> None:
    """Set the governance authority (once)."""
    _mutate(env, caller, lambda r: r.set_authority_contract(principal))


@main.command("set-max-diplomas")
@click.argument("new_max", type=int)
@click.option("--caller", required=True, help="Calling principal")
@click.pass_obj
def set_max_diplomas(env: _Env, new_max: int, caller: str) -> None:
    """Change the capacity ceiling."""
    _mutate(env, caller, lambda r: r.set_max_diplomas(new_max))


@main.command("set-mint-fee")
@click.argument("new_fee", type=int)
@click.option("--caller", required=True, help="Calling principal")
@click.pass_obj
def set_mint_fee(env: _Env, new_fee: int, caller: str) -> None:
    """Change the per-mint fee."""
    _mutate(env, caller, lambda r: r.set_mint_fee(new_fee))


# ---------------------------------------------------------------------------
# Diplomas
# ---------------------------------------------------------------------------

@main.command()
@click.option("--caller", required=True, help="Issuing institution")
@click.option("--recipient", required=True, help="Initial holder")
@click.option("--degree-type", required=True)
@click.option("--gpa", required=True, type=int, help="0-400 (hundredths)")
@click.option("--graduation-date", required=True, type=int, help="e.g. graduation year")
@click.option("--honors", default="")
@click.option("--major", required=True)
@click.option("--minor", default=None)
@click.option("--transcript-hash", "transcript_hex", default=None, help="32-byte digest as hex")
@click.option(
    "--transcript-file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Transcript document to digest with SHA-256",
)
@click.option("--field-of-study", default="")
@click.option("--credit-hours", default=0, type=int)
@click.option("--thesis-title", default=None)
@click.option("--advisor", default=None)
@click.option("--award", "awards", multiple=True, help="Award (repeatable)")
@click.option("--verification-level", default=0, type=int)
@click.pass_obj
def mint(
    env: _Env,
    caller: str,
    recipient: str,
    degree_type: str,
    gpa: int,
    graduation_date: int,
    honors: str,
    major: str,
    minor: str | None,
    transcript_hex: str | None,
    transcript_file: Path | None,
    field_of_study: str,
    credit_hours: int,
    thesis_title: str | None,
    advisor: str | None,
    awards: tuple[str, ...],
    verification_level: int,
) -> None:
    """Mint a diploma."""
    if (transcript_hex is None) == (transcript_file is None):
        raise click.UsageError("Give exactly one of --transcript-hash or --transcript-file")
    if transcript_file is not None:
        transcript_hash = transcript_digest(transcript_file.read_bytes())
    else:
        try:
            transcript_hash = bytes.fromhex(transcript_hex or "")
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--transcript-hash") from exc

    _mutate(
        env,
        caller,
        lambda r: r.mint_diploma(
            recipient=recipient,
            degree_type=degree_type,
            gpa=gpa,
            graduation_date=graduation_date,
            honors=honors,
            major=major,
            minor=minor,
            transcript_hash=transcript_hash,
            field_of_study=field_of_study,
            credit_hours=credit_hours,
            thesis_title=thesis_title,
            advisor=advisor,
            awards=list(awards),
            verification_level=verification_level,
        ),
    )


@main.command()
@click.argument("token_id", type=int)
@click.option("--degree-type", required=True)
@click.option("--gpa", required=True, type=int)
@click.option("--caller", required=True, help="Issuer of the diploma")
@click.pass_obj
def update(env: _Env, token_id: int, degree_type: str, gpa: int, caller: str) -> None:
    """Amend degree type and GPA."""
    _mutate(env, caller, lambda r: r.update_diploma(token_id, degree_type, gpa))


@main.command()
@click.argument("token_id", type=int)
@click.option("--caller", required=True, help="Issuer of the diploma")
@click.pass_obj
def revoke(env: _Env, token_id: int, caller: str) -> None:
    """Revoke a diploma (irreversible)."""
    _mutate(env, caller, lambda r: r.revoke_diploma(token_id))


@main.command()
@click.argument("token_id", type=int)
@click.argument("sender")
@click.argument("recipient")
@click.option("--caller", required=True, help="Must equal SENDER")
@click.pass_obj
def transfer(env: _Env, token_id: int, sender: str, recipient: str, caller: str) -> None:
    """Transfer a diploma to a new holder."""
    _mutate(env, caller, lambda r: r.transfer_diploma(token_id, sender, recipient))


@main.command()
@click.argument("token_id", type=int)
@click.option("--caller", required=True, help="Current holder")
@click.pass_obj
def burn(env: _Env, token_id: int, caller: str) -> None:
    """Drop a diploma from the ownership map (the record stays)."""
    _mutate(env, caller, lambda r: r.burn_diploma(token_id))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

@main.command()
@click.argument("token_id", type=int)
@click.pass_obj
def show(env: _Env, token_id: int) -> None:
    """Print a diploma record (null when absent)."""
    registry, *_ = _open(env)
    record = registry.get_diploma(token_id)
    _echo_json(record.model_dump(mode="json") if record is not None else None)


@main.command()
@click.argument("token_id", type=int)
@click.pass_obj
def owner(env: _Env, token_id: int) -> None:
    """Print the current holder (null when burned or unknown)."""
    registry, *_ = _open(env)
    _echo_json(registry.get_owner(token_id))


@main.command()
@click.argument("token_id", type=int)
@click.pass_obj
def verify(env: _Env, token_id: int) -> None:
    """Check whether a diploma is still valid."""
    registry, *_ = _open(env)
    _finish(registry.is_diploma_valid(token_id))


@main.command()
@click.argument("token_id", type=int)
@click.pass_obj
def history(env: _Env, token_id: int) -> None:
    """Print the latest amendment of a diploma (null if never amended)."""
    registry, *_ = _open(env)
    update_record = registry.get_diploma_update(token_id)
    _echo_json(update_record.model_dump(mode="json") if update_record is not None else None)


@main.command()
@click.pass_obj
def count(env: _Env) -> None:
    """Print the number of diplomas ever minted."""
    registry, *_ = _open(env)
    _echo_json(registry.get_diploma_count())


if __name__ == "__main__":
    main()
