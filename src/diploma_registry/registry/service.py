"""DiplomaRegistry: the public face of the registry.

Every operation below runs under one re-entrant lock and returns an
:class:`OperationResult`; a :class:`RegistryError` never escapes. Mutations
are staged in a :class:`UnitOfWork`, so either the whole change set (fee,
record, ownership, counter, audit entry) lands or none of it does.

Mint flow::

    capacity -> issuer gate -> field validation -> authority
        -> [fee transfer, record, ownership, token id, audit] (atomic)

Usage::

    registry = DiplomaRegistry(identity, ledger, issuers)
    with identity.acting_as("ST1UNI"):
        token_id = registry.mint(request).unwrap()
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from diploma_registry.audit_log import AuditEntry, AuditLog
from diploma_registry.core.clock import IClock, WallClock
from diploma_registry.core.config import Settings
from diploma_registry.core.errors import (
    AuditUnavailable,
    FeeTransferFailed,
    RegistryError,
    Revoked,
)
from diploma_registry.core.interfaces import (
    ICallerIdentity,
    IIssuerAllowList,
    IValueTransfer,
)
from diploma_registry.core.models import (
    DiplomaRecord,
    GovernanceConfig,
    MintRequest,
    OperationResult,
    UpdateRecord,
)
from diploma_registry.governance.authorization import AuthorizationGate
from diploma_registry.governance.store import GovernanceStore
from diploma_registry.observability.logger import get_call_id, new_call_id

from .ownership import OwnershipMap
from .records import DiplomaStore
from .transaction import UnitOfWork
from .update_ledger import UpdateLedger
from .validation import validate_mint_request, validate_update

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _operation(name: str, *, mutating: bool = False) -> Callable[[F], F]:
    """Run a registry method as one atomic, result-returning operation."""

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(self: DiplomaRegistry, *args: Any, **kwargs: Any) -> OperationResult:
            with self._lock:
                new_call_id()
                try:
                    if mutating and not self._audit_log.is_available:
                        raise AuditUnavailable("audit log unavailable")
                    value = fn(self, *args, **kwargs)
                except RegistryError as exc:
                    logger.debug("%s rejected [%s]: %s", name, exc.code.name, exc.message)
                    return OperationResult.failure(exc.code, exc.message)
            return OperationResult.success(value)

        return wrapper  # type: ignore[return-value]

    return decorator


class DiplomaRegistry:
    """Issues, tracks and governs diploma tokens for authorised issuers.

    Collaborators:
        identity: who is calling (ICallerIdentity)
        value_transfer: moves the mint fee (IValueTransfer)
        issuers: recognised issuing institutions (IIssuerAllowList)

    Optional:
        config: GovernanceConfig owned by this instance (defaults applied)
        clock: marker source for amendments (WallClock)
        audit_log: append-only journal (in-memory AuditLog)
    """

    def __init__(
        self,
        identity: ICallerIdentity,
        value_transfer: IValueTransfer,
        issuers: IIssuerAllowList,
        config: GovernanceConfig | None = None,
        clock: IClock | None = None,
        audit_log: AuditLog | None = None,
    ) -> None:
        self._identity = identity
        self._value_transfer = value_transfer
        self._config = config if config is not None else GovernanceConfig()
        self._clock = clock or WallClock()
        self._audit_log = audit_log if audit_log is not None else AuditLog()
        self._gate = AuthorizationGate(issuers, self._config)
        self._governance = GovernanceStore(self._config, self._gate)
        self._records = DiplomaStore()
        self._updates = UpdateLedger()
        self._owners = OwnershipMap()
        self._lock = threading.RLock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        identity: ICallerIdentity,
        value_transfer: IValueTransfer,
        issuers: IIssuerAllowList | None = None,
        clock: IClock | None = None,
    ) -> DiplomaRegistry:
        """Build a freshly deployed registry from :class:`Settings`."""
        from diploma_registry.issuers import StaticIssuerAllowList

        return cls(
            identity=identity,
            value_transfer=value_transfer,
            issuers=issuers if issuers is not None else StaticIssuerAllowList(settings.authorized_issuers),
            config=settings.governance.to_config(),
            clock=clock,
            audit_log=AuditLog(
                persist_path=settings.audit.persist_path,
                max_memory_entries=settings.audit.max_memory_entries,
            ),
        )

    # ------------------------------------------------------------------
    # Component access (snapshots, tooling)
    # ------------------------------------------------------------------

    @property
    def config(self) -> GovernanceConfig:
        return self._config

    @property
    def records(self) -> DiplomaStore:
        return self._records

    @property
    def updates(self) -> UpdateLedger:
        return self._updates

    @property
    def owners(self) -> OwnershipMap:
        return self._owners

    @property
    def audit_log(self) -> AuditLog:
        return self._audit_log

    @property
    def gate(self) -> AuthorizationGate:
        return self._gate

    # ------------------------------------------------------------------
    # Governance
    # ------------------------------------------------------------------

    @_operation("set_authority_contract", mutating=True)
    def set_authority_contract(self, principal: str) -> bool:
        caller = self._identity.current_caller()
        uow = UnitOfWork("set_authority_contract")
        uow.add(
            "authority",
            lambda: self._gate.set_authority_contract(caller, principal),
            lambda: self._reset_config(authority_contract=None),
        )
        uow.add("audit", lambda: self._audit("authority_set", caller, None, {"authority": principal}))
        uow.commit()
        return True

    @_operation("set_max_diplomas", mutating=True)
    def set_max_diplomas(self, new_max: int) -> bool:
        caller = self._identity.current_caller()
        previous = self._config.max_diplomas
        uow = UnitOfWork("set_max_diplomas")
        uow.add(
            "max_diplomas",
            lambda: self._governance.set_max_diplomas(new_max),
            lambda: self._reset_config(max_diplomas=previous),
        )
        uow.add(
            "audit",
            lambda: self._audit("max_diplomas_set", caller, None, {"old": previous, "new": new_max}),
        )
        uow.commit()
        return True

    @_operation("set_mint_fee", mutating=True)
    def set_mint_fee(self, new_fee: int) -> bool:
        caller = self._identity.current_caller()
        previous = self._config.mint_fee
        uow = UnitOfWork("set_mint_fee")
        uow.add(
            "mint_fee",
            lambda: self._governance.set_mint_fee(new_fee),
            lambda: self._reset_config(mint_fee=previous),
        )
        uow.add(
            "audit",
            lambda: self._audit("mint_fee_set", caller, None, {"old": previous, "new": new_fee}),
        )
        uow.commit()
        return True

    # ------------------------------------------------------------------
    # Mint
    # ------------------------------------------------------------------

    def mint_diploma(
        self,
        recipient: str,
        degree_type: str,
        gpa: int,
        graduation_date: int,
        honors: str,
        major: str,
        minor: str | None,
        transcript_hash: bytes,
        field_of_study: str,
        credit_hours: int,
        thesis_title: str | None = None,
        advisor: str | None = None,
        awards: Sequence[str] = (),
        verification_level: int = 0,
    ) -> OperationResult:
        """Mint a diploma from its fourteen fields. See :meth:`mint`."""
        return self.mint(
            MintRequest(
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
                awards=awards,  # type: ignore[arg-type]
                verification_level=verification_level,
            )
        )

    @_operation("mint_diploma", mutating=True)
    def mint(self, request: MintRequest) -> int:
        """Mint a new diploma for ``request.recipient``. Returns the token id.

        Checks, in order: capacity, issuer, every field, authority. The fee
        moves from the caller to the authority in the same unit of work as
        the record and ownership writes.
        """
        caller = self._identity.current_caller()
        self._governance.check_capacity()
        self._gate.require_issuer(caller)
        validate_mint_request(request)
        authority = self._gate.require_authority()

        fee = self._config.mint_fee
        token_id = self._governance.next_token_id()
        record = DiplomaRecord(
            token_id=token_id,
            issuer=caller,
            degree_type=request.degree_type,
            gpa=request.gpa,
            graduation_date=request.graduation_date,
            honors=request.honors,
            major=request.major,
            minor=request.minor,
            transcript_hash=bytes(request.transcript_hash),
            field_of_study=request.field_of_study,
            credit_hours=request.credit_hours,
            thesis_title=request.thesis_title,
            advisor=request.advisor,
            awards=tuple(request.awards),
            verification_level=request.verification_level,
            status=True,
            minted_at=self._clock.height(),
        )

        uow = UnitOfWork("mint_diploma")
        if fee > 0:
            uow.add(
                "mint_fee",
                lambda: self._charge_fee(fee, caller, authority),
                lambda: self._refund_fee(fee, caller, authority),
            )
        uow.add("record", lambda: self._records.insert(record), lambda: self._records.discard(token_id))
        uow.add(
            "owner",
            lambda: self._owners.assign(token_id, request.recipient),
            lambda: self._owners.release(token_id),
        )
        uow.add(
            "token_id",
            lambda: self._governance.advance_token_id(token_id),
            lambda: self._governance.rewind_token_id(token_id),
        )
        uow.add(
            "audit",
            lambda: self._audit(
                "diploma_minted",
                caller,
                token_id,
                {
                    "recipient": request.recipient,
                    "fee": fee,
                    "authority": authority,
                    "transcript_hash": record.transcript_hash.hex(),
                },
            ),
        )
        uow.commit()
        logger.info(
            "Diploma %d minted by %s for %s (fee %d -> %s)",
            token_id,
            caller,
            request.recipient,
            fee,
            authority,
        )
        return token_id

    # ------------------------------------------------------------------
    # Update / revoke
    # ------------------------------------------------------------------

    @_operation("update_diploma", mutating=True)
    def update_diploma(self, token_id: int, degree_type: str, gpa: int) -> bool:
        """Amend degree type and GPA. Issuer only; refused once revoked."""
        caller = self._identity.current_caller()
        previous = self._records.require_issued_by(token_id, caller)
        if not previous.status:
            raise Revoked(f"diploma {token_id} is revoked")
        validate_update(degree_type, gpa)

        previous_update = self._updates.get(token_id)
        update = UpdateRecord(
            token_id=token_id,
            update_degree_type=degree_type,
            update_gpa=gpa,
            update_height=self._clock.height(),
            updater=caller,
        )
        uow = UnitOfWork("update_diploma")
        uow.add(
            "record",
            lambda: self._records.amend(token_id, degree_type, gpa),
            lambda: self._records.restore(previous),
        )
        uow.add(
            "update_ledger",
            lambda: self._updates.record(update),
            lambda: self._updates.restore(token_id, previous_update),
        )
        uow.add(
            "audit",
            lambda: self._audit(
                "diploma_updated",
                caller,
                token_id,
                {
                    "old_degree_type": previous.degree_type,
                    "old_gpa": previous.gpa,
                    "degree_type": degree_type,
                    "gpa": gpa,
                },
            ),
        )
        uow.commit()
        logger.info("Diploma %d amended by %s", token_id, caller)
        return True

    @_operation("revoke_diploma", mutating=True)
    def revoke_diploma(self, token_id: int) -> bool:
        """Mark a diploma invalid. Issuer only; repeat calls succeed unchanged."""
        caller = self._identity.current_caller()
        previous = self._records.require_issued_by(token_id, caller)
        if not previous.status:
            return True

        uow = UnitOfWork("revoke_diploma")
        uow.add(
            "record",
            lambda: self._records.revoke(token_id),
            lambda: self._records.restore(previous),
        )
        uow.add("audit", lambda: self._audit("diploma_revoked", caller, token_id, {}))
        uow.commit()
        return True

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    @_operation("transfer_diploma", mutating=True)
    def transfer_diploma(self, token_id: int, sender: str, recipient: str) -> bool:
        caller = self._identity.current_caller()
        uow = UnitOfWork("transfer_diploma")
        uow.add(
            "owner",
            lambda: self._owners.transfer(token_id, caller, sender, recipient),
            lambda: self._owners.restore(token_id, sender),
        )
        uow.add(
            "audit",
            lambda: self._audit(
                "diploma_transferred", caller, token_id, {"sender": sender, "recipient": recipient}
            ),
        )
        uow.commit()
        return True

    @_operation("burn_diploma", mutating=True)
    def burn_diploma(self, token_id: int) -> bool:
        """Remove the ownership entry. The record and its history remain."""
        caller = self._identity.current_caller()
        uow = UnitOfWork("burn_diploma")
        uow.add(
            "owner",
            lambda: self._owners.burn(token_id, caller),
            lambda: self._owners.restore(token_id, caller),
        )
        uow.add("audit", lambda: self._audit("diploma_burned", caller, token_id, {}))
        uow.commit()
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @_operation("is_diploma_valid")
    def is_diploma_valid(self, token_id: int) -> bool:
        return self._records.require(token_id).status

    def is_issuer_authorized(self, principal: str) -> bool:
        return self._gate.is_issuer_authorized(principal)

    def get_diploma(self, token_id: int) -> DiplomaRecord | None:
        with self._lock:
            return self._records.get(token_id)

    def get_diploma_update(self, token_id: int) -> UpdateRecord | None:
        with self._lock:
            return self._updates.get(token_id)

    def get_owner(self, token_id: int) -> str | None:
        with self._lock:
            return self._owners.owner_of(token_id)

    def get_issuer(self, token_id: int) -> str | None:
        with self._lock:
            record = self._records.get(token_id)
            return record.issuer if record is not None else None

    def get_tokens_of(self, principal: str) -> list[int]:
        with self._lock:
            return self._owners.tokens_of(principal)

    def get_diploma_count(self) -> int:
        """Number of diplomas ever minted. Burns do not lower it."""
        with self._lock:
            return self._config.last_token_id

    def get_last_token_id(self) -> int:
        with self._lock:
            return self._config.last_token_id

    def get_mint_fee(self) -> int:
        with self._lock:
            return self._config.mint_fee

    def get_max_diplomas(self) -> int:
        with self._lock:
            return self._config.max_diplomas

    def get_authority_contract(self) -> str | None:
        with self._lock:
            return self._config.authority_contract

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _charge_fee(self, fee: int, caller: str, authority: str) -> None:
        try:
            ok = self._value_transfer.transfer(fee, caller, authority)
        except Exception as exc:
            raise FeeTransferFailed(f"fee transfer raised: {exc}") from exc
        if not ok:
            raise FeeTransferFailed(f"transfer of {fee} from {caller} to {authority} refused")

    def _refund_fee(self, fee: int, caller: str, authority: str) -> None:
        """Return the mint fee to *caller* during rollback.

        Uses the collaborator's ``refund()`` when it has one; otherwise the
        fee is sent back through ``transfer(fee, authority, caller)``.
        """
        refund = getattr(self._value_transfer, "refund", None)
        if callable(refund):
            ok = refund(fee, caller, authority)
        else:
            ok = self._value_transfer.transfer(fee, authority, caller)
        if not ok:
            logger.error("Refund of %d to %s failed during rollback", fee, caller)

    def _reset_config(self, **values: Any) -> None:
        for key, value in values.items():
            setattr(self._config, key, value)

    def _audit(
        self,
        event_type: str,
        actor: str,
        token_id: int | None,
        payload: dict[str, Any],
    ) -> None:
        try:
            self._audit_log.append(
                AuditEntry(
                    call_id=get_call_id(),
                    actor=actor,
                    token_id=token_id,
                    block_height=self._clock.height(),
                    event_type=event_type,
                    payload=payload,
                )
            )
        except RuntimeError as exc:
            raise AuditUnavailable(str(exc)) from exc
