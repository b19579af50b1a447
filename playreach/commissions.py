"""
commissions.py — Commissions d'affiliés (2 niveaux) et de vendeurs

Cycle de vie d'une entrée du ledger :
    pending → available → paid
    available → processing → paid
    pending | available | processing → cancelled
Les soldes sont toujours recalculés depuis le ledger complet.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from .config import AffiliateSettings
from .models import (
    AFFILIATE, AVAILABLE, CANCELLED, CommissionLedgerEntry, CommissionSummary,
    PAID, PENDING, PROCESSING, SALES,
)

TRANSITIONS: dict[str, set[str]] = {
    PENDING: {AVAILABLE, CANCELLED},
    AVAILABLE: {PROCESSING, PAID, CANCELLED},
    PROCESSING: {PAID, CANCELLED},
    PAID: set(),
    CANCELLED: set(),
}


class InvalidTransition(ValueError):
    pass


@dataclass(frozen=True)
class SettledInvoice:
    id: str
    payer_id: str
    amount: float
    reference_month: str  # YYYY-MM


@dataclass(frozen=True)
class ReferralChain:
    """
    Parrains du payeur, résolus par le service d'identité.
    level1 = parrain direct, level2 = parrain du parrain.
    """
    level1: Optional[str] = None
    level2: Optional[str] = None


@dataclass(frozen=True)
class SalesContract:
    id: str
    status: str
    sales_agent_id: Optional[str] = None
    commission_rate_snapshot: Optional[float] = None


def commission_amount(base_amount: float, rate: float) -> float:
    return round(base_amount * rate / 100, 2)


def transition(entry: CommissionLedgerEntry, status: str) -> CommissionLedgerEntry:
    if status not in TRANSITIONS.get(entry.status, set()):
        raise InvalidTransition(f"{entry.id}: {entry.status} -> {status} not allowed")
    return replace(entry, status=status)


# ─────────────────────────────────────────────────
# Affiliés
# ─────────────────────────────────────────────────

def _entry(
    invoice: SettledInvoice,
    earner_id: str,
    level: int,
    rate: float,
    now: datetime,
    lock_days: int,
) -> CommissionLedgerEntry:
    return CommissionLedgerEntry(
        id=f"{invoice.id}-L{level}",
        earner_id=earner_id,
        level=level,
        rate=rate,
        base_amount=invoice.amount,
        amount=commission_amount(invoice.amount, rate),
        status=PENDING,
        reference_month=invoice.reference_month,
        created_at=now,
        available_at=now + timedelta(days=lock_days),
        invoice_id=invoice.id,
        source_id=invoice.payer_id,
    )


def affiliate_commissions(
    invoice: SettledInvoice,
    chain: ReferralChain,
    settings: AffiliateSettings = AffiliateSettings(),
    now: Optional[datetime] = None,
    ledger: Sequence[CommissionLedgerEntry] = (),
) -> list[CommissionLedgerEntry]:
    """
    Nouvelles entrées pending pour une facture réglée.
    Niveau 2 seulement si le niveau 1 existe ; jamais de niveau 3.
    Une facture déjà commissionnée côté parrainage ne génère rien ;
    une commission de vente sur la même facture n'y fait pas obstacle.
    """
    if not settings.enabled or invoice.amount <= 0:
        return []
    if any(e.invoice_id == invoice.id and e.kind == AFFILIATE for e in ledger):
        return []
    if not chain.level1:
        return []

    now = now or datetime.now()
    entries = [_entry(invoice, chain.level1, 1, settings.level1_rate, now, settings.lock_days)]
    if chain.level2:
        entries.append(_entry(invoice, chain.level2, 2, settings.level2_rate, now, settings.lock_days))
    return entries


def release_matured(
    entries: Iterable[CommissionLedgerEntry],
    now: Optional[datetime] = None,
) -> list[CommissionLedgerEntry]:
    """Passe en available les entrées pending dont le lock est écoulé."""
    now = now or datetime.now()
    out = []
    for e in entries:
        if e.status == PENDING and e.available_at is not None and e.available_at <= now:
            e = transition(e, AVAILABLE)
        out.append(e)
    return out


def _sum(entries: Iterable[CommissionLedgerEntry]) -> float:
    return round(sum(e.amount for e in entries), 2)


def compute_commissions(entries: Sequence[CommissionLedgerEntry]) -> CommissionSummary:
    live = [e for e in entries if not e.is_cancelled]
    affiliate = [e for e in live if e.kind == AFFILIATE]
    return CommissionSummary(
        total_earnings=_sum(live),
        pending_balance=_sum(e for e in live if e.status == PENDING),
        available_for_withdraw=_sum(e for e in live if e.status == AVAILABLE),
        paid_total=_sum(e for e in live if e.status == PAID),
        processing_total=_sum(e for e in live if e.status == PROCESSING),
        level1_earnings=_sum(e for e in affiliate if e.level == 1),
        level2_earnings=_sum(e for e in affiliate if e.level == 2),
        sales_earnings=_sum(e for e in live if e.kind == SALES),
        per_entry_breakdown=[
            {
                "id": e.id,
                "earner_id": e.earner_id,
                "kind": e.kind,
                "level": e.level,
                "rate": e.rate,
                "base_amount": e.base_amount,
                "amount": 0.0 if e.is_cancelled else e.amount,
                "status": e.status,
                "reference_month": e.reference_month,
            }
            for e in entries
        ],
    )


def can_withdraw(summary: CommissionSummary, settings: AffiliateSettings = AffiliateSettings()) -> bool:
    return summary.available_for_withdraw >= settings.min_withdrawal


# ─────────────────────────────────────────────────
# Vendeurs
# ─────────────────────────────────────────────────

def validate_commission_rate(rate: float) -> tuple[bool, Optional[str]]:
    if rate < 0:
        return False, "Commission rate cannot be negative"
    if rate > 100:
        return False, "Commission rate cannot exceed 100%"
    return True, None


def sales_commission(
    invoice: SettledInvoice,
    contract: SalesContract,
    now: Optional[datetime] = None,
) -> Optional[CommissionLedgerEntry]:
    """
    Entrée pending pour le vendeur du contrat, au taux figé à la signature
    (jamais le taux actuel du vendeur). None si rien n'est dû.
    """
    if not contract.sales_agent_id:
        return None
    if (contract.status or "").lower() not in ("active", "signed"):
        return None
    rate = contract.commission_rate_snapshot
    if not rate or rate <= 0:
        return None

    now = now or datetime.now()
    return CommissionLedgerEntry(
        id=f"{invoice.id}-S",
        earner_id=contract.sales_agent_id,
        level=0,
        rate=rate,
        base_amount=invoice.amount,
        amount=commission_amount(invoice.amount, rate),
        status=PENDING,
        reference_month=invoice.reference_month,
        created_at=now,
        invoice_id=invoice.id,
        source_id=contract.id,
        kind=SALES,
    )
