"""Folio ledger aggregation.

Postings are split into debit-like rows (charges and adjustments, counted with
their tax) and credit-like rows (payments and refunds, counted without tax).
Reversed postings stay in the audit trail but never contribute to a total.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from hospitality.core.errors import MissingFolio
from hospitality.models.folio import (
    CREDIT_POSTING_TYPES,
    DEBIT_POSTING_TYPES,
    PostingType,
)
from hospitality.services.money import ZERO, Amount, optional_amount, require_amount


class PostingLike(Protocol):
    """Attributes the aggregator reads from a posting record."""

    posting_type: PostingType | str
    amount: Amount
    tax_amount: Amount | None
    is_reversed: bool


@dataclass(slots=True, frozen=True)
class FolioTotals:
    """Debit, credit and outstanding balance of a folio."""

    total_debits: Decimal
    total_credits: Decimal
    balance: Decimal


@dataclass(slots=True, frozen=True)
class LedgerLine:
    """A posting as displayed in the folio transaction listing."""

    posting: PostingLike
    posting_type: PostingType
    debit: Decimal
    credit: Decimal
    balance: Decimal
    is_reversed: bool


def _split(posting: PostingLike) -> tuple[PostingType, Decimal, Decimal]:
    posting_type = PostingType(posting.posting_type)
    amount = require_amount(posting.amount, field="amount")
    if posting_type in DEBIT_POSTING_TYPES:
        tax = optional_amount(posting.tax_amount, field="tax_amount")
        return posting_type, amount + tax, ZERO
    if posting_type in CREDIT_POSTING_TYPES:
        return posting_type, ZERO, amount
    raise ValueError(f"Unsupported posting type: {posting_type!r}")


def compute_totals(postings: Iterable[PostingLike] | None) -> FolioTotals:
    """Sum the non-reversed postings of a single folio."""

    if postings is None:
        raise MissingFolio("Postings are required to compute folio totals")

    total_debits = ZERO
    total_credits = ZERO
    for posting in postings:
        _, debit, credit = _split(posting)
        if posting.is_reversed:
            continue
        total_debits += debit
        total_credits += credit

    return FolioTotals(
        total_debits=total_debits,
        total_credits=total_credits,
        balance=total_debits - total_credits,
    )


def running_balances(postings: Sequence[PostingLike] | None) -> list[LedgerLine]:
    """Return the transaction listing with the balance after each row."""

    if postings is None:
        raise MissingFolio("Postings are required to build a ledger listing")

    lines: list[LedgerLine] = []
    balance = ZERO
    for posting in postings:
        posting_type, debit, credit = _split(posting)
        if not posting.is_reversed:
            balance += debit - credit
        lines.append(
            LedgerLine(
                posting=posting,
                posting_type=posting_type,
                debit=debit,
                credit=credit,
                balance=balance,
                is_reversed=bool(posting.is_reversed),
            )
        )
    return lines


__all__ = ["FolioTotals", "LedgerLine", "PostingLike", "compute_totals", "running_balances"]
