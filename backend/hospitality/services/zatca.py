"""ZATCA simplified e-invoice QR payload (TLV, base64).

Each field is written as ``[tag][length][value]`` where ``length`` is the
UTF-8 byte length of ``value`` and must fit in one unsigned byte. The five
records are concatenated in tag order and the buffer is base64 encoded.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Final

from hospitality.core.errors import MalformedPayload, PayloadTooLarge
from hospitality.services.money import Amount, format_money, require_amount

TAG_SELLER_NAME: Final = 1
TAG_VAT_NUMBER: Final = 2
TAG_TIMESTAMP: Final = 3
TAG_INVOICE_TOTAL: Final = 4
TAG_VAT_TOTAL: Final = 5

MAX_VALUE_LENGTH: Final = 255


@dataclass(slots=True, frozen=True)
class TLVRecord:
    tag: int
    value: str


def format_timestamp(value: datetime | str) -> str:
    """Return the timestamp string written into tag 3.

    Strings are used verbatim; datetimes are rendered in UTC with a ``Z``
    suffix (naive values are taken to be UTC already).
    """

    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def encode_tlv_record(tag: int, value: str) -> bytes:
    if not 0 < tag <= 0xFF:
        raise ValueError(f"TLV tag must fit in one byte, got {tag}")
    encoded = value.encode("utf-8")
    if len(encoded) > MAX_VALUE_LENGTH:
        raise PayloadTooLarge(tag, len(encoded))
    return bytes((tag, len(encoded))) + encoded


def encode_zatca_payload(
    seller_name: str,
    vat_number: str,
    timestamp: datetime | str,
    total_amount: Amount,
    vat_amount: Amount,
) -> str:
    """Build the base64 QR payload for tags 1-5."""

    total = require_amount(total_amount, field="total_amount")
    vat = require_amount(vat_amount, field="vat_amount")
    buffer = b"".join(
        [
            encode_tlv_record(TAG_SELLER_NAME, seller_name),
            encode_tlv_record(TAG_VAT_NUMBER, vat_number),
            encode_tlv_record(TAG_TIMESTAMP, format_timestamp(timestamp)),
            encode_tlv_record(TAG_INVOICE_TOTAL, format_money(total)),
            encode_tlv_record(TAG_VAT_TOTAL, format_money(vat)),
        ]
    )
    return base64.b64encode(buffer).decode("ascii")


def decode_zatca_payload(payload: str) -> list[TLVRecord]:
    """Parse a base64 payload back into its TLV records."""

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedPayload("QR payload is not valid base64") from exc

    records: list[TLVRecord] = []
    offset = 0
    while offset < len(raw):
        if offset + 2 > len(raw):
            raise MalformedPayload(f"Truncated TLV header at byte {offset}")
        tag, length = raw[offset], raw[offset + 1]
        start = offset + 2
        end = start + length
        if end > len(raw):
            raise MalformedPayload(
                f"TLV value for tag {tag} needs {length} bytes, "
                f"only {len(raw) - start} left"
            )
        try:
            value = raw[start:end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedPayload(f"TLV value for tag {tag} is not UTF-8") from exc
        records.append(TLVRecord(tag=tag, value=value))
        offset = end
    return records


__all__ = [
    "MAX_VALUE_LENGTH",
    "TAG_INVOICE_TOTAL",
    "TAG_SELLER_NAME",
    "TAG_TIMESTAMP",
    "TAG_VAT_NUMBER",
    "TAG_VAT_TOTAL",
    "TLVRecord",
    "decode_zatca_payload",
    "encode_tlv_record",
    "encode_zatca_payload",
    "format_timestamp",
]
