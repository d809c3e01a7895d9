"""Schemas shared across resources."""

from __future__ import annotations

from pydantic import BaseModel

from hospitality.services.status_labels import StatusLabel


class LabelRead(BaseModel):
    """Bilingual display label."""

    en: str
    ar: str

    @classmethod
    def from_label(cls, label: StatusLabel) -> "LabelRead":
        return cls(en=label.en, ar=label.ar)
