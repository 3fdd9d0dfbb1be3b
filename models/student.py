"""Datenmodell für einen Schüler (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Student(BaseModel):
    """Ein Schüler, der genau einer Gruppe zugeordnet ist."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    group_id: str
    phone: Optional[str] = None
    # Positiv: besuchte, unbezahlte Sitzungen. Negativ: Guthaben.
    sessions_owed: int = 0
    # None = Gruppenpreis gilt
    individual_price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    # Laufende Summe aller Zahlungen; wird nie verringert
    collected: float = Field(0, ge=0, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Schülername darf nicht leer sein.")
        return v

    @field_validator("phone")
    @classmethod
    def _blank_phone_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    def to_record(self) -> dict:
        """Persistierbares Dict; `phone` fehlt, wenn keine Nummer hinterlegt ist."""
        data = self.model_dump(by_alias=True)
        if self.phone is None:
            data.pop("phone")
        return data
