"""Datenmodell für eine Nachhilfegruppe (Pydantic v2)."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Group(BaseModel):
    """Eine Lerngruppe mit gemeinsamem Preis und Abrechnungszyklus."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str                                   # opak, eindeutig, unveränderlich
    name: str                                 # "Mathe 1. Klasse Gymnasium"
    # Preis pro Abrechnungszyklus; endlich
    monthly_price: float = Field(ge=0, allow_inf_nan=False)
    sessions_per_month: int = Field(gt=0)     # Sitzungen pro Zyklus = Schuldenschwelle
    teacher_sessions: int = Field(0, ge=0)    # manuell gezählte gehaltene Sitzungen

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Gruppenname darf nicht leer sein.")
        return v

    @property
    def session_price(self) -> float:
        """Preis einer Sitzung zum Gruppenpreis."""
        return self.monthly_price / self.sessions_per_month

    def to_record(self) -> dict:
        """Persistierbares Dict mit den camelCase-Feldnamen."""
        return self.model_dump(by_alias=True)
