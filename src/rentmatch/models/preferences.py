"""
Modelo de Preferencias del Usuario

Una fila de `user_preferences` por usuario. Es el input del lado
inquilino para el cálculo de compatibilidad.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class UserPreferences(BaseModel):
    """
    Preferencias de búsqueda de un inquilino.

    Los defaults replican los de la tabla en Supabase. La coherencia de
    `budget_min <= budget_max` queda a cargo del formulario que las edita.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    # Identificadores
    id: Optional[str] = Field(None, description="UUID generado por Supabase")
    user_id: str = Field(..., description="FK al perfil del usuario")

    # Presupuesto (moneda entera)
    budget_min: int = Field(default=1000, description="Presupuesto mínimo")
    budget_max: int = Field(default=5000, description="Presupuesto máximo")

    # El orden importa: el primer elemento es la referencia para matches parciales
    preferred_bedrooms: list[int] = Field(
        default_factory=lambda: [1, 2], description="Cantidades de dormitorios aceptables"
    )
    preferred_amenities: list[str] = Field(
        default_factory=list, description="Amenities deseados: ['gym', 'pool']"
    )

    # Requisitos booleanos
    pet_friendly: bool = Field(default=False, description="Necesita que acepten mascotas")
    furnished_preferred: bool = Field(default=False, description="Prefiere amoblado")
    parking_required: bool = Field(default=False, description="Necesita cochera")

    # Ubicación (ambas coordenadas o ninguna)
    location_lat: Optional[float] = Field(None, ge=-90, le=90)
    location_lng: Optional[float] = Field(None, ge=-180, le=180)
    location_name: Optional[str] = Field(None, description="Ej: 'Downtown Austin'")
    search_radius: float = Field(
        default=10, ge=0, description="Radio de búsqueda en millas"
    )

    created_at: Optional[str] = Field(None, description="Timestamp de creación")
    updated_at: Optional[str] = Field(None, description="Última actualización")

    @field_validator("preferred_bedrooms", "preferred_amenities", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _check_location_pair(self) -> "UserPreferences":
        if (self.location_lat is None) != (self.location_lng is None):
            raise ValueError("location_lat y location_lng van juntas")
        return self

    @property
    def has_location(self) -> bool:
        return self.location_lat is not None and self.location_lng is not None

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para upsert en Supabase."""
        data = self.model_dump(exclude={"id", "created_at"})
        data["updated_at"] = datetime.utcnow().isoformat()
        return data
