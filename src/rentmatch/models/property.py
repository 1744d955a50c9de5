"""
Modelo de Propiedad

Subconjunto de la fila de `properties` que participa del matching.
El resto de columnas (dirección, imágenes, landlord) se ignora.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PropertyStatus(str, Enum):
    """Estado de publicación del listing."""

    AVAILABLE = "available"
    PENDING = "pending"
    RENTED = "rented"
    DRAFT = "draft"


class Property(BaseModel):
    """Propiedad publicada por un landlord."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str = Field(..., description="UUID generado por Supabase")
    title: Optional[str] = Field(None, description="Título del anuncio")

    price: int = Field(..., ge=0, description="Alquiler mensual")
    bedrooms: int = Field(default=1, ge=0, description="Cantidad de dormitorios")
    amenities: list[str] = Field(default_factory=list)

    # Columnas independientes: una sin la otra se scorea como "sin ubicación"
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    pet_friendly: bool = Field(default=False)
    furnished: bool = Field(default=False)
    parking_included: bool = Field(default=False)

    status: PropertyStatus = Field(default=PropertyStatus.AVAILABLE)

    @field_validator("amenities", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("pet_friendly", "furnished", "parking_included", mode="before")
    @classmethod
    def _null_as_false(cls, value):
        return False if value is None else value

    @property
    def is_available(self) -> bool:
        return self.status == PropertyStatus.AVAILABLE
