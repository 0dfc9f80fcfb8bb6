"""
Schémas Pydantic pour la génération de QR codes.
"""

from typing import Optional

from pydantic import BaseModel, field_validator


class SimpleQrCodeRequest(BaseModel):
    """Corps de requête pour générer un QR code sans logo."""
    text: str = ""
    qr_path: str = ""

    @field_validator("text", "qr_path", mode="before")
    @classmethod
    def none_as_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v


class QrCodeRequest(SimpleQrCodeRequest):
    """Corps de requête pour générer un QR code, avec logo central optionnel."""
    logo_path: str = ""

    @field_validator("logo_path", mode="before")
    @classmethod
    def logo_none_as_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v


class QrCodeResult(BaseModel):
    """Résultat d'une génération de QR code (status : 1 = succès, 0 = échec)."""

    status: int
    qr_path: str
    logo_applied: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == 1
