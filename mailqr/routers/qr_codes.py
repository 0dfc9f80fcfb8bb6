"""
Router pour la génération de QR codes PNG.
"""

from fastapi import APIRouter

from mailqr.schemas.qr_code import QrCodeRequest, QrCodeResult, SimpleQrCodeRequest
from mailqr.services import qr_service

router = APIRouter(prefix="/api/v1/qr-codes", tags=["QR codes"])


@router.post("", response_model=QrCodeResult, summary="Générer un QR code (logo optionnel)")
def generate_qr_code(data: QrCodeRequest):
    """
    Encode `text` en QR code (correction d'erreur Q, 20 px par module) et écrit le PNG à `qr_path`.

    - Les répertoires manquants sont créés
    - `logo_path` est ignoré s'il est vide ou si le fichier n'existe pas
    - Un échec est reporté dans le corps (status 0 + error), pas par un code HTTP
    """
    return qr_service.generate_qr_code_detailed(data.text, data.qr_path, data.logo_path)


@router.post("/simple", response_model=QrCodeResult, summary="Générer un QR code sans logo")
def generate_simple_qr_code(data: SimpleQrCodeRequest):
    """Équivalent de la génération avec un chemin de logo vide."""
    return qr_service.generate_qr_code_detailed(data.text, data.qr_path, "")
