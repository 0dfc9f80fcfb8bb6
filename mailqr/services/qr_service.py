"""
Service de génération de QR codes PNG, avec logo central optionnel.

Flux :
  1. Refuser un texte ou un chemin de sortie vide (aucun effet de bord)
  2. Encoder le texte (correction d'erreur Q, ~25 % de modules récupérables)
  3. Incruster le logo au centre si le fichier existe (1/5 de la largeur)
  4. Écrire le PNG de façon atomique (fichier temporaire puis renommage)
"""

import logging
import os
import uuid
from typing import Optional

import qrcode
from PIL import Image

from mailqr.config import settings
from mailqr.schemas.qr_code import QrCodeResult

logger = logging.getLogger(__name__)


def _logo_available(logo_path: Optional[str]) -> bool:
    return bool(logo_path) and os.path.isfile(logo_path)


def _paste_logo(img: Image.Image, logo_path: str) -> None:
    """
    Redimensionne le logo à 1/5 de la largeur du QR code et le colle au centre.
    Le logo masque des modules : la lisibilité repose sur le niveau Q, sans vérification.
    """
    logo_size = img.width // settings.QR_LOGO_RATIO
    x = (img.width - logo_size) // 2
    y = (img.height - logo_size) // 2

    with Image.open(logo_path) as logo:
        resized = logo.convert("RGBA").resize((logo_size, logo_size), Image.Resampling.BICUBIC)
    # Le canal alpha sert de masque : les zones transparentes du logo laissent voir le QR
    img.paste(resized, (x, y), resized)


def render_qr_image(text: str, logo_path: str = "") -> Image.Image:
    """Génère l'image du QR code (noir sur blanc, zone de silence incluse) sans l'écrire."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_Q,
        box_size=settings.QR_BOX_SIZE,
        border=settings.QR_BORDER,
    )
    qr.add_data(text)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white").convert("RGB")

    if _logo_available(logo_path):
        _paste_logo(img, logo_path)
    return img


def _save_png_atomically(img: Image.Image, qr_path: str) -> None:
    """
    Écrit le PNG dans un fichier temporaire du répertoire cible puis le renomme.
    Un échec ne laisse jamais de fichier partiel à l'emplacement demandé.
    Les droits du fichier suivent le umask du processus, comme un open() classique.
    """
    directory = os.path.dirname(os.path.abspath(qr_path))
    os.makedirs(directory, exist_ok=True)

    tmp_path = os.path.join(directory, f".{os.path.basename(qr_path)}.{uuid.uuid4().hex}.tmp")
    fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o666)
    try:
        with os.fdopen(fd, "wb") as fh:
            img.save(fh, format="PNG")
        os.replace(tmp_path, qr_path)
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def generate_qr_code_detailed(text: str, qr_path: str, logo_path: str = "") -> QrCodeResult:
    """
    Génère le QR code et retourne un rapport détaillé.
    Ne lève jamais d'exception : toute erreur est loguée et reportée dans `error`.
    Les chemins peuvent être des `str`, des `bytes` ou des objets `os.PathLike`.
    """
    try:
        qr_path = os.fsdecode(qr_path) if qr_path else ""
        logo_path = os.fsdecode(logo_path) if logo_path else ""
    except TypeError as exc:
        logger.error("QR Generation Error: %s", exc)
        return QrCodeResult(status=0, qr_path="", error=str(exc))

    if not text:
        return QrCodeResult(status=0, qr_path=qr_path, error="Le texte à encoder est vide.")
    if not qr_path:
        return QrCodeResult(status=0, qr_path="", error="Le chemin du fichier QR est vide.")

    try:
        logo_applied = _logo_available(logo_path)
        img = render_qr_image(text, logo_path)
        _save_png_atomically(img, qr_path)
    except Exception as exc:
        logger.error("QR Generation Error: %s", exc)
        return QrCodeResult(status=0, qr_path=qr_path, error=str(exc))

    logger.info("QR code généré : %s (%dx%d, logo=%s)", qr_path, img.width, img.height, logo_applied)
    return QrCodeResult(
        status=1,
        qr_path=qr_path,
        logo_applied=logo_applied,
        width=img.width,
        height=img.height,
    )


def generate_qr_code(text: str, qr_path: str, logo_path: str = "") -> int:
    """Génère un QR code PNG avec logo optionnel. Retourne 1 en cas de succès, 0 sinon."""
    return generate_qr_code_detailed(text, qr_path, logo_path).status


def generate_simple_qr_code(text: str, qr_path: str) -> int:
    """Génère un QR code PNG sans logo."""
    return generate_qr_code(text, qr_path, "")
