"""
Router pour l'envoi d'emails et la consultation du journal d'opérations.
"""

from fastapi import APIRouter, Depends

from mailqr.dependencies import get_email_sender
from mailqr.schemas.email_send import (
    EmailLogResponse,
    EmailSendRequest,
    EmailSendResult,
    LastErrorResponse,
    LogFilePathResponse,
)
from mailqr.services.email_service import EmailSender

router = APIRouter(prefix="/api/v1/emails", tags=["Emails"])


@router.post("/send", response_model=EmailSendResult, summary="Envoyer un email")
def send_email(data: EmailSendRequest, sender: EmailSender = Depends(get_email_sender)):
    """
    Envoie un email via SMTP (STARTTLS puis authentification).

    - Listes TO / CC / BCC et pièces jointes séparées par `;` ou `,`
    - Corps HTML détecté automatiquement, avec version texte dérivée
    - Pièce jointe introuvable : avertissement dans le journal, l'envoi continue
    - Un échec est reporté dans le corps (status 0 + error_kind), pas par un code HTTP
    """
    return sender.send_detailed(
        data.smtp_server,
        data.port,
        data.username,
        data.password,
        data.sender_name,
        data.sender_email,
        data.to_emails,
        data.cc_emails,
        data.bcc_emails,
        data.subject,
        data.body,
        data.attachment_paths,
    )


@router.get("/log", response_model=EmailLogResponse, summary="Journal détaillé")
def get_detailed_log(sender: EmailSender = Depends(get_email_sender)):
    """Retourne le journal accumulé depuis le démarrage ou le dernier vidage."""
    return EmailLogResponse(log_file_path=sender.get_log_file_path(), log=sender.get_detailed_log())


@router.delete("/log", status_code=204, summary="Vider le journal en mémoire")
def clear_log(sender: EmailSender = Depends(get_email_sender)):
    """Vide la copie en mémoire ; le fichier de journal sur disque est conservé."""
    sender.clear_log()


@router.get("/log-file", response_model=LogFilePathResponse, summary="Chemin du fichier de journal")
def get_log_file_path(sender: EmailSender = Depends(get_email_sender)):
    return LogFilePathResponse(log_file_path=sender.get_log_file_path())


@router.get("/last-error", response_model=LastErrorResponse, summary="Dernière erreur")
def get_last_error(sender: EmailSender = Depends(get_email_sender)):
    """Dernière ligne `ERROR:` du journal, ou `No error found`."""
    return LastErrorResponse(last_error=sender.get_last_error())
