"""
Schémas Pydantic pour l'envoi d'emails et la consultation du journal d'opérations.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SendErrorKind(str, Enum):
    """Cause d'échec d'un envoi, le code retour 0/1 ne permettant pas de la distinguer."""

    MISSING_FIELD = "MISSING_FIELD"
    NO_RECIPIENTS = "NO_RECIPIENTS"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    CONNECTION = "CONNECTION"
    AUTHENTICATION = "AUTHENTICATION"
    TRANSMISSION = "TRANSMISSION"
    UNEXPECTED = "UNEXPECTED"


class EmailSendRequest(BaseModel):
    """
    Corps de requête pour l'envoi d'un email.
    Les listes (destinataires, pièces jointes) sont séparées par `;` ou `,`.
    """
    smtp_server: str = ""
    port: int = Field(587, ge=1, le=65535)
    username: str = ""
    password: str = ""
    sender_name: str = ""
    sender_email: str = ""
    to_emails: str = ""
    cc_emails: str = ""
    bcc_emails: str = ""
    subject: str = ""
    body: str = ""
    attachment_paths: str = ""

    @field_validator(
        "smtp_server", "username", "password", "sender_name", "sender_email",
        "to_emails", "cc_emails", "bcc_emails", "subject", "body", "attachment_paths",
        mode="before",
    )
    @classmethod
    def none_as_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v


class EmailSendResult(BaseModel):
    """Rapport d'un envoi d'email (status : 1 = succès, 0 = échec)."""

    status: int
    error_kind: Optional[SendErrorKind] = None
    error: Optional[str] = None
    to_count: int = 0
    cc_count: int = 0
    bcc_count: int = 0
    attachment_count: int = 0
    missing_attachments: List[str] = []

    @property
    def success(self) -> bool:
        return self.status == 1


class EmailLogResponse(BaseModel):
    """Journal détaillé accumulé par l'expéditeur."""
    log_file_path: str
    log: str


class LogFilePathResponse(BaseModel):
    log_file_path: str


class LastErrorResponse(BaseModel):
    last_error: str
