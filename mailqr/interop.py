"""
Façade d'interopérabilité : reprend les noms d'opérations historiques
(GenerateQRCode, Send, GetLastError...) pour les appelants existants.

Contrat : chaque méthode retourne 1 (succès) ou 0 (échec) et ne lève jamais d'exception.
"""

from mailqr.services import qr_service
from mailqr.services.email_service import EmailSender


class QRHelper:
    """Génération de QR codes PNG."""

    def GenerateQRCode(self, text: str, qrPath: str, logoPath: str) -> int:
        return qr_service.generate_qr_code(text, qrPath, logoPath)

    def GenerateSimpleQRCode(self, text: str, qrPath: str) -> int:
        return qr_service.generate_simple_qr_code(text, qrPath)


class SendEmail:
    """Envoi d'emails SMTP ; le journal est propre à chaque instance."""

    def __init__(self):
        self._sender = EmailSender()

    def Send(
        self,
        smtpServer: str,
        port: int,
        username: str,
        password: str,
        senderName: str,
        senderEmail: str,
        toEmails: str,
        ccEmails: str,
        bccEmails: str,
        subject: str,
        body: str,
        attachmentPaths: str,
    ) -> int:
        return self._sender.send(
            smtpServer, port, username, password, senderName, senderEmail,
            toEmails, ccEmails, bccEmails, subject, body, attachmentPaths,
        )

    def GetLogFilePath(self) -> str:
        return self._sender.get_log_file_path()

    def GetDetailedLog(self) -> str:
        return self._sender.get_detailed_log()

    def ClearLog(self) -> None:
        self._sender.clear_log()

    def GetLastError(self) -> str:
        return self._sender.get_last_error()
