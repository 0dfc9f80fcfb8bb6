"""
Service d'envoi d'emails SMTP (STARTTLS + identifiant/mot de passe).

Flux de `EmailSender.send_detailed` :
  1. Valider serveur, identifiant et destinataires TO (échec immédiat, ligne `ERROR:`)
  2. Découper les listes TO / CC / BCC (séparateurs `;` et `,`)
  3. Construire le corps : HTML détecté automatiquement, version texte dérivée
  4. Joindre les fichiers existants (ligne `WARNING:` pour les absents, sans échec)
  5. Connexion, STARTTLS, authentification, envoi puis QUIT

Chaque étape est tracée dans le journal d'opérations de l'instance.
"""

import logging
import mimetypes
import os
import re
import smtplib
import ssl
from email.errors import HeaderParseError
from email.headerregistry import Address
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import List, Optional, Sequence

from mailqr.schemas.email_send import EmailSendResult, SendErrorKind
from mailqr.services.operation_log import OperationLog
from mailqr.services.text_lists import split_list

logger = logging.getLogger(__name__)

# Fragments qui font basculer le corps en HTML (en plus d'un `<` initial)
HTML_MARKERS = (
    "<html", "<HTML", "<body", "<BODY", "<p>", "<div>",
    "<br>", "<BR>", "<tr>", "<TR>", "<strong>", "<STRONG>",
)
TAG_PATTERN = re.compile(r"<.*?>", re.DOTALL)
SUBJECT_LINE_BREAK = "Subject must not contain line breaks"


class EmailSendError(Exception):
    """Échec d'envoi typé, converti en `EmailSendResult` par `EmailSender`."""

    def __init__(self, kind: SendErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _has_line_break(value: Optional[str]) -> bool:
    return bool(value) and ("\n" in value or "\r" in value)


def is_html_body(body: str) -> bool:
    """Le corps est considéré HTML s'il commence par `<` ou contient une balise courante."""
    return body.lstrip().startswith("<") or any(marker in body for marker in HTML_MARKERS)


def strip_html_tags(body: str) -> str:
    """Version texte d'un corps HTML : supprime toute séquence `<...>`."""
    return TAG_PATTERN.sub("", body)


def _parse_address(value: str, display_name: str = "") -> Address:
    if not value:
        raise EmailSendError(SendErrorKind.INVALID_ADDRESS, "Email address is empty")
    try:
        return Address(display_name=display_name, addr_spec=value)
    except (ValueError, IndexError, HeaderParseError) as exc:
        raise EmailSendError(
            SendErrorKind.INVALID_ADDRESS, f"Invalid email address '{value}': {exc}"
        ) from exc


def _describe(exc: Exception) -> str:
    if isinstance(exc, smtplib.SMTPResponseException):
        detail = exc.smtp_error
        if isinstance(detail, bytes):
            detail = detail.decode("utf-8", "replace")
        return f"{exc.smtp_code} {detail}"
    return str(exc) or type(exc).__name__


def build_message(
    sender_name: str,
    sender_email: str,
    to: Sequence[str],
    cc: Sequence[str],
    bcc: Sequence[str],
    subject: str,
    body: str,
    attachments: Sequence[str] = (),
) -> EmailMessage:
    """
    Construit le message MIME.
    - Corps HTML : multipart/alternative (texte dérivé + HTML)
    - Pièces jointes : multipart/mixed, type MIME deviné depuis l'extension
    Lève EmailSendError(INVALID_ADDRESS) si une adresse est refusée par le parseur,
    EmailSendError(INVALID_FIELD) si le sujet contient un saut de ligne.
    """
    if _has_line_break(subject):
        raise EmailSendError(SendErrorKind.INVALID_FIELD, SUBJECT_LINE_BREAK)

    sender = _parse_address((sender_email or "").strip(), display_name=sender_name or "")

    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = tuple(_parse_address(addr) for addr in to)
    if cc:
        msg["Cc"] = tuple(_parse_address(addr) for addr in cc)
    # Bcc n'est jamais transmis : smtplib le retire avant l'envoi
    if bcc:
        msg["Bcc"] = tuple(_parse_address(addr) for addr in bcc)
    msg["Subject"] = subject or ""
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = make_msgid(domain=sender.domain or None)

    if not _is_blank(body):
        if is_html_body(body):
            msg.set_content(strip_html_tags(body))
            msg.add_alternative(body, subtype="html")
        else:
            msg.set_content(body)

    for path in attachments:
        ctype, encoding = mimetypes.guess_type(path)
        if ctype is None or encoding is not None:
            ctype = "application/octet-stream"
        maintype, subtype = ctype.split("/", 1)
        with open(path, "rb") as fh:
            msg.add_attachment(
                fh.read(), maintype=maintype, subtype=subtype, filename=os.path.basename(path)
            )

    return msg


class EmailSender:
    """
    Expéditeur d'emails avec journal d'opérations propre à l'instance.

    Le journal s'accumule au fil des envois jusqu'à `clear_log()` ; il est aussi
    recopié dans un fichier créé à la construction (voir `get_log_file_path()`).
    """

    def __init__(self, log_dir: Optional[str] = None):
        self._log = OperationLog(log_dir=log_dir)
        self._log.write(f"Log file created: {self._log.file_path}")

    # --- Journal ---

    def get_log_file_path(self) -> str:
        return self._log.file_path

    def get_detailed_log(self) -> str:
        return self._log.text()

    def clear_log(self) -> None:
        """Vide le journal en mémoire uniquement ; le fichier n'est pas tronqué."""
        self._log.clear()

    def get_last_error(self) -> str:
        return self._log.last_error()

    # --- Envoi ---

    def send(
        self,
        smtp_server: str,
        port: int,
        username: str,
        password: str,
        sender_name: str,
        sender_email: str,
        to_emails: str,
        cc_emails: str,
        bcc_emails: str,
        subject: str,
        body: str,
        attachment_paths: str,
    ) -> int:
        """Envoie un email. Retourne 1 en cas de succès, 0 sinon (détail dans le journal)."""
        return self.send_detailed(
            smtp_server, port, username, password, sender_name, sender_email,
            to_emails, cc_emails, bcc_emails, subject, body, attachment_paths,
        ).status

    def send_detailed(
        self,
        smtp_server: str,
        port: int,
        username: str,
        password: str,
        sender_name: str,
        sender_email: str,
        to_emails: str,
        cc_emails: str,
        bcc_emails: str,
        subject: str,
        body: str,
        attachment_paths: str,
    ) -> EmailSendResult:
        """
        Envoie un email et retourne un rapport détaillé (cause d'échec typée).

        Règles :
        - Serveur, identifiant ou TO vide → MISSING_FIELD, aucune connexion tentée
        - Aucune adresse TO exploitable après découpage → NO_RECIPIENTS
        - Adresse refusée par le parseur → INVALID_ADDRESS, avant les pièces jointes
        - CC / BCC optionnels
        - Saut de ligne dans le sujet → INVALID_FIELD (injection d'en-têtes)
        - Pièce jointe introuvable → WARNING, l'envoi continue
        - Toute exception est journalisée et convertie en status 0
        """
        log = self._log.write
        result = EmailSendResult(status=0)

        try:
            log("=== Starting Email Send ===")
            log(f"SMTP: {smtp_server}:{port}")
            log(f"From: {sender_name} <{sender_email}>")
            log(f"Subject: {subject}")

            if _is_blank(smtp_server):
                return self._reject(result, SendErrorKind.MISSING_FIELD, "SMTP server is empty")
            if _is_blank(username):
                return self._reject(result, SendErrorKind.MISSING_FIELD, "Username is empty")
            if _is_blank(to_emails):
                return self._reject(result, SendErrorKind.MISSING_FIELD, "Recipient email(s) are empty")

            # Adresses validées au fil du découpage, avant toute pièce jointe
            _parse_address((sender_email or "").strip(), display_name=sender_name or "")

            to = split_list(to_emails)
            for addr in to:
                _parse_address(addr)
                log(f"TO: {addr}")
            if not to:
                return self._reject(result, SendErrorKind.NO_RECIPIENTS, "No valid TO recipients")

            cc = split_list(cc_emails)
            for addr in cc:
                _parse_address(addr)
                log(f"CC: {addr}")
            bcc = split_list(bcc_emails)
            for addr in bcc:
                _parse_address(addr)
                log(f"BCC: {addr}")
            result.to_count, result.cc_count, result.bcc_count = len(to), len(cc), len(bcc)

            if _has_line_break(subject):
                return self._reject(result, SendErrorKind.INVALID_FIELD, SUBJECT_LINE_BREAK)

            if not _is_blank(body):
                if is_html_body(body):
                    log("Body format: HTML with plain text fallback")
                else:
                    log("Body format: Plain Text")

            attachments = self._collect_attachments(split_list(attachment_paths), result)

            message = build_message(sender_name, sender_email, to, cc, bcc, subject, body, attachments)
            self._transmit(message, smtp_server.strip(), port, username, password, to + cc + bcc)

            log(f"SUCCESS: Email sent to {len(to)} recipient(s)")
            log("=== End Email Send ===")
            result.status = 1
            return result

        except EmailSendError as exc:
            return self._abort(result, exc.kind, str(exc))
        except Exception as exc:
            return self._abort(result, SendErrorKind.UNEXPECTED, _describe(exc))

    def _collect_attachments(self, paths: List[str], result: EmailSendResult) -> List[str]:
        """Retient les fichiers existants ; les absents sont signalés sans faire échouer l'envoi."""
        found = []
        for path in paths:
            if os.path.isfile(path):
                size_kb = os.path.getsize(path) / 1024.0
                self._log.write(f"Attached: {os.path.basename(path)} ({size_kb:.2f} KB)")
                found.append(path)
            else:
                self._log.write(f"WARNING: Attachment not found: {path}")
                result.missing_attachments.append(path)
        if found:
            self._log.write(f"Total attachments: {len(found)}")
        result.attachment_count = len(found)
        return found

    def _transmit(
        self,
        message: EmailMessage,
        smtp_server: str,
        port: int,
        username: str,
        password: str,
        recipients: List[str],
    ) -> None:
        """Connexion en clair puis montée en TLS (STARTTLS), login, envoi, QUIT."""
        stage = SendErrorKind.CONNECTION
        try:
            server = smtplib.SMTP(smtp_server, port)
            try:
                server.starttls(context=ssl.create_default_context())
                stage = SendErrorKind.AUTHENTICATION
                server.login(username, password)
                stage = SendErrorKind.TRANSMISSION
                server.send_message(message, to_addrs=recipients)
                server.quit()
            finally:
                server.close()
        except OSError as exc:
            # smtplib.SMTPException et ssl.SSLError héritent d'OSError
            raise EmailSendError(stage, _describe(exc)) from exc

    def _reject(self, result: EmailSendResult, kind: SendErrorKind, message: str) -> EmailSendResult:
        """Échec de validation : aucune étape suivante n'est tentée."""
        self._log.write(f"ERROR: {message}")
        result.error_kind = kind
        result.error = message
        return result

    def _abort(self, result: EmailSendResult, kind: SendErrorKind, message: str) -> EmailSendResult:
        self._log.write(f"ERROR: {message}")
        self._log.write("=== End Email Send ===")
        result.status = 0
        result.error_kind = kind
        result.error = message
        return result
