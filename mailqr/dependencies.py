"""
Dépendances FastAPI partagées par les routers.
"""

from functools import lru_cache

from mailqr.services.email_service import EmailSender


@lru_cache(maxsize=1)
def get_email_sender() -> EmailSender:
    """Dépendance FastAPI — un expéditeur unique par processus, son journal s'accumule entre requêtes."""
    return EmailSender()
