"""
Configuration partagée pour tous les tests.
Le journal d'envoi est redirigé vers un répertoire temporaire propre à chaque test.
"""

import pytest
from fastapi.testclient import TestClient

from mailqr.dependencies import get_email_sender
from mailqr.main import app
from mailqr.services.email_service import EmailSender


@pytest.fixture
def email_sender(tmp_path):
    """Expéditeur dont le fichier de journal est écrit sous tmp_path."""
    return EmailSender(log_dir=str(tmp_path))


@pytest.fixture
def client(email_sender):
    """Client HTTP de test partageant l'expéditeur du test."""
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
