"""
Point d'entrée de l'API MailQR (génération de QR codes, envoi d'emails).
Démarrage : uvicorn mailqr.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mailqr.config import settings
from mailqr.routers import emails, qr_codes

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

app = FastAPI(
    title="MailQR API",
    description="Génération de QR codes PNG et envoi d'emails SMTP avec journal d'opérations",
    version=API_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.include_router(qr_codes.router)
app.include_router(emails.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Intercepte les exceptions non gérées : trace complète dans les logs, réponse 500 générique."""
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "MailQR API", "version": API_VERSION, "env": settings.ENV}
