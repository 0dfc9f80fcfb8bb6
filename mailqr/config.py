"""
Configuration centrale de la bibliothèque via variables d'environnement.
Charger depuis un fichier .env en développement.

Les identifiants SMTP ne sont jamais stockés ici : ils sont transmis à chaque appel.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # QR code — 20 px par module, zone de silence standard de 4 modules
    QR_BOX_SIZE: int = 20
    QR_BORDER: int = 4
    # Côté du logo = largeur de l'image // QR_LOGO_RATIO
    QR_LOGO_RATIO: int = 5

    # Journal d'envoi des emails (vide = répertoire temporaire du système)
    EMAIL_LOG_DIR: str = ""
    EMAIL_LOG_PREFIX: str = "PB_Email_"

    # Environnement
    ENV: str = "development"

    model_config = SettingsConfigDict(
        env_prefix="MAILQR_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()
