"""
Journal d'opérations horodaté : copie en mémoire + fichier texte en ajout seul.

Chaque ligne suit le format `[YYYY-MM-DD HH:mm:ss] message`.
Le fichier est créé sous `<répertoire>/<préfixe><YYYYMMDD_HHmmss>.log`.
"""

import logging
import os
import tempfile
import threading
from datetime import datetime
from typing import Callable, List, Optional

from mailqr.config import settings

logger = logging.getLogger(__name__)

ERROR_MARKER = "ERROR:"
WARNING_MARKER = "WARNING:"
NO_ERROR_FOUND = "No error found"


class OperationLog:
    """
    Journal propre à une instance : jamais vidé automatiquement.
    `clear()` ne vide que la copie en mémoire, le fichier reste intact.
    """

    def __init__(
        self,
        log_dir: Optional[str] = None,
        prefix: Optional[str] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._clock = clock
        self._lines: List[str] = []
        self._lock = threading.Lock()

        directory = log_dir or settings.EMAIL_LOG_DIR or tempfile.gettempdir()
        file_name = f"{prefix or settings.EMAIL_LOG_PREFIX}{clock():%Y%m%d_%H%M%S}.log"
        self.file_path = os.path.abspath(os.path.join(directory, file_name))

    def write(self, message: str) -> None:
        """Ajoute une ligne horodatée en mémoire et dans le fichier (erreurs d'écriture ignorées)."""
        entry = f"[{self._clock():%Y-%m-%d %H:%M:%S}] {message}"
        with self._lock:
            self._lines.append(entry)
            try:
                with open(self.file_path, "a", encoding="utf-8") as fh:
                    fh.write(entry + "\n")
            except OSError as exc:
                # Un problème de journal ne doit jamais interrompre l'opération en cours
                logger.debug("Écriture impossible dans %s : %s", self.file_path, exc)

        if message.startswith(ERROR_MARKER):
            logger.error("%s", message)
        elif message.startswith(WARNING_MARKER):
            logger.warning("%s", message)
        else:
            logger.info("%s", message)

    def text(self) -> str:
        with self._lock:
            return "".join(line + "\n" for line in self._lines)

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    def last_error(self) -> str:
        """Dernière ligne contenant `ERROR:` (parcours depuis la fin), sinon `No error found`."""
        for line in reversed(self.text().splitlines()):
            if ERROR_MARKER in line:
                return line
        return NO_ERROR_FOUND
