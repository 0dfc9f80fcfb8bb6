"""
Découpage des listes saisies sous forme de texte (adresses email, chemins de pièces jointes).
"""

import re
from typing import List, Optional

# Séparateurs acceptés : point-virgule (export Outlook/Excel FR) et virgule
LIST_SEPARATORS = re.compile(r"[;,]")


def split_list(raw: Optional[str]) -> List[str]:
    """
    Découpe une chaîne sur `;` et `,`, nettoie chaque élément et ignore les vides.

    Exemple : " ; a@x.com ,, b@x.com; " → ["a@x.com", "b@x.com"]
    """
    if not raw or not raw.strip():
        return []
    return [item.strip() for item in LIST_SEPARATORS.split(raw) if item.strip()]
