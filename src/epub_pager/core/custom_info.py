"""
Stockage des informations personnalisées (titre, auteur, description) par manga.

Le store est passé explicitement aux accesseurs de MangaRecord : aucune
recherche globale, la surcharge est relue à chaque appel.
"""

import logging
import threading
from typing import Dict, Optional

from .models import CustomMangaInfo

logger = logging.getLogger(__name__)


class CustomInfoStore:
    """Store en mémoire des CustomMangaInfo, indexé par id de manga."""

    def __init__(self):
        self._infos: Dict[int, CustomMangaInfo] = {}
        self._lock = threading.Lock()

    def get(self, manga_id: Optional[int]) -> Optional[CustomMangaInfo]:
        if manga_id is None:
            return None
        with self._lock:
            return self._infos.get(manga_id)

    def set(self, info: CustomMangaInfo) -> None:
        with self._lock:
            self._infos[info.manga_id] = info
        logger.debug("Custom info stored for manga %s", info.manga_id)

    def remove(self, manga_id: int) -> None:
        with self._lock:
            self._infos.pop(manga_id, None)
