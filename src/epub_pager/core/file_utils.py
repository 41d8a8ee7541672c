"""
Logique pour les opérations sur le système de fichiers (trouver les EPUB locaux).
"""

import hashlib
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import CHAPTER_URL_SEPARATOR, SUPPORTED_EXT

logger = logging.getLogger(__name__)


def is_supported_file(path: str) -> bool:
    return path.lower().endswith(SUPPORTED_EXT)


def find_epubs_in_folder(folder: str) -> List[str]:
    """Trouve tous les fichiers EPUB dans un dossier et ses sous-dossiers, triés."""
    files = []
    for root, _, filenames in os.walk(folder):
        for f in filenames:
            if is_supported_file(f):
                files.append(os.path.join(root, f))
    files.sort()
    logger.info("Found %d epub(s) in folder %s", len(files), folder)
    return files


def manga_url_for(epub_path: str) -> str:
    """Identifiant local du manga : le dossier qui contient le fichier."""
    return Path(epub_path).parent.name or str(Path(epub_path).parent)


def default_title_for(epub_path: str) -> str:
    """Titre de repli : le nom du fichier sans extension."""
    return Path(epub_path).stem


def manga_id_for(epub_path: str) -> int:
    """Id stable du manga, dérivé du chemin absolu de son dossier."""
    folder = os.path.abspath(os.path.dirname(epub_path))
    return int(hashlib.sha1(folder.encode("utf-8")).hexdigest()[:15], 16)


def chapter_url_for(manga_url: str, epub_path: str, href: Optional[str] = None) -> str:
    """
    URL locale d'un chapitre: "<manga>/<fichier>", suivie de "::<chemin>"
    pour un chapitre issu de la table des matières.
    """
    url = f"{manga_url}/{os.path.basename(epub_path)}"
    if href:
        url += f"{CHAPTER_URL_SEPARATOR}{href}"
    return url


def split_chapter_url(url: str) -> Tuple[str, Optional[str]]:
    """Sépare l'URL d'un chapitre en (URL du fichier, chemin dans l'EPUB ou None)."""
    file_url, _, href = url.partition(CHAPTER_URL_SEPARATOR)
    return file_url, href or None
