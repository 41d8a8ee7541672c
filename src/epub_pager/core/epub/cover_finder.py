"""
Module de recherche de couverture EPUB.

Responsabilité unique: Implémenter différentes stratégies pour trouver
la couverture d'un fichier EPUB (vignette de la bibliothèque locale).
"""

import logging
from typing import Optional

import ebooklib
from ebooklib.epub import EpubBook, EpubItem

from ...config import IMAGE_MEDIA_PREFIX
from .container import EpubContainer

logger = logging.getLogger(__name__)


def _find_cover_by_type(book: EpubBook) -> Optional[EpubItem]:
    """Stratégie 1: item de type ITEM_COVER (propriété cover-image)."""
    items = list(book.get_items_of_type(ebooklib.ITEM_COVER))
    if items:
        logger.debug("Cover found via ITEM_COVER")
        return items[0]
    return None


def _find_cover_by_opf(book: EpubBook) -> Optional[EpubItem]:
    """Stratégie 2: <meta name="cover" content="id"/> dans l'OPF."""
    # ebooklib range les <meta name=... content=...> sous ("OPF", "meta")
    for _, attrs in book.get_metadata("OPF", "meta"):
        if attrs.get("name") != "cover":
            continue
        cover_id = attrs.get("content")
        item = book.get_item_with_id(cover_id) if cover_id else None
        if item is not None:
            logger.debug("Cover found via OPF metadata")
            return item
    return None


def _find_cover_by_bruteforce(book: EpubBook) -> Optional[EpubItem]:
    """
    Stratégie 3: Recherche brute-force parmi les images.

    Première image dont l'id ou le chemin contient "cover", sinon None.
    """
    for item in book.get_items():
        if not (item.media_type and item.media_type.startswith(IMAGE_MEDIA_PREFIX)):
            continue
        if "cover" in (item.get_id() or "").lower() or "cover" in item.get_name().lower():
            logger.debug("Cover found via brute-force: %s", item.get_name())
            return item
    return None


def find_cover_data(container: EpubContainer) -> Optional[bytes]:
    """
    Tente d'extraire les données de la couverture en cascade:
    ITEM_COVER, puis métadonnées OPF, puis image nommée "cover".

    Args:
        container: Conteneur EPUB ouvert

    Returns:
        Données binaires de la couverture ou None si non trouvée
    """
    try:
        book = container.book
        cover_item = (
            _find_cover_by_type(book) or _find_cover_by_opf(book) or _find_cover_by_bruteforce(book)
        )

        if cover_item:
            logger.info("Cover image found for %s: %s", container.name, cover_item.get_name())
            return cover_item.content

        logger.info("No cover found for %s", container.name)

    except Exception:
        logger.warning("Could not extract cover image for %s", container.name, exc_info=True)

    return None
