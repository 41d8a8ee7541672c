"""
Module de pagination EPUB.

Responsabilité unique: Découper un conteneur en pages de lecture, images
(EPUB de type bande dessinée) ou texte (roman).
"""

import functools
import logging
from typing import List, Optional

from ...config import CHAPTER_NOT_FOUND_TEXT, IMAGE_MEDIA_PREFIX, TEXT_SEPARATOR
from ..models import EntryMetadata, Page
from ..text_utils import html_to_text
from .container import EpubContainer, strip_fragment

logger = logging.getLogger(__name__)


def image_entries(container: EpubContainer) -> List[EntryMetadata]:
    """Entrées images du manifeste, dans l'ordre de déclaration."""
    return [
        entry
        for entry in container.entries()
        if entry.media_type and entry.media_type.startswith(IMAGE_MEDIA_PREFIX)
    ]


def entry_text(container: EpubContainer, path: str) -> str:
    """Texte visible d'une entrée (X)HTML."""
    return html_to_text(container.read_bytes(path))


def spine_text(container: EpubContainer) -> str:
    """Texte de tout le spine, une ligne vide entre chaque document."""
    texts = [entry_text(container, path) for path in container.spine()]
    return TEXT_SEPARATOR.join(texts).strip()


def _spine_entry_page(container: EpubContainer, target: str) -> Page:
    """Page texte d'une seule entrée du spine, ou page de substitution."""
    wanted = strip_fragment(target)
    try:
        if wanted in container.spine():
            return Page.text_page(entry_text(container, wanted))
        logger.warning("Spine entry %s not found in %s", target, container.name)
    except Exception:
        logger.exception("Could not extract spine entry %s from %s", target, container.name)

    return Page.text_page(CHAPTER_NOT_FOUND_TEXT)


def paginate(container: EpubContainer, target_spine_entry: Optional[str] = None) -> List[Page]:
    """
    Calcule les pages d'un conteneur.

    1. target_spine_entry fourni: une page texte pour cette entrée du spine
       (page de substitution si absente, sans lever d'exception).
    2. Sinon, une page par image du manifeste, dans l'ordre de déclaration.
       Le flux d'une page n'est ouvert qu'à l'appel de Page.open_stream().
    3. Sans image: une page texte avec le texte de tout le spine.

    Args:
        container: Conteneur EPUB ouvert
        target_spine_entry: Chemin d'une entrée du spine (optionnel)

    Returns:
        Liste ordonnée de Page
    """
    if target_spine_entry is not None:
        return [_spine_entry_page(container, target_spine_entry)]

    images = image_entries(container)
    if images:
        logger.debug("%s: %d image page(s)", container.name, len(images))
        return [
            Page.image(index=i, path=entry.path, stream=functools.partial(container.read_entry, entry.path))
            for i, entry in enumerate(images)
        ]

    logger.debug("%s: no image found, using text pagination", container.name)
    return [Page.text_page(spine_text(container))]
