"""
Module de table des matières EPUB.

Responsabilité unique: Exposer la navigation (NCX / nav) et la liste des
documents du spine sélectionnables comme chapitres.
"""

import logging
import os
from typing import Dict, List, Tuple

from ..models import ChapterEntry, TocEntry
from ..text_utils import extract_heading
from .container import EpubContainer, strip_fragment

logger = logging.getLogger(__name__)


def _parse_toc(toc_items: list, level: int = 0) -> List[TocEntry]:
    """Parcours récursif de book.toc : Link, ou tuple (Section, enfants)."""
    entries = []

    for item in toc_items:
        if isinstance(item, tuple):
            section, children = item
            entries.append(
                TocEntry(
                    title=(section.title or "").strip(),
                    href=section.href or "",
                    level=level,
                    children=_parse_toc(children, level + 1),
                )
            )
        else:
            entries.append(
                TocEntry(title=(item.title or "").strip(), href=item.href or "", level=level)
            )

    return entries


def extract_toc(container: EpubContainer) -> List[TocEntry]:
    """Table des matières hiérarchique déclarée par le conteneur."""
    try:
        return _parse_toc(container.book.toc)
    except Exception:
        logger.warning("Could not read table of contents of %s", container.name, exc_info=True)
        return []


def _toc_titles(entries: List[TocEntry], titles: Dict[str, str]) -> Dict[str, str]:
    for entry in entries:
        path = strip_fragment(entry.href)
        if path and entry.title and path not in titles:
            titles[path] = entry.title
        _toc_titles(entry.children, titles)
    return titles


def list_chapters(container: EpubContainer) -> List[ChapterEntry]:
    """
    Documents du spine, dans l'ordre de lecture, avec un titre.

    Le titre vient de la première entrée de la table des matières qui
    pointe sur le document, sinon du premier h1/h2/title, sinon du nom
    du fichier.
    """
    titles = _toc_titles(extract_toc(container), {})

    chapters = []
    for index, ref in enumerate(container.spine_references()):
        title = titles.get(ref.path)
        if not title:
            try:
                title = extract_heading(container.read_bytes(ref.path))
            except Exception:
                logger.debug("No heading for %s", ref.path, exc_info=True)
        chapters.append(
            ChapterEntry(
                index=index,
                href=ref.path,
                title=title or os.path.basename(ref.path),
                linear=ref.linear,
            )
        )

    return chapters


def toc_chapter_refs(container: EpubContainer) -> List[Tuple[str, str]]:
    """
    Chapitres d'un roman tels que déclarés par la table des matières.

    Une paire (titre, chemin) par entrée de premier niveau, dans l'ordre.
    Les entrées sans titre, les titres déjà vus et les entrées qui ne
    pointent sur aucun document du conteneur sont ignorés.

    Args:
        container: Conteneur EPUB ouvert

    Returns:
        Liste de (titre, chemin de l'entrée sans fragment)
    """
    refs = []
    seen = set()
    for entry in extract_toc(container):
        if not entry.title or entry.title in seen:
            continue
        seen.add(entry.title)
        path = strip_fragment(entry.href)
        if not path or not container.has_entry(path):
            logger.debug("TOC entry %r points to no entry (%s)", entry.title, entry.href)
            continue
        refs.append((entry.title, path))
    return refs
