"""
Module d'extraction des métadonnées EPUB.

Responsabilité unique: Lire les métadonnées déclarées par le conteneur
et les projeter sur les enregistrements manga / chapitre.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

import ebooklib
from ebooklib.epub import EpubBook

from ...config import LANGUAGE_SAMPLE_SIZE
from ..models import Author, ChapterRecord, DocumentMetadata, MangaRecord
from ..text_utils import html_to_text
from .container import EpubContainer

logger = logging.getLogger(__name__)


# --- Extracteurs de métadonnées de base ---


def _get_metadata_values(book: EpubBook, name: str) -> List[Any]:
    """Valeurs déclarées pour un champ Dublin Core, dans l'ordre du document."""
    return [entry[0] if isinstance(entry, tuple) else entry for entry in book.get_metadata("DC", name)]


def _get_first(book: EpubBook, name: str) -> Optional[str]:
    """
    Premier champ Dublin Core non vide.

    Un échec de lecture est journalisé et donne une valeur absente.
    """
    try:
        for value in _get_metadata_values(book, name):
            if value is not None and str(value).strip():
                return str(value).strip()
    except Exception:
        logger.debug("Could not read DC:%s", name, exc_info=True)
    return None


def _get_people(book: EpubBook, name: str) -> List[Author]:
    """Créateurs ou contributeurs ; les entrées vides sont conservées."""
    try:
        return [Author.parse(value) for value in _get_metadata_values(book, name)]
    except Exception:
        logger.debug("Could not read DC:%s", name, exc_info=True)
        return []


def _get_subjects(book: EpubBook) -> List[str]:
    try:
        return [str(s).strip() for s in _get_metadata_values(book, "subject") if s]
    except Exception:
        logger.debug("Could not read DC:subject", exc_info=True)
        return []


# --- Fonction principale d'extraction ---


def extract_metadata(container: EpubContainer) -> DocumentMetadata:
    """
    Extrait les métadonnées déclarées d'un conteneur.

    Chaque champ est lu indépendamment ; un champ absent ou illisible reste
    vide. Aucune valeur n'est déduite du contenu.

    Args:
        container: Conteneur EPUB ouvert

    Returns:
        DocumentMetadata
    """
    book = container.book
    meta = DocumentMetadata(
        title=_get_first(book, "title"),
        authors=_get_people(book, "creator"),
        description=_get_first(book, "description"),
        publisher=_get_first(book, "publisher"),
        date=_get_first(book, "date"),
        language=_get_first(book, "language"),
        identifier=_get_first(book, "identifier"),
        subjects=_get_subjects(book),
        contributors=_get_people(book, "contributor"),
        rights=_get_first(book, "rights"),
    )
    logger.debug("Extracted metadata for %s: title=%r", container.name, meta.title)
    return meta


def format_authors(authors: List[Author]) -> str:
    """
    Chaîne d'auteurs "prénom nom", séparés par ", ".

    Un auteur vide produit un segment vide ; seul le résultat final est
    débarrassé de ses espaces de bord.
    """
    return ", ".join(author.full_name for author in authors).strip()


def parse_date_millis(value: Optional[str]) -> int:
    """
    Convertit une date déclarée (ISO 8601, année ou année-mois) en
    millisecondes epoch UTC. Retourne 0 si la date n'est pas lisible.
    """
    if not value:
        return 0

    text = value.strip()
    parsed = None
    try:
        if re.fullmatch(r"\d{4}", text):
            parsed = datetime(int(text), 1, 1)
        elif re.fullmatch(r"\d{4}-\d{2}", text):
            parsed = datetime.strptime(text, "%Y-%m")
        else:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable date %r", value)
        return 0

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


# --- Projections ---


def project_onto_manga(metadata: DocumentMetadata, manga: MangaRecord) -> MangaRecord:
    """Applique titre, auteurs et description au manga. Idempotent."""
    if metadata.title:
        manga.title = metadata.title
    if metadata.authors:
        manga.author = format_authors(metadata.authors)
    if metadata.description:
        manga.description = metadata.description
    return manga


def project_onto_chapter(
    metadata: DocumentMetadata, chapter: ChapterRecord, rename: bool = True
) -> ChapterRecord:
    """
    Applique titre, éditeur (scanlator) et date au chapitre. Idempotent.

    Avec rename=False le nom du chapitre est conservé (chapitres issus
    de la table des matières).
    """
    if rename and metadata.title:
        chapter.name = metadata.title
    if metadata.publisher:
        chapter.scanlator = metadata.publisher
    if metadata.date:
        chapter.date_upload = parse_date_millis(metadata.date)
    return chapter


def fill_metadata(metadata: DocumentMetadata, manga: MangaRecord, chapter: ChapterRecord) -> None:
    """Remplit le manga et le chapitre depuis les métadonnées du fichier."""
    project_onto_manga(metadata, manga)
    project_onto_chapter(metadata, chapter)


# --- Extracteurs explicites ---


def detect_language(container: EpubContainer) -> Optional[str]:
    """
    Détecte la langue depuis le texte du premier document du spine.

    Fallback explicite, jamais appelé par extract_metadata.
    Analyse les premiers caractères du premier document non vide.

    Returns:
        Code de langue (ex: 'fr', 'en') ou None si échec
    """
    from langdetect import DetectorFactory, LangDetectException, detect

    # langdetect est non déterministe sans graine
    DetectorFactory.seed = 0

    book = container.book
    for path in container.spine():
        item = book.get_item_with_href(path)
        if item is None or item.get_type() != ebooklib.ITEM_DOCUMENT:
            continue
        sample = html_to_text(item.content)[:LANGUAGE_SAMPLE_SIZE]
        if not sample:
            continue
        try:
            detected_lang = detect(sample)
        except LangDetectException:
            logger.info("Language detection failed for %s", container.name, exc_info=True)
            return None
        logger.info("Language detected from text: %s", detected_lang)
        return detected_lang

    return None
