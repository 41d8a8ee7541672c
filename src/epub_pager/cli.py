"""
Logique pour le mode ligne de commande.

Utilise LibraryService pour réutiliser la logique de lecture.
"""

import logging
import os
from datetime import datetime, timezone
from typing import List

from .core.epub import extract_toc, open_container, paginate
from .core.file_utils import is_supported_file
from .core.library_service import LibraryService, LocalEntry
from .core.models import TocEntry

logger = logging.getLogger(__name__)


def cli_process_path(path: str, service: LibraryService | None = None) -> List[LocalEntry]:
    """
    Lit un fichier EPUB ou un dossier entier en mode CLI.

    Args:
        path: Fichier .epub ou dossier contenant des EPUB
        service: Service à utiliser (un nouveau par défaut)

    Returns:
        Liste des entrées lues
    """
    logger.info("CLI mode - processing %s", path)
    service = service or LibraryService()

    if os.path.isdir(path):
        entries = service.scan_folder(path)
    elif is_supported_file(path):
        entry = service.load_entry(path)
        entries = [entry] if entry else []
    else:
        logger.warning("Not an EPUB file: %s", path)
        entries = []

    logger.info("CLI mode - read %d file(s)", len(entries))
    return entries


def count_pages(entry: LocalEntry) -> int:
    """Nombre de pages de lecture du fichier (images ou page texte unique)."""
    with open_container(entry.path) as container:
        return len(paginate(container))


def _format_date(millis: int) -> str:
    if not millis:
        return "-"
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def _print_toc(entries: List[TocEntry]):
    for toc_entry in entries:
        print(f"    {'  ' * toc_entry.level}- {toc_entry.title or 'Untitled'} ({toc_entry.href})")
        _print_toc(toc_entry.children)


def print_library_summary(
    entries: List[LocalEntry],
    service: LibraryService | None = None,
    show_pages: bool = False,
    show_toc: bool = False,
):
    """Affiche un résumé des fichiers lus."""
    service = service or LibraryService()

    print("\n=== Résumé de la lecture ===")
    print(f"Fichiers lus: {len(entries)}")

    for entry in entries:
        print(f"\n{os.path.basename(entry.path)}:")
        print(f"  Titre: {service.display_title(entry)}")
        print(f"  Auteur(s): {service.display_author(entry) or '-'}")
        print(f"  Éditeur: {entry.chapter.scanlator or '-'}")
        print(f"  Date: {_format_date(entry.chapter.date_upload)}")
        print(f"  Chapitres: {len(entry.chapter_records)}")

        if entry.metadata.isbn:
            print(f"  ISBN: {entry.metadata.isbn}")

        if entry.cover_data:
            print("  Couverture: oui")

        if show_pages:
            print(f"  Pages: {count_pages(entry)}")

        if show_toc:
            print("  Table des matières:")
            with open_container(entry.path) as container:
                _print_toc(extract_toc(container))
