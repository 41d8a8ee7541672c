"""
Module EPUB - Lecture et pagination des fichiers EPUB.

Ce module fournit l'ouverture des conteneurs, l'extraction des
métadonnées, la pagination et la navigation.
"""

from .container import EpubContainer, open_container
from .cover_finder import find_cover_data
from .metadata import (
    detect_language,
    extract_metadata,
    fill_metadata,
    format_authors,
    project_onto_chapter,
    project_onto_manga,
)
from .paginator import paginate
from .toc import extract_toc, list_chapters, toc_chapter_refs

__all__ = [
    "EpubContainer",
    "detect_language",
    "extract_metadata",
    "extract_toc",
    "fill_metadata",
    "find_cover_data",
    "format_authors",
    "list_chapters",
    "open_container",
    "paginate",
    "project_onto_chapter",
    "project_onto_manga",
    "toc_chapter_refs",
]
