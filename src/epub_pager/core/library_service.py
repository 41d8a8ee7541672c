"""
Service de bibliothèque locale.

Service réutilisable qui orchestre la lecture des fichiers EPUB locaux:
ouverture, extraction des métadonnées, projection sur les enregistrements
manga / chapitre, et ouverture d'un chapitre pour la lecture.

Ce service est utilisé par le mode CLI et par les lecteurs.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..reader import EpubPageLoader, ReaderChapter
from .custom_info import CustomInfoStore
from .epub import (
    extract_metadata,
    fill_metadata,
    find_cover_data,
    list_chapters,
    open_container,
    project_onto_chapter,
    toc_chapter_refs,
)
from .errors import MalformedContainerError
from .file_utils import (
    chapter_url_for,
    default_title_for,
    find_epubs_in_folder,
    manga_id_for,
    manga_url_for,
    split_chapter_url,
)
from .models import ChapterEntry, ChapterRecord, DocumentMetadata, MangaRecord

logger = logging.getLogger(__name__)


@dataclass
class LocalEntry:
    """Résultat de la lecture d'un fichier EPUB local."""

    path: str
    manga: MangaRecord
    chapter: ChapterRecord
    metadata: DocumentMetadata
    chapters: List[ChapterEntry]
    cover_data: bytes | None = None
    # Chapitres proposés au lecteur (table des matières, sinon le fichier entier)
    chapter_records: List[ChapterRecord] = field(default_factory=list)


class LibraryService:
    """
    Service de bibliothèque locale.

    Fournit les opérations de haut niveau sur les EPUB locaux:
    - Lecture des métadonnées au moment du scan
    - Liste des chapitres d'après la table des matières
    - Ouverture d'un chapitre pour le lecteur

    Le store des informations personnalisées est passé explicitement et
    transmis aux accesseurs d'affichage.
    """

    def __init__(self, custom_info_store: Optional[CustomInfoStore] = None):
        self.custom_info_store = custom_info_store or CustomInfoStore()
        logger.debug("LibraryService initialized")

    def load_entry(self, epub_path: str) -> Optional[LocalEntry]:
        """
        Lit un fichier EPUB et construit son manga et ses chapitres.

        Args:
            epub_path: Chemin vers le fichier EPUB

        Returns:
            LocalEntry, ou None si l'archive est illisible
        """
        logger.info("Reading EPUB: %s", epub_path)
        try:
            with open_container(epub_path) as container:
                metadata = extract_metadata(container)
                cover_data = find_cover_data(container)
                chapters = list_chapters(container)
                toc_refs = toc_chapter_refs(container)
        except MalformedContainerError:
            logger.exception("Skipping malformed EPUB %s", epub_path)
            return None

        manga_url = manga_url_for(epub_path)
        manga = MangaRecord(
            url=manga_url, title=default_title_for(epub_path), id=manga_id_for(epub_path)
        )
        chapter = ChapterRecord(
            url=chapter_url_for(manga_url, epub_path),
            name=default_title_for(epub_path),
            chapter_number=1.0,
        )
        fill_metadata(metadata, manga, chapter)
        manga.initialized = True

        chapter_records = self._toc_chapter_records(epub_path, manga, metadata, toc_refs)
        logger.debug("%d chapter(s) from table of contents in %s", len(chapter_records), epub_path)

        return LocalEntry(
            path=epub_path,
            manga=manga,
            chapter=chapter,
            metadata=metadata,
            chapters=chapters,
            cover_data=cover_data,
            chapter_records=chapter_records or [chapter],
        )

    @staticmethod
    def _toc_chapter_records(
        epub_path: str,
        manga: MangaRecord,
        metadata: DocumentMetadata,
        toc_refs: List[Tuple[str, str]],
    ) -> List[ChapterRecord]:
        records = []
        for index, (title, href) in enumerate(toc_refs):
            record = ChapterRecord(
                url=chapter_url_for(manga.url, epub_path, href),
                name=title,
                chapter_number=float(index + 1),
            )
            project_onto_chapter(metadata, record, rename=False)
            records.append(record)
        return records

    def scan_folder(self, folder: str) -> List[LocalEntry]:
        """Lit tous les EPUB d'un dossier ; les fichiers illisibles sont ignorés."""
        paths = find_epubs_in_folder(folder)
        entries = []
        for path in paths:
            entry = self.load_entry(path)
            if entry is not None:
                entries.append(entry)
        logger.info("Scanned %d/%d epub(s) in %s", len(entries), len(paths), folder)
        return entries

    def open_chapter(
        self,
        epub_path: str,
        spine_href: Optional[str] = None,
        chapter: Optional[ChapterRecord] = None,
    ) -> ReaderChapter:
        """
        Prépare un chapitre pour le lecteur ; l'archive n'est ouverte qu'au chargement.

        Sans spine_href explicite, le document ciblé est lu dans l'URL du
        chapitre ("<manga>/<fichier>::<chemin>").

        Args:
            epub_path: Chemin vers le fichier EPUB
            spine_href: Document du spine à afficher, None pour le livre entier
            chapter: Chapitre à ouvrir (un chapitre couvrant le fichier sinon)
        """
        if chapter is None:
            chapter = ChapterRecord(
                url=chapter_url_for(manga_url_for(epub_path), epub_path),
                name=default_title_for(epub_path),
            )
        elif spine_href is None:
            _, spine_href = split_chapter_url(chapter.url)
        return ReaderChapter(chapter, EpubPageLoader(epub_path, spine_href=spine_href))

    def display_title(self, entry: LocalEntry) -> str:
        return entry.manga.display_title(self.custom_info_store)

    def display_author(self, entry: LocalEntry) -> Optional[str]:
        return entry.manga.display_author(self.custom_info_store)
