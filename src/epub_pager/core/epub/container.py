"""
Module d'accès au conteneur EPUB.

Responsabilité unique: Ouvrir une archive EPUB et exposer ses entrées
(manifeste, spine, contenu brut) par chemin stable.
"""

import io
import logging
import os
import tempfile
from typing import BinaryIO, List, Optional, Union

from ebooklib import epub
from ebooklib.epub import EpubBook, EpubItem

from ...config import EPUB_READ_OPTIONS, SPOOL_SUFFIX
from ..errors import EntryNotFoundError, MalformedContainerError
from ..models import EntryMetadata, SpineReference

logger = logging.getLogger(__name__)

EpubSource = Union[str, "os.PathLike[str]", bytes, bytearray, BinaryIO]


def strip_fragment(path: str) -> str:
    return path.split("#", 1)[0]


class EpubContainer:
    """
    Archive EPUB ouverte.

    ebooklib charge tout le contenu en mémoire à la lecture : les entrées
    restent lisibles jusqu'à close(), qui libère le livre. Les chemins sont
    les href du manifeste, relatifs au fichier OPF.
    """

    def __init__(self, book: EpubBook, name: str = "<epub>"):
        self._book: Optional[EpubBook] = book
        self.name = name

    # --- Cycle de vie ---

    @property
    def closed(self) -> bool:
        return self._book is None

    @property
    def book(self) -> EpubBook:
        if self._book is None:
            raise ValueError(f"Container {self.name} is closed")
        return self._book

    def close(self) -> None:
        """Libère le livre chargé. Peut être appelé plusieurs fois."""
        if self._book is not None:
            self._book = None
            logger.debug("Closed container %s", self.name)

    def __enter__(self) -> "EpubContainer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<EpubContainer {self.name} ({state})>"

    # --- Manifeste et spine ---

    def _items(self) -> List[EpubItem]:
        return list(self.book.get_items())

    def _find_item(self, path: str) -> Optional[EpubItem]:
        return self.book.get_item_with_href(strip_fragment(path))

    def entries(self) -> List[EntryMetadata]:
        """Entrées du manifeste, dans l'ordre de déclaration."""
        return [
            EntryMetadata(
                path=item.get_name(),
                media_type=item.media_type,
                size=len(item.content) if item.content is not None else None,
            )
            for item in self._items()
        ]

    def spine_references(self) -> List[SpineReference]:
        """Références du spine résolues, dans l'ordre déclaré."""
        refs = []
        for idref, linear in self.book.spine:
            item = self.book.get_item_with_id(idref)
            if item is None:
                logger.debug("Spine idref %s not in manifest of %s", idref, self.name)
                continue
            refs.append(SpineReference(path=item.get_name(), linear=linear != "no"))
        return refs

    def spine(self) -> List[str]:
        """Chemins des entrées du spine, dans l'ordre de lecture."""
        return [ref.path for ref in self.spine_references()]

    # --- Contenu ---

    def has_entry(self, path: str) -> bool:
        return self._find_item(path) is not None

    def media_type(self, path: str) -> Optional[str]:
        item = self._find_item(path)
        if item is None:
            raise EntryNotFoundError(path)
        return item.media_type

    def read_bytes(self, path: str) -> bytes:
        """
        Contenu brut d'une entrée, tel que stocké dans l'archive.

        Raises:
            EntryNotFoundError: si le chemin n'est pas dans le manifeste
        """
        item = self._find_item(path)
        if item is None:
            raise EntryNotFoundError(path)
        # .content plutôt que get_content(), que EpubHtml regénère depuis un gabarit
        return item.content or b""

    def read_entry(self, path: str) -> BinaryIO:
        """Flux binaire sur une entrée. Chaque appel retourne un nouveau flux."""
        return io.BytesIO(self.read_bytes(path))


# --- Ouverture ---


def _spool_to_file(source) -> str:
    """Copie une source binaire en mémoire vers un fichier temporaire pour ebooklib."""
    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        data = source.read()
    with tempfile.NamedTemporaryFile(suffix=SPOOL_SUFFIX, delete=False) as tmp:
        tmp.write(data)
        return tmp.name


def open_container(source: EpubSource) -> EpubContainer:
    """
    Ouvre un EPUB depuis un chemin, des bytes ou un flux binaire.

    Args:
        source: Chemin du fichier, contenu brut ou flux binaire lisible

    Returns:
        EpubContainer prêt à être lu (à fermer par l'appelant)

    Raises:
        MalformedContainerError: archive invalide, container.xml ou OPF absents
    """
    spool_path = None
    if isinstance(source, (str, os.PathLike)):
        epub_path = os.fspath(source)
        name = epub_path
    else:
        spool_path = _spool_to_file(source)
        epub_path = spool_path
        name = getattr(source, "name", None) or "<stream>"

    try:
        book = epub.read_epub(epub_path, options=EPUB_READ_OPTIONS)
    except Exception as e:
        logger.warning("ebooklib failed to read %s: %s", name, e)
        raise MalformedContainerError(f"Could not read EPUB container {name}: {e}") from e
    finally:
        # ebooklib referme l'archive après chargement
        if spool_path is not None:
            try:
                os.remove(spool_path)
            except OSError:
                logger.debug("Could not remove spool file %s", spool_path, exc_info=True)

    logger.debug("Opened container %s", name)
    return EpubContainer(book, name=str(name))
