"""
Loaders de pages pour le lecteur.

Un loader calcule les pages d'un chapitre à la demande, matérialise le flux
d'une page, et libère ses ressources quand plus aucun consommateur ne
l'affiche (compteur de références protégé par un verrou).
"""

import io
import logging
import threading
from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, List, Optional

from ..core.epub.container import EpubContainer, EpubSource, open_container
from ..core.epub.paginator import paginate
from ..core.errors import LoadError, RecycledResourceError
from ..core.models import ChapterState, ChapterStateKind, Page

logger = logging.getLogger(__name__)


class PageLoader(ABC):
    """
    Base des loaders : machine à états WAITING -> LOADING -> LOADED | ERROR.

    get_pages() et load_page() peuvent bloquer (décompression, extraction
    du texte) et doivent être appelés hors du thread d'interface.
    ref()/unref() peuvent être appelés depuis n'importe quel thread.
    """

    is_local = False

    def __init__(self):
        self._lock = threading.RLock()
        # Sérialise les paginations concurrentes d'un même loader
        self._load_lock = threading.Lock()
        self._state = ChapterState.waiting()
        self._references = 0
        self._recycled = False
        self._loading = False

    # --- État ---

    @property
    def state(self) -> ChapterState:
        with self._lock:
            return self._state

    @property
    def is_recycled(self) -> bool:
        with self._lock:
            return self._recycled

    @property
    def references(self) -> int:
        with self._lock:
            return self._references

    def _check_recycled(self) -> None:
        if self._recycled:
            raise RecycledResourceError(f"{self!r} has been recycled")

    # --- Pages ---

    @abstractmethod
    def _load_pages(self) -> List[Page]:
        """Calcule la liste des pages."""

    @abstractmethod
    def _open_page(self, page: Page) -> BinaryIO:
        """Ouvre le flux d'une page. Appelé sous le verrou du loader."""

    @abstractmethod
    def _release(self) -> None:
        """Libère les ressources. Appelé une seule fois, sous le verrou."""

    def get_pages(self) -> List[Page]:
        """
        Retourne les pages du chapitre, en les calculant au premier appel.

        Raises:
            LoadError: pagination impossible (archive illisible, entrée absente...)
            RecycledResourceError: le loader a été recyclé
        """
        with self._load_lock:
            with self._lock:
                self._check_recycled()
                if self._state.kind is ChapterStateKind.LOADED:
                    return list(self._state.pages)
                if self._state.kind is ChapterStateKind.ERROR:
                    # Pas de nouvel essai : les fichiers locaux ne changent pas
                    raise self._state.error
                self._state = ChapterState.loading()
                self._loading = True

            try:
                pages = self._load_pages()
            except Exception as e:
                error = e if isinstance(e, LoadError) else LoadError(f"Could not load pages: {e}", cause=e)
                logger.exception("Page loading failed for %r", self)
                self._finish_loading(ChapterState.failed(error))
                if error is e:
                    raise
                raise error from e

            self._finish_loading(ChapterState.loaded(pages))
            return pages

    def _finish_loading(self, new_state: ChapterState) -> None:
        with self._lock:
            self._loading = False
            if self._recycled:
                # recycle() pendant le calcul : la libération a été différée
                self._release()
            else:
                self._state = new_state

    def load_page(self, page: Page) -> BinaryIO:
        """
        Matérialise le flux d'une page.

        Raises:
            RecycledResourceError: le loader a été recyclé
            LoadError: lecture de la page impossible
        """
        with self._lock:
            self._check_recycled()
            try:
                return self._open_page(page)
            except Exception as e:
                logger.warning("Could not load page %d of %r: %s", page.index, self, e)
                raise LoadError(f"Could not load page {page.index}: {e}", cause=e) from e

    # --- Références ---

    def ref(self) -> int:
        """Un consommateur commence à afficher le chapitre."""
        with self._lock:
            self._check_recycled()
            self._references += 1
            return self._references

    def unref(self) -> int:
        """
        Un consommateur cesse d'afficher le chapitre.

        Le passage à zéro recycle le loader. Un unref() sans ref()
        correspondant est ignoré (le compteur reste à zéro).
        """
        with self._lock:
            if self._references == 0:
                logger.warning("unref() on %r without matching ref(), ignored", self)
                return 0
            self._references -= 1
            if self._references == 0:
                self.recycle()
            return self._references

    def recycle(self) -> None:
        """Libère les ressources et repasse en WAITING. Idempotent."""
        with self._lock:
            if self._recycled:
                return
            self._recycled = True
            self._state = ChapterState.waiting()
            if not self._loading:
                self._release()
            logger.debug("Recycled %r", self)


class EpubPageLoader(PageLoader):
    """
    Loader d'un chapitre stocké dans un fichier .epub.

    L'archive n'est ouverte qu'au premier get_pages(). Les octets des images
    déjà lues sont gardés en cache jusqu'au recyclage.
    """

    is_local = True

    def __init__(self, source: EpubSource, spine_href: Optional[str] = None):
        super().__init__()
        self._source = source
        self.spine_href = spine_href
        self._container: Optional[EpubContainer] = None
        self._resource_cache: Dict[str, bytes] = {}

    def __repr__(self) -> str:
        name = self._source if isinstance(self._source, str) else type(self._source).__name__
        if self.spine_href:
            return f"<EpubPageLoader {name}#{self.spine_href}>"
        return f"<EpubPageLoader {name}>"

    def _get_container(self) -> EpubContainer:
        if self._container is None:
            self._container = open_container(self._source)
        return self._container

    def _load_pages(self) -> List[Page]:
        return paginate(self._get_container(), self.spine_href)

    def _open_page(self, page: Page) -> BinaryIO:
        if not page.is_image:
            return page.open_stream()

        data = self._resource_cache.get(page.path)
        if data is None:
            with page.open_stream() as stream:
                data = stream.read()
            self._resource_cache[page.path] = data
        return io.BytesIO(data)

    def _release(self) -> None:
        if self._container is not None:
            self._container.close()
            self._container = None
        self._resource_cache.clear()
