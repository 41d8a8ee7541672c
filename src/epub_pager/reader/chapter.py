import logging
import threading
from typing import List, Optional

from ..core.models import ChapterRecord, ChapterState, ChapterStateKind, Page
from .page_loader import PageLoader

logger = logging.getLogger(__name__)


class ReaderChapter:
    """
    Chapitre ouvert dans le lecteur.

    L'état est celui du loader attaché ; une fois le loader recyclé, il est
    détaché et l'état redevient WAITING.
    """

    def __init__(self, chapter: ChapterRecord, page_loader: Optional[PageLoader] = None):
        self.chapter = chapter
        self.page_loader = page_loader
        self.requested_page = 0
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"<ReaderChapter {self.chapter.name!r} {self.state.kind.value}>"

    @property
    def state(self) -> ChapterState:
        loader = self.page_loader
        if loader is None:
            return ChapterState.waiting()
        return loader.state

    @property
    def pages(self) -> Optional[List[Page]]:
        state = self.state
        if state.kind is ChapterStateKind.LOADED:
            return state.pages
        return None

    def load(self) -> List[Page]:
        """Charge les pages via le loader attaché (bloquant)."""
        loader = self.page_loader
        if loader is None:
            raise ValueError(f"No page loader attached to chapter {self.chapter.name!r}")
        return loader.get_pages()

    def ref(self) -> None:
        with self._lock:
            if self.page_loader is None:
                raise ValueError(f"No page loader attached to chapter {self.chapter.name!r}")
            self.page_loader.ref()

    def unref(self) -> None:
        with self._lock:
            loader = self.page_loader
            if loader is None:
                logger.debug("unref() on detached chapter %s, ignored", self.chapter.name)
                return
            loader.unref()
            if loader.is_recycled:
                logger.info("Recycling chapter %s", self.chapter.name)
                self.page_loader = None
