import io
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, BinaryIO, Callable, List

if TYPE_CHECKING:
    from .custom_info import CustomInfoStore


# --- Conteneur ---


@dataclass(frozen=True)
class EntryMetadata:
    """Entrée déclarée dans le manifeste d'un EPUB."""

    path: str
    media_type: str | None = None
    size: int | None = None


@dataclass(frozen=True)
class SpineReference:
    """Référence du spine, dans l'ordre de lecture déclaré."""

    path: str
    linear: bool = True


# --- Métadonnées ---


@dataclass(frozen=True)
class Author:
    """Créateur déclaré, découpé en prénom / nom sur le dernier espace."""

    first: str = ""
    last: str = ""

    @classmethod
    def parse(cls, value: str | None) -> "Author":
        value = (value or "").strip()
        first, sep, last = value.rpartition(" ")
        if not sep:
            return cls(first="", last=value)
        return cls(first=first, last=last)

    @property
    def full_name(self) -> str:
        return self.first + " " + self.last


@dataclass
class DocumentMetadata:
    """Métadonnées déclarées par le conteneur (section metadata de l'OPF)."""

    title: str | None = None
    authors: List[Author] = field(default_factory=list)
    description: str | None = None
    publisher: str | None = None
    date: str | None = None

    language: str | None = None
    identifier: str | None = None
    subjects: List[str] = field(default_factory=list)
    contributors: List[Author] = field(default_factory=list)
    rights: str | None = None

    @property
    def isbn(self) -> str | None:
        """ISBN canonique si l'identifiant déclaré en est un."""
        from isbnlib import get_canonical_isbn, get_isbnlike

        if not self.identifier:
            return None
        for isbnlike in get_isbnlike(self.identifier):
            isbn = get_canonical_isbn(isbnlike)
            if isbn:
                return isbn
        return None


# --- Enregistrements manga / chapitre ---


@dataclass
class MangaRecord:
    """Modèle d'un manga (ou roman) de la bibliothèque locale."""

    url: str
    title: str = ""
    id: int | None = None
    author: str | None = None
    description: str | None = None
    initialized: bool = False

    def display_title(self, store: "CustomInfoStore | None" = None) -> str:
        custom = store.get(self.id) if store is not None else None
        if custom is not None and custom.title:
            return custom.title
        return self.title

    def display_author(self, store: "CustomInfoStore | None" = None) -> str | None:
        custom = store.get(self.id) if store is not None else None
        if custom is not None and custom.author:
            return custom.author
        return self.author

    def display_description(self, store: "CustomInfoStore | None" = None) -> str | None:
        custom = store.get(self.id) if store is not None else None
        if custom is not None and custom.description:
            return custom.description
        return self.description


@dataclass
class ChapterRecord:
    """Modèle d'un chapitre. date_upload est en millisecondes epoch (0 si inconnue)."""

    url: str
    name: str = ""
    scanlator: str | None = None
    date_upload: int = 0
    chapter_number: float = -1.0


@dataclass
class CustomMangaInfo:
    """Surcharges saisies par l'utilisateur pour un manga."""

    manga_id: int
    title: str | None = None
    author: str | None = None
    description: str | None = None


# --- Pages ---


class PageKind(Enum):
    IMAGE = "image"
    TEXT = "text"


@dataclass(frozen=True)
class Page:
    """
    Unité de lecture produite par la pagination.

    Une page image garde un accesseur paresseux vers son entrée : l'archive
    n'est lue qu'à l'appel de open_stream(), qui peut être répété.
    """

    index: int
    kind: PageKind
    path: str | None = None
    text: str | None = None
    stream: Callable[[], BinaryIO] | None = field(default=None, compare=False, repr=False)

    @classmethod
    def image(cls, index: int, path: str, stream: Callable[[], BinaryIO]) -> "Page":
        return cls(index=index, kind=PageKind.IMAGE, path=path, stream=stream)

    @classmethod
    def text_page(cls, text: str, index: int = 0) -> "Page":
        return cls(index=index, kind=PageKind.TEXT, text=text)

    @property
    def is_image(self) -> bool:
        return self.kind is PageKind.IMAGE

    def open_stream(self) -> BinaryIO:
        if self.stream is not None:
            return self.stream()
        return io.BytesIO((self.text or "").encode("utf-8"))


# --- État d'un chapitre ---


class ChapterStateKind(Enum):
    WAITING = "waiting"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class ChapterState:
    """Valeur d'état (variante étiquetée) : pages si LOADED, error si ERROR."""

    kind: ChapterStateKind
    pages: List[Page] | None = None
    error: BaseException | None = None

    @classmethod
    def waiting(cls) -> "ChapterState":
        return cls(ChapterStateKind.WAITING)

    @classmethod
    def loading(cls) -> "ChapterState":
        return cls(ChapterStateKind.LOADING)

    @classmethod
    def loaded(cls, pages: List[Page]) -> "ChapterState":
        return cls(ChapterStateKind.LOADED, pages=list(pages))

    @classmethod
    def failed(cls, error: BaseException) -> "ChapterState":
        return cls(ChapterStateKind.ERROR, error=error)


# --- Table des matières ---


@dataclass
class TocEntry:
    title: str
    href: str
    level: int = 0
    children: List["TocEntry"] = field(default_factory=list)


@dataclass(frozen=True)
class ChapterEntry:
    """Document du spine, sélectionnable comme chapitre unique."""

    index: int
    href: str
    title: str
    linear: bool = True
