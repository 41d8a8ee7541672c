"""
Module lecteur - Chargement des pages d'un chapitre ouvert.
"""

from .chapter import ReaderChapter
from .page_loader import EpubPageLoader, PageLoader

__all__ = [
    "EpubPageLoader",
    "PageLoader",
    "ReaderChapter",
]
