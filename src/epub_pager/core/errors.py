"""
Hiérarchie des erreurs levées par EPUB Pager.

- MalformedContainerError : archive illisible (fatal à l'ouverture)
- EntryNotFoundError : entrée absente de l'archive (récupérable)
- LoadError : échec de pagination ou de chargement d'une page
- RecycledResourceError : utilisation d'un loader déjà recyclé
"""

from typing import Optional


class EpubPagerError(RuntimeError):
    """Erreur de base du projet."""


class MalformedContainerError(EpubPagerError):
    """L'archive n'est pas un EPUB valide (zip, container.xml ou OPF)."""


class EntryNotFoundError(EpubPagerError):
    """Aucune entrée ne correspond au chemin demandé."""

    def __init__(self, path: str):
        super().__init__(f"Entry not found in container: {path}")
        self.path = path


class LoadError(EpubPagerError):
    """Échec lors de la pagination ou du chargement d'une page."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class RecycledResourceError(EpubPagerError):
    """Le loader a déjà été recyclé : erreur de logique de l'appelant."""
