"""
Utilitaires pour extraire le texte visible des documents (X)HTML.
"""

import re
import warnings
from typing import Optional, Union

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from ..config import BLOCK_TAGS, HEAD_TAGS, HEADING_TAGS, IGNORED_TAGS

# Les documents EPUB sont du XHTML, lu ici avec le parseur HTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

Markup = Union[str, bytes]


def normalize_whitespace(text: str) -> str:
    """Remplace les suites d'espaces par un espace simple."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def _parse(markup: Markup) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def html_to_text(markup: Optional[Markup]) -> str:
    """
    Extrait le texte visible du corps d'un document.

    Les balises sont retirées, script/style ignorés, et les éléments de bloc
    séparés par un espace avant normalisation des blancs.

    Args:
        markup: Document HTML/XHTML (str ou bytes, l'encodage est détecté)

    Returns:
        Texte brut sur une seule ligne, "" si le document est vide
    """
    if not markup:
        return ""

    soup = _parse(markup)
    root = soup.body
    if root is None:
        # html.parser n'ajoute pas de <body> : l'en-tête ne fait pas partie du texte
        root = soup
        for tag in root.find_all(HEAD_TAGS):
            tag.decompose()

    for tag in root.find_all(IGNORED_TAGS):
        tag.decompose()

    for tag in root.find_all(BLOCK_TAGS):
        tag.insert_before(" ")
        tag.insert_after(" ")

    return normalize_whitespace(root.get_text())


def extract_heading(markup: Optional[Markup]) -> Optional[str]:
    """Premier titre trouvé (h1, h2, puis title), ou None."""
    if not markup:
        return None

    soup = _parse(markup)
    for name in HEADING_TAGS:
        element = soup.find(name)
        if element:
            heading = normalize_whitespace(element.get_text(" "))
            if heading:
                return heading
    return None
