# epub_pager/src/epub_pager/config.py
"""
Configuration et constantes pour EPUB Pager
"""

import os

# ---------- Extensions supportées ----------
SUPPORTED_EXT = (".epub",)

# ---------- Lecture des archives ----------
# ignore_ncx=True : la navigation EPUB3 est préférée, le NCX reste lu en l'absence de nav
EPUB_READ_OPTIONS = {"ignore_ncx": True}
SPOOL_SUFFIX = ".epub"

# ---------- Pagination ----------
IMAGE_MEDIA_PREFIX = "image/"
TEXT_SEPARATOR = "\n\n"
CHAPTER_NOT_FOUND_TEXT = "Could not find chapter content."
# Sépare le fichier du document ciblé dans l'URL d'un chapitre
CHAPTER_URL_SEPARATOR = "::"

# ---------- Extraction de texte ----------
BLOCK_TAGS = (
    "address",
    "article",
    "aside",
    "blockquote",
    "br",
    "dd",
    "div",
    "dl",
    "dt",
    "figcaption",
    "figure",
    "footer",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "header",
    "hr",
    "li",
    "ol",
    "p",
    "pre",
    "section",
    "table",
    "td",
    "th",
    "tr",
    "ul",
)
IGNORED_TAGS = ("script", "style")
HEAD_TAGS = ("head", "title")
HEADING_TAGS = ("h1", "h2", "title")
LANGUAGE_SAMPLE_SIZE = 3000

# ---------- Variables d'environnement ----------
LOG_DIR_ENV_VAR = "EPUB_PAGER_LOG_DIR"

# ---------- Dossiers ----------
LOG_DIR = os.getenv(LOG_DIR_ENV_VAR, "logs")

# ---------- Configuration logging ----------
LOG_FILE_NAME = "epub_pager.log"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB
LOG_BACKUP_COUNT = 5
LOG_ENCODING = "utf-8"


# ---------- Initialisation des dossiers ----------
def ensure_directories():
    """Crée les dossiers nécessaires s'ils n'existent pas."""
    os.makedirs(LOG_DIR, exist_ok=True)
