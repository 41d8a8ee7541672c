"""
Point d'entrée principal pour EPUB Pager
Configure le logging et lance le mode ligne de commande
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from .config import (
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_ENCODING,
    LOG_FILE_NAME,
    LOG_MAX_BYTES,
    ensure_directories,
)

USAGE = """Usage: python -m epub_pager <path> [--pages] [--toc]
  path: Fichier EPUB ou dossier contenant des fichiers EPUB
  --pages: Affiche le nombre de pages de lecture
  --toc: Affiche la table des matières"""


def setup_logging():
    """Configure le système de logging."""
    ensure_directories()
    logger = logging.getLogger("epub_pager")
    logger.setLevel(logging.DEBUG)

    if logger.handlers:
        return logger

    # Handler pour fichier avec rotation
    logfile = os.path.join(LOG_DIR, LOG_FILE_NAME)
    handler = RotatingFileHandler(
        logfile, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding=LOG_ENCODING
    )
    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(threadName)s] %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Handler pour console
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console)

    return logger


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Lance le mode ligne de commande."""
    logger = logging.getLogger("epub_pager")
    argv = sys.argv[1:] if argv is None else argv

    args = [a for a in argv if not a.startswith("--")]
    if not args:
        print(USAGE)
        return 1

    path = args[0]
    show_pages = "--pages" in argv
    show_toc = "--toc" in argv

    if not os.path.exists(path):
        print(f"Error: {path} does not exist")
        return 1

    try:
        from .cli import cli_process_path, print_library_summary
        from .core.library_service import LibraryService

        service = LibraryService()
        entries = cli_process_path(path, service)
        print_library_summary(entries, service, show_pages=show_pages, show_toc=show_toc)
        return 0
    except Exception as e:
        logger.exception("Error in CLI mode")
        print(f"Error: {e}")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Point d'entrée principal."""
    setup_logging()
    logging.getLogger("epub_pager").info("Starting EPUB Pager CLI mode")
    return run_cli(argv)


if __name__ == "__main__":
    raise SystemExit(main())
