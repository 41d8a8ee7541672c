from __future__ import annotations

import logging
import sys

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    """Retire les handlers installés par setup_logging après chaque test."""
    yield
    logger = logging.getLogger("epub_pager")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_import_package():
    import epub_pager  # noqa: F401
    import epub_pager.core.epub  # noqa: F401
    import epub_pager.reader  # noqa: F401


def test_cli_entrypoint(text_epub, tmp_path, monkeypatch):
    from epub_pager.__main__ import cli

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["epub-pager", str(text_epub)])

    code = cli()
    assert isinstance(code, int)
    assert code == 0


def test_cli_entrypoint_usage(tmp_path, monkeypatch):
    from epub_pager.__main__ import cli

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["epub-pager"])

    assert cli() == 1
