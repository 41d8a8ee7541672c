"""
Configuration globale pour pytest.

Fournit des fixtures réutilisables pour tous les tests, dont une fabrique
d'archives EPUB minimales écrites dans tmp_path.
"""

import zipfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

import pytest

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

NCX_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head/>
  <docTitle><text>Table</text></docTitle>
  <navMap>
{points}
  </navMap>
</ncx>
"""


def xhtml(body: str, title: str = "") -> str:
    """Document XHTML complet autour d'un corps."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml">'
        f"<head><title>{title}</title></head>"
        f"<body>{body}</body></html>"
    )


def _nav_point(index: int, entry) -> str:
    title, href, children = entry if len(entry) == 3 else (*entry, [])
    inner = "".join(_nav_point(index * 10 + i, child) for i, child in enumerate(children, 1))
    return (
        f'<navPoint id="np{index}" playOrder="{index}">'
        f"<navLabel><text>{escape(title)}</text></navLabel>"
        f'<content src="{href}"/>{inner}</navPoint>'
    )


def build_epub(
    path: Path,
    documents: Sequence[Tuple[str, str]] = (),
    images: Sequence[Tuple[str, bytes, str]] = (),
    metadata: Optional[Dict[str, object]] = None,
    toc: Optional[List[tuple]] = None,
    cover_id: Optional[str] = None,
    spine: Optional[List[str]] = None,
) -> Path:
    """
    Écrit un EPUB 2 minimal.

    Args:
        documents: (href, markup) ; dans le spine, dans cet ordre
        images: (href, bytes, media_type) ; déclarées après les documents
        metadata: champs Dublin Core (str ou liste de str)
        toc: entrées NCX (titre, href[, enfants])
        cover_id: id d'image déclaré par <meta name="cover">
        spine: hrefs du spine si différent de documents
    """
    metadata = metadata or {}

    dc_lines = []
    for name, value in metadata.items():
        values = value if isinstance(value, list) else [value]
        for v in values:
            dc_lines.append(f"<dc:{name}>{escape(v)}</dc:{name}>")
    if cover_id:
        dc_lines.append(f'<meta name="cover" content="{cover_id}"/>')

    manifest_lines = []
    ids_by_href = {}
    for i, (href, _) in enumerate(documents):
        ids_by_href[href] = f"doc{i}"
        manifest_lines.append(f'<item id="doc{i}" href="{href}" media-type="application/xhtml+xml"/>')
    for i, (href, _, media_type) in enumerate(images):
        ids_by_href[href] = f"img{i}"
        manifest_lines.append(f'<item id="img{i}" href="{href}" media-type="{media_type}"/>')
    if toc:
        manifest_lines.append('<item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>')

    spine_hrefs = spine if spine is not None else [href for href, _ in documents]
    spine_lines = [f'<itemref idref="{ids_by_href[href]}"/>' for href in spine_hrefs]
    spine_attr = ' toc="ncx"' if toc else ""

    opf = (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="BookId">'
        '<metadata xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:opf="http://www.idpf.org/2007/opf">'
        + "".join(dc_lines)
        + "</metadata><manifest>"
        + "".join(manifest_lines)
        + f"</manifest><spine{spine_attr}>"
        + "".join(spine_lines)
        + "</spine></package>"
    )

    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        zf.writestr("META-INF/container.xml", CONTAINER_XML)
        zf.writestr("OEBPS/content.opf", opf)
        for href, markup in documents:
            zf.writestr(f"OEBPS/{href}", markup)
        for href, data, _ in images:
            zf.writestr(f"OEBPS/{href}", data)
        if toc:
            points = "\n".join(_nav_point(i, entry) for i, entry in enumerate(toc, 1))
            zf.writestr("OEBPS/toc.ncx", NCX_TEMPLATE.format(points=points))

    return path


@pytest.fixture
def make_epub(tmp_path):
    """Fabrique d'EPUB : make_epub(name, **kwargs) -> chemin."""

    def _make(name: str = "book.epub", **kwargs) -> Path:
        return build_epub(tmp_path / name, **kwargs)

    return _make


@pytest.fixture
def text_epub(make_epub) -> Path:
    """EPUB texte à deux chapitres, avec métadonnées et table des matières."""
    return make_epub(
        "novel.epub",
        documents=[
            ("ch1.xhtml", xhtml("<p>Hello</p>", title="One")),
            ("ch2.xhtml", xhtml("<p>World</p>", title="Two")),
        ],
        metadata={
            "title": "Test Novel",
            "creator": ["Jane Doe", "John Roe"],
            "publisher": "Test Publisher",
            "date": "2024-01-15",
            "description": "A test novel.",
            "language": "en",
            "identifier": "urn:isbn:9780306406157",
        },
        toc=[("Chapter One", "ch1.xhtml"), ("Chapter Two", "ch2.xhtml#start")],
    )


@pytest.fixture
def image_epub(make_epub) -> Path:
    """EPUB image (bande dessinée), images déclarées hors ordre alphabétique."""
    return make_epub(
        "comic.epub",
        documents=[("page.xhtml", xhtml('<img src="p2.png"/>'))],
        images=[
            ("p2.png", b"PNG-2", "image/png"),
            ("p1.jpg", b"JPG-1", "image/jpeg"),
            ("p3.gif", b"GIF-3", "image/gif"),
        ],
        metadata={"title": "Test Comic"},
    )


@pytest.fixture
def empty_epub(make_epub) -> Path:
    """EPUB sans spine ni image."""
    return make_epub("empty.epub")


@pytest.fixture
def sample_metadata():
    """Retourne des métadonnées d'exemple pour tests."""
    from epub_pager.core.models import Author, DocumentMetadata

    return DocumentMetadata(
        title="Test Book",
        authors=[Author("Jane", "Doe"), Author("John", "Roe")],
        description="This is a test book summary.",
        publisher="Test Publisher",
        date="2024-01-15",
    )
