"""
Tests pour le module core.epub.container.
"""

import io

import pytest
from conftest import xhtml

from epub_pager.core.epub.container import open_container
from epub_pager.core.errors import EntryNotFoundError, MalformedContainerError


class TestOpenContainer:
    """Tests pour open_container."""

    def test_open_nonexistent_file(self):
        """Test qu'un fichier inexistant lève MalformedContainerError."""
        with pytest.raises(MalformedContainerError):
            open_container("/fake/path/nonexistent.epub")

    def test_open_invalid_file(self, tmp_path):
        """Test qu'un fichier qui n'est pas une archive est refusé."""
        invalid_file = tmp_path / "invalid.epub"
        invalid_file.write_text("This is not an EPUB")

        with pytest.raises(MalformedContainerError):
            open_container(str(invalid_file))

    def test_open_zip_without_container_xml(self, tmp_path):
        """Test qu'un zip sans META-INF/container.xml est refusé."""
        import zipfile

        path = tmp_path / "nocontainer.epub"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("mimetype", "application/epub+zip")

        with pytest.raises(MalformedContainerError):
            open_container(path)

    def test_open_from_bytes_and_stream(self, text_epub):
        """Test ouverture depuis des bytes et depuis un flux binaire."""
        data = text_epub.read_bytes()

        with open_container(data) as from_bytes:
            assert from_bytes.spine() == ["ch1.xhtml", "ch2.xhtml"]

        with open_container(io.BytesIO(data)) as from_stream:
            assert from_stream.spine() == ["ch1.xhtml", "ch2.xhtml"]

    def test_invalid_bytes(self):
        with pytest.raises(MalformedContainerError):
            open_container(b"not a zip at all")


class TestEpubContainer:
    """Tests pour EpubContainer."""

    def test_entries_in_manifest_order(self, image_epub):
        with open_container(image_epub) as container:
            entries = container.entries()

        assert [e.path for e in entries] == ["page.xhtml", "p2.png", "p1.jpg", "p3.gif"]
        assert entries[1].media_type == "image/png"
        assert entries[1].size == len(b"PNG-2")

    def test_spine_order(self, make_epub):
        path = make_epub(
            documents=[("a.xhtml", xhtml("<p>A</p>")), ("b.xhtml", xhtml("<p>B</p>"))],
            spine=["b.xhtml", "a.xhtml"],
        )
        with open_container(path) as container:
            assert container.spine() == ["b.xhtml", "a.xhtml"]

    def test_read_entry(self, image_epub):
        with open_container(image_epub) as container:
            assert container.read_entry("p1.jpg").read() == b"JPG-1"
            # Chaque appel retourne un nouveau flux
            assert container.read_entry("p1.jpg").read() == b"JPG-1"
            assert container.has_entry("p3.gif")
            assert container.media_type("p3.gif") == "image/gif"

    def test_read_missing_entry(self, image_epub):
        with open_container(image_epub) as container:
            with pytest.raises(EntryNotFoundError) as excinfo:
                container.read_entry("missing.png")

        assert excinfo.value.path == "missing.png"

    def test_close_is_idempotent(self, text_epub):
        container = open_container(text_epub)
        container.close()
        container.close()

        assert container.closed
        with pytest.raises(ValueError):
            container.entries()
