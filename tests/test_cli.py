"""
Tests pour le module CLI.
"""

from unittest.mock import MagicMock, patch

from epub_pager.cli import cli_process_path, print_library_summary
from epub_pager.core.library_service import LibraryService
from epub_pager.main import run_cli


class TestCliProcessPath:
    """Tests pour cli_process_path."""

    def test_cli_process_folder(self, tmp_path):
        """Test traitement d'un dossier via le service."""
        mock_service = MagicMock()
        mock_service.scan_folder.return_value = ["entry"]

        result = cli_process_path(str(tmp_path), mock_service)

        assert result == ["entry"]
        mock_service.scan_folder.assert_called_once_with(str(tmp_path))

    def test_cli_process_single_file(self, text_epub):
        """Test traitement d'un seul fichier."""
        result = cli_process_path(str(text_epub))

        assert len(result) == 1
        assert result[0].manga.title == "Test Novel"

    @patch("epub_pager.cli.LibraryService")
    def test_cli_process_unsupported_file(self, mock_service_class, tmp_path):
        """Test qu'un fichier non EPUB est ignoré."""
        other = tmp_path / "notes.txt"
        other.write_text("x")

        assert cli_process_path(str(other)) == []
        mock_service_class.return_value.load_entry.assert_not_called()


class TestPrintLibrarySummary:
    """Tests pour print_library_summary."""

    def test_print_empty_list(self, capsys):
        """Test affichage avec liste vide."""
        print_library_summary([])

        captured = capsys.readouterr()
        assert "Fichiers lus: 0" in captured.out

    def test_print_entry(self, text_epub, capsys):
        """Test affichage d'un fichier avec pages et table des matières."""
        service = LibraryService()
        entry = service.load_entry(str(text_epub))

        print_library_summary([entry], service, show_pages=True, show_toc=True)

        out = capsys.readouterr().out
        assert "novel.epub" in out
        assert "Titre: Test Novel" in out
        assert "Auteur(s): Jane Doe, John Roe" in out
        assert "Date: 2024-01-15" in out
        assert "ISBN: 9780306406157" in out
        assert "Pages: 1" in out
        assert "Chapitres: 2" in out
        assert "Chapter Two (ch2.xhtml#start)" in out


class TestRunCli:
    """Tests pour run_cli."""

    def test_usage_without_arguments(self, capsys):
        assert run_cli([]) == 1
        assert "Usage" in capsys.readouterr().out

    def test_missing_path(self, capsys):
        assert run_cli(["/fake/path/nothing"]) == 1

    def test_folder(self, text_epub, capsys):
        assert run_cli([str(text_epub.parent), "--pages"]) == 0
        assert "Fichiers lus: 1" in capsys.readouterr().out
