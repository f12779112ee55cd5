"""
Tests for the command line interface.
"""

import sys

import pytest
from loguru import logger

from stoidoc.__main__ import build_parser, main
from stoidoc.core.converter import idoc_output_path, label_data_output_path


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def spreadsheet(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("LABEL\tMATERIAL\tTEMPLATE\r\nLBL001\tMAT1\tTPL1\r\n", encoding="utf-8")
    return path


class TestArguments:
    """Argument parsing."""

    def test_defaults(self):
        args = build_parser().parse_args(["labels.txt"])
        assert args.input == "labels.txt"
        assert not args.alt_graphics
        assert not args.label_data
        assert not args.non_standard
        assert args.label_data_format == "txt"

    def test_flags(self):
        args = build_parser().parse_args(["labels.txt", "-J", "-L", "-n"])
        assert args.alt_graphics and args.label_data and args.non_standard

    def test_quiet_and_verbose_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["labels.txt", "--quiet", "--verbose"])


class TestMain:
    """Exit status and files written."""

    def test_success(self, spreadsheet, capsys):
        assert main([str(spreadsheet), "--quiet"]) == 0
        assert idoc_output_path(spreadsheet).exists()
        assert "Time elapsed in stoidoc" in capsys.readouterr().out

    def test_label_data_flag(self, spreadsheet, capsys):
        assert main([str(spreadsheet), "-L", "--quiet"]) == 0
        assert label_data_output_path(spreadsheet).exists()
        assert '"Label Data" output file option selected' in capsys.readouterr().out

    def test_output_option(self, spreadsheet, tmp_path):
        target = tmp_path / "custom.txt"
        assert main([str(spreadsheet), "--output", str(target), "--quiet"]) == 0
        assert target.exists()
        assert not idoc_output_path(spreadsheet).exists()

    def test_control_number(self, spreadsheet):
        assert main([str(spreadsheet), "--control-number", "7654321", "--quiet"]) == 0
        document = idoc_output_path(spreadsheet).read_text(encoding="utf-8")
        assert "5000000000007654321" in document

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.txt"), "--quiet"]) == 1

    def test_content_error(self, tmp_path, capsys):
        path = tmp_path / "bad.txt"
        path.write_text("LABEL\tTEMPLATE\nXYZ1\tT\n", encoding="utf-8")

        assert main([str(path), "--quiet"]) == 1
        assert not idoc_output_path(path).exists()
        assert "Content error in text-delimited spreadsheet, line 1. Aborting." in capsys.readouterr().out

    def test_bad_lookup_table(self, spreadsheet, tmp_path):
        lookup = tmp_path / "lookup.json"
        lookup.write_text('{"data": [{"term": "b", "value": "1"}, {"term": "a", "value": "2"}]}',
                          encoding="utf-8")
        assert main([str(spreadsheet), "--lookup", str(lookup), "--quiet"]) == 1
        assert not idoc_output_path(spreadsheet).exists()

    def test_invalid_control_number(self, spreadsheet, capsys):
        assert main([str(spreadsheet), "--control-number", "123", "--quiet"]) == 1
        assert not idoc_output_path(spreadsheet).exists()
        assert "Aborting." in capsys.readouterr().out

    def test_directory_input(self, tmp_path, capsys):
        assert main([str(tmp_path), "--quiet"]) == 1
        assert "Aborting." in capsys.readouterr().out

    def test_unwritable_output(self, spreadsheet, tmp_path):
        target = tmp_path / "missing" / "idoc.txt"
        assert main([str(spreadsheet), "--output", str(target), "--quiet"]) == 1

    def test_malformed_lookup_json(self, spreadsheet, tmp_path):
        lookup = tmp_path / "lookup.json"
        lookup.write_text('{"data": [{"value": "1"}]', encoding="utf-8")
        assert main([str(spreadsheet), "--lookup", str(lookup), "--quiet"]) == 1
        assert not idoc_output_path(spreadsheet).exists()
