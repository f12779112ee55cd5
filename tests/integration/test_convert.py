"""
End-to-end conversions of spreadsheet text to IDoc documents.
"""

import pytest

from stoidoc import ConversionError, ConvertOptions, ErrorCode, convert_file, convert_text
from stoidoc.core.converter import idoc_output_path, label_data_output_path
from stoidoc.core.sequencer import (
    CHARACTERISTIC_SEGMENT,
    LABEL_SEGMENT,
    MATERIAL_SEGMENT,
    TEXT_SEGMENT,
)


def table(*rows):
    return "".join("\t".join(row) + "\r\n" for row in rows)


def data_lines(result):
    """Document lines after the control record."""
    return result.document.splitlines()[1:]


def tags(result):
    return [line[:11] for line in data_lines(result)]


def sequence(line):
    return int(line[49:55]), int(line[55:61])


class TestScenarios:
    """Conversions of small spreadsheets."""

    def test_single_record(self, bundled_lookup, timestamp):
        text = table(("LABEL", "MATERIAL", "TEMPLATE"), ("LBL001", "MAT1", "TPL1"))
        result = convert_text(text, lookup=bundled_lookup, timestamp=timestamp)

        lines = data_lines(result)
        assert result.document.startswith("EDI_DC40  ")
        assert tags(result) == [
            MATERIAL_SEGMENT, LABEL_SEGMENT, CHARACTERISTIC_SEGMENT, CHARACTERISTIC_SEGMENT,
        ]
        assert [sequence(line) for line in lines[:3]] == [(1, 0), (2, 1), (3, 2)]
        assert lines[2][63:].startswith("TEMPLATENUMBER")
        assert len(result.diagnostics) == 0

    def test_shared_material(self, bundled_lookup, timestamp):
        text = table(
            ("LABEL", "MATERIAL", "TEMPLATE"),
            ("LBL001", "MAT1", "TPL1"),
            ("LBL002", "MAT1", "TPL1"),
        )
        result = convert_text(text, lookup=bundled_lookup, timestamp=timestamp)
        assert tags(result).count(MATERIAL_SEGMENT) == 1
        assert tags(result).count(LABEL_SEGMENT) == 2

    def test_invalid_label_aborts(self, bundled_lookup, timestamp):
        text = table(("LABEL", "TEMPLATE"), ("XYZ1", "TPL1"))
        with pytest.raises(ConversionError) as exc_info:
            convert_text(text, lookup=bundled_lookup, timestamp=timestamp)
        assert exc_info.value.code == ErrorCode.INVALID_LABEL

    def test_missing_template_aborts(self, bundled_lookup):
        text = table(("LABEL", "TEMPLATE"), ("LBL1", "T1"), ("LBL2", ""))
        with pytest.raises(ConversionError) as exc_info:
            convert_text(text, lookup=bundled_lookup)
        assert exc_info.value.code == ErrorCode.MISSING_TEMPLATE
        assert exc_info.value.record == 2

    def test_records_sorted_by_label(self, bundled_lookup, timestamp):
        text = table(("LABEL", "TEMPLATE"), ("LBL2", "T"), ("LBL10", "T"), ("LBL1", "T"))
        result = convert_text(text, lookup=bundled_lookup, timestamp=timestamp)
        labels = [line[63:81].strip() for line in data_lines(result) if line.startswith(LABEL_SEGMENT)]
        assert labels == ["LBL1", "LBL10", "LBL2"]
        assert [r.label for r in result.records] == labels

    def test_quoted_free_text(self, bundled_lookup, timestamp):
        text = table(("LABEL", "TEMPLATE", "TDLINE"), ("LBL1", "T", 'A""B##C'))
        result = convert_text(text, lookup=bundled_lookup, timestamp=timestamp)
        text_lines = [line for line in data_lines(result) if line.startswith(TEXT_SEGMENT)]
        assert len(text_lines) == 2
        assert text_lines[0].endswith('A"B##' + " " * 69 + "*")
        assert text_lines[1].endswith("C" + " " * 73 + "/")

    def test_free_text_across_lines(self, bundled_lookup, timestamp):
        text = "LABEL\tTEMPLATE\tTDLINE\nLBL1\tT\tline one##\nline two\nLBL2\tT\t\n"
        result = convert_text(text, lookup=bundled_lookup, timestamp=timestamp)
        assert len(result.records) == 2
        assert result.records[0].tdline == "line one##line two"
        assert tags(result).count(TEXT_SEGMENT) == 2

    def test_sequence_strictly_increasing(self, bundled_lookup, timestamp):
        text = table(
            ("LABEL", "MATERIAL", "TEMPLATE", "TDLINE", "SIZE", "CAUTION", "ECREP", "LOGO1"),
            ("LBL3", "MAT2", "T3", "a##b##c", "Large", "Y", "N", "Box"),
            ("LBL1", "MAT1", "T1", "x", "Small", "F_Y", "Y", ""),
            ("LBL2", "MAT1", "T2", "n/a", "", "", "", "Y"),
        )
        result = convert_text(text, lookup=bundled_lookup, timestamp=timestamp)
        owns = [sequence(line)[0] for line in data_lines(result)]
        assert owns == list(range(1, len(owns) + 1))

        # every characteristic and text line hangs off the label above it
        label_own = None
        for line in data_lines(result):
            own, parent = sequence(line)
            if line.startswith(LABEL_SEGMENT):
                label_own = own
            elif line.startswith((CHARACTERISTIC_SEGMENT, TEXT_SEGMENT)):
                assert parent == label_own

    def test_all_zero_gtin_placeholder(self, bundled_lookup, timestamp):
        text = table(("LABEL", "TEMPLATE", "GTIN"), ("LBL1", "T", "00000000000000"))
        options = ConvertOptions(non_standard_fields=True)
        result = convert_text(text, options, lookup=bundled_lookup, timestamp=timestamp)
        assert len(result.diagnostics) == 0
        assert any(line[63:].startswith("GTIN ") for line in data_lines(result))

    def test_diagnostics_collected(self, bundled_lookup, timestamp):
        text = table(
            ("LABEL", "TEMPLATE", "COLOR", "LEVEL", "BARCODETEXT"),
            ("LBL1", "T", "red", "Pallet", "14026704000018"),
        )
        result = convert_text(text, lookup=bundled_lookup, timestamp=timestamp)
        assert result.diagnostics.codes() == [
            ErrorCode.UNKNOWN_COLUMN,
            ErrorCode.UNRESOLVED_LEVEL,
            ErrorCode.INVALID_CHECK_DIGIT,
        ]
        assert [d.code for d in result.diagnostics.for_record(1)] == [
            ErrorCode.UNRESOLVED_LEVEL,
            ErrorCode.INVALID_CHECK_DIGIT,
        ]

    def test_duplicate_columns_abort(self, bundled_lookup):
        text = table(("LABEL", "TEMPLATE", "LABEL"), ("LBL1", "T", "LBL1"))
        with pytest.raises(ConversionError) as exc_info:
            convert_text(text, lookup=bundled_lookup)
        assert exc_info.value.code == ErrorCode.DUPLICATE_COLUMN

    def test_control_number_option(self, bundled_lookup, timestamp):
        text = table(("LABEL", "TEMPLATE"), ("LBL1", "T"))
        options = ConvertOptions(control_number="1234567")
        result = convert_text(text, options, lookup=bundled_lookup, timestamp=timestamp)
        assert all(line[42:49] == "1234567" for line in data_lines(result))

    def test_default_lookup_loaded(self, timestamp):
        text = table(("LABEL", "TEMPLATE", "LEVEL"), ("LBL1", "T", "Box"))
        result = convert_text(text, timestamp=timestamp)
        assert len(result.diagnostics) == 0


class TestConvertFile:
    """File output."""

    def test_output_paths(self, tmp_path):
        source = tmp_path / "labels.txt"
        assert idoc_output_path(source) == tmp_path / "labels_IDoc (stoidoc).txt"
        assert label_data_output_path(source) == tmp_path / "labels_labeldata.txt"
        assert label_data_output_path(source, "xlsx") == tmp_path / "labels_labeldata.xlsx"

    def test_writes_document(self, tmp_path, timestamp):
        source = tmp_path / "labels.txt"
        source.write_text(table(("LABEL", "TEMPLATE"), ("LBL1", "T")), encoding="utf-8")

        result = convert_file(source, timestamp=timestamp)
        output = idoc_output_path(source)
        assert output.exists()
        assert output.read_text(encoding="utf-8") == result.document
        assert not label_data_output_path(source).exists()

    def test_explicit_output_path(self, tmp_path):
        source = tmp_path / "labels.txt"
        source.write_text(table(("LABEL", "TEMPLATE"), ("LBL1", "T")), encoding="utf-8")
        target = tmp_path / "out" / "idoc.txt"
        target.parent.mkdir()

        convert_file(source, output_path=target)
        assert target.exists()

    def test_no_output_on_fatal_error(self, tmp_path):
        source = tmp_path / "labels.txt"
        source.write_text(table(("LABEL", "TEMPLATE"), ("XYZ1", "T")), encoding="utf-8")

        with pytest.raises(ConversionError):
            convert_file(source)
        assert not idoc_output_path(source).exists()

    def test_unwritable_output(self, tmp_path):
        source = tmp_path / "labels.txt"
        source.write_text(table(("LABEL", "TEMPLATE"), ("LBL1", "T")), encoding="utf-8")

        with pytest.raises(ConversionError) as exc_info:
            convert_file(source, output_path=tmp_path / "missing" / "idoc.txt")
        assert exc_info.value.code == ErrorCode.FILE_ERROR


class TestEncoding:
    """Cell bytes reach the IDoc file unchanged."""

    def characteristic_line(self, output, name):
        for line in output.read_bytes().split(b"\n"):
            if line[63:].startswith(name):
                return line
        raise AssertionError(f"no {name!r} line")

    def test_cp1252_bytes_preserved(self, tmp_path, timestamp):
        source = tmp_path / "labels.txt"
        source.write_bytes(b"LABEL\tTEMPLATE\tTEMPRANGE\r\nLBL1\tT\t2\xb0C\r\n")

        result = convert_file(source, ConvertOptions(graphics_path="G:\\"), timestamp=timestamp)
        assert result.encoding == "cp1252"

        line = self.characteristic_line(idoc_output_path(source), b"TEMPRANGE")
        assert b"2\xb0C" in line
        assert b"\xc2" not in line
        assert len(line) == 63 + 30 + 30 + 255

    def test_utf8_bytes_preserved_without_bom(self, tmp_path, timestamp):
        source = tmp_path / "labels.txt"
        source.write_bytes(b"\xef\xbb\xbfLABEL\tTEMPLATE\tTEMPRANGE\r\nLBL1\tT\t2\xc2\xb0C\r\n")

        convert_file(source, ConvertOptions(graphics_path="G:\\"), timestamp=timestamp)
        output = idoc_output_path(source)
        assert output.read_bytes().startswith(b"EDI_DC40")
        assert b"2\xc2\xb0C" in self.characteristic_line(output, b"TEMPRANGE")

    def test_label_data_uses_source_encoding(self, tmp_path):
        source = tmp_path / "labels.txt"
        source.write_bytes(b"LABEL\tTEMPLATE\tTEMPRANGE\r\nLBL1\tT\t2\xb0C\r\n")

        convert_file(source, ConvertOptions(label_data=True))
        assert b"2\xb0C" in label_data_output_path(source).read_bytes()
