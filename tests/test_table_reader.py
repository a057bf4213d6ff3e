import io

import pandas as pd
import pytest

from core.topsis import evaluate
from services.table_reader import TableReadError, read_table

CSV = b"Name,Cost,Quality\nA,250,16\nB,200,16\nC,300,32\n"


class TestReadCsv:
    def test_rows_keep_column_order(self):
        rows = read_table(io.BytesIO(CSV), "phones.csv")
        assert len(rows) == 3
        assert list(rows[0].keys()) == ["Name", "Cost", "Quality"]
        assert rows[0]["Name"] == "A"

    def test_feeds_evaluator(self):
        rows = read_table(io.BytesIO(CSV), "phones.csv")
        ranked = evaluate(rows, "1,1", "-,+")
        assert [r.fields["Name"] for r in ranked] == ["C", "B", "A"]

    def test_blank_cells_become_empty_strings(self):
        rows = read_table(io.BytesIO(b"Name,Cost\nA,\nB,3\n"), "t.csv")
        assert rows[0]["Cost"] == ""

    def test_header_only_is_empty(self):
        assert read_table(io.BytesIO(b"Name,Cost\n"), "t.csv") == []

    def test_zero_byte_file_is_empty(self):
        assert read_table(io.BytesIO(b""), "t.csv") == []

    def test_reads_path(self, tmp_path):
        path = tmp_path / "phones.csv"
        path.write_bytes(CSV)
        assert len(read_table(path)) == 3

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_table(tmp_path / "nope.csv")


class TestReadExcel:
    def test_first_sheet(self, tmp_path):
        path = tmp_path / "phones.xlsx"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame({"Name": ["A", "B"], "Cost": [250, 200]}).to_excel(writer, sheet_name="first", index=False)
            pd.DataFrame({"Other": [1]}).to_excel(writer, sheet_name="second", index=False)

        rows = read_table(path)
        assert [r["Name"] for r in rows] == ["A", "B"]
        assert rows[1]["Cost"] == 200

    def test_corrupt_workbook(self):
        with pytest.raises(TableReadError):
            read_table(io.BytesIO(b"not a zip"), "broken.xlsx")


class TestUnsupported:
    def test_extension(self):
        with pytest.raises(TableReadError, match="Unsupported"):
            read_table(io.BytesIO(CSV), "phones.txt")

    def test_is_value_error(self):
        assert issubclass(TableReadError, ValueError)
