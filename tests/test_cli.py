from unittest.mock import patch

import pandas as pd
import pytest

from services.cli import main

CSV = "Name,Cost,Quality\nA,250,16\nB,200,16\nC,300,32\n"


def _input(tmp_path):
    path = tmp_path / "phones.csv"
    path.write_text(CSV)
    return path


class TestCli:
    def test_writes_ranking(self, tmp_path, capsys):
        out = tmp_path / "result.csv"
        assert main([str(_input(tmp_path)), "1,1", "-,+", str(out)]) == 0

        df = pd.read_csv(out)
        assert df.columns.tolist() == ["Name", "Cost", "Quality", "score", "rank"]
        assert df["Name"].tolist() == ["C", "B", "A"]
        assert df["rank"].tolist() == [1, 2, 3]
        assert "Wrote 3 ranked row(s)" in capsys.readouterr().out

    def test_input_error_exits_1(self, tmp_path, capsys):
        out = tmp_path / "result.csv"
        assert main([str(_input(tmp_path)), "1", "-,+", str(out)]) == 1
        assert "Criteria mismatch" in capsys.readouterr().err
        assert not out.exists()

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "none.csv"), "1", "+", str(tmp_path / "o.csv")]) == 1
        assert "file not found" in capsys.readouterr().err

    def test_emails_when_asked(self, tmp_path):
        out = tmp_path / "result.csv"
        with patch("services.cli.EmailService") as service_cls:
            code = main([str(_input(tmp_path)), "1,1", "-,+", str(out), "--email", "user@example.com"])
        assert code == 0
        recipient, records = service_cls.return_value.send_results.call_args.args
        assert recipient == "user@example.com"
        assert records[0]["Name"] == "C"

    def test_cost_first_impacts_with_options_first(self, tmp_path):
        out = tmp_path / "result.csv"
        code = main(["--log-level", "WARNING", str(_input(tmp_path)), "1,1", "-,+", str(out)])
        assert code == 0
        assert pd.read_csv(out)["Name"].tolist() == ["C", "B", "A"]

    def test_single_cost_impact(self, tmp_path):
        path = tmp_path / "one.csv"
        path.write_text("Name,Cost\nA,2\nB,1\n")
        out = tmp_path / "result.csv"
        assert main([str(path), "1", "-", str(out)]) == 0
        assert pd.read_csv(out)["Name"].tolist() == ["B", "A"]

    def test_negative_looking_weights_reach_the_evaluator(self, tmp_path, capsys):
        out = tmp_path / "result.csv"
        assert main([str(_input(tmp_path)), "-1,1", "-,+", str(out)]) == 1
        assert "Invalid weight" in capsys.readouterr().err

    def test_wrong_argument_count(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(_input(tmp_path)), "1,1", "-,+"])
        assert exc_info.value.code == 2
