from cowork.common.errors import NetworkError
from cowork.processing import scan

CSV_TEXT = (
    "name,address,city,state,country,place_id,row_number\n"
    "Hub,1 Main St,Austin,TX,United States,abc,2\n"
    "Hub Annex,1 Main St,Austin,TX,United States,abc,3\n"
    "Loft,9 Rue X,Lyon,,France,xyz,4\n"
)


def _config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("logging:\n  level: WARNING\n", encoding="utf-8")
    return str(path)


def test_scan_reports_groups_and_exports(tmp_path, capsys):
    source = tmp_path / "spaces.csv"
    source.write_text(CSV_TEXT, encoding="utf-8")
    export = tmp_path / "out.csv"

    code = scan.main(
        ["--config", _config(tmp_path), "--source", "csv", "--csv", str(source), "--method", "place_id", "--export", str(export)]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "3 spaces in 2 cities across 2 countries" in out
    assert "Found 1 duplicate group by place_id" in out
    assert export.read_text(encoding="utf-8").splitlines()[0] == "name,address,city,state,country,place_id,row_number"


def test_scan_remove_deletes_keep_first_rows_then_rescans(tmp_path, monkeypatch, make_listing, capsys):
    source = tmp_path / "spaces.csv"
    source.write_text(CSV_TEXT, encoding="utf-8")
    deleted = []

    class FakeClient:
        def delete_rows(self, rows):
            deleted.extend(rows)
            return {}

        def fetch_spaces(self):
            return [make_listing(place_id="abc", row_number=2)]

    monkeypatch.setattr(scan.WorkflowClient, "from_config", classmethod(lambda cls, config: FakeClient()))

    code = scan.main(["--config", _config(tmp_path), "--source", "csv", "--csv", str(source), "--remove"])

    out = capsys.readouterr().out
    assert code == 0
    assert deleted == [3]
    assert "Found 0 duplicate groups by place_id" in out


def test_scan_reports_network_failures(tmp_path, monkeypatch, capsys):
    class BrokenClient:
        def fetch_spaces(self):
            raise NetworkError("Could not reach backend")

    monkeypatch.setattr(scan.WorkflowClient, "from_config", classmethod(lambda cls, config: BrokenClient()))

    code = scan.main(["--config", _config(tmp_path), "--source", "api"])

    assert code == 1
    assert "Could not reach backend" in capsys.readouterr().err
