from click.testing import CliRunner

from county_tools.scraper_maintenance import main
from county_tools.scrapers.official.MO.mo_county import MissouriCounty

PAGE = """
<table>
  <tr><td>Boone</td><td>5</td><td>1</td></tr>
</table>
"""


def _fake_fetch(self):
    return {"page": PAGE, "testing": {"features": []}}


def test_list_variants_marks_active():
    result = CliRunner().invoke(
        main, ["list-variants", "MissouriCounty", "--date", "2020-03-01 18:00"]
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "  earliest",
        "* 2020-02-22",
        "  2020-03-30",
    ]


def test_run_and_rerun_scraper(monkeypatch, datapath):
    monkeypatch.setattr(MissouriCounty, "fetch", _fake_fetch)
    runner = CliRunner()

    result = runner.invoke(
        main, ["run-scraper", "MissouriCounty", "--date", "2020-02-01 18:00"]
    )
    assert result.exit_code == 0, result.output
    assert "Boone County" in result.output
    assert (datapath / "raw" / "MissouriCounty" / "2020-02-01_18.pickle").exists()

    clean = datapath / "clean" / "MissouriCounty" / "2020-02-01_18.json"
    clean.unlink()
    result = runner.invoke(main, ["rerun-scraper", "MissouriCounty", "--yes"])
    assert result.exit_code == 0, result.output
    assert clean.exists()


def test_rerun_scraper_reports_failures(monkeypatch):
    monkeypatch.setattr(MissouriCounty, "fetch", _fake_fetch)
    runner = CliRunner()
    runner.invoke(main, ["run-scraper", "MissouriCounty", "-q", "-d", "2020-02-01 18:00"])

    def broken(self, data):
        raise ValueError("bad data")

    monkeypatch.setattr(MissouriCounty, "normalize", broken)

    result = runner.invoke(main, ["rerun-scraper", "MissouriCounty", "--yes"])
    assert result.exit_code != 0
    assert isinstance(result.exception, ValueError)

    result = runner.invoke(
        main, ["rerun-scraper", "MissouriCounty", "--yes", "--continue-on-fail"]
    )
    assert result.exit_code == 0
