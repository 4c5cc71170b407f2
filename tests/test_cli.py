"""Tests for the click CLI."""

from pathlib import Path
from unittest.mock import patch

import orjson
from click.testing import CliRunner

from pubboard.cli import main
from pubboard.models import Publication, Source


class FakeRegistry:
    async def fetch_publications(self, identifier: str) -> list[Publication]:
        return [Publication(title=f"Work of {identifier}", year="2020", source=Source.SCOPUS)]

    async def __aenter__(self) -> "FakeRegistry":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None


class TestCollectCommand:
    def test_collect(self, tmp_config: Path, tmp_path: Path) -> None:
        runner = CliRunner()
        with patch("pubboard.core.PubBoard._make_registry", return_value=FakeRegistry()):
            result = runner.invoke(main, ["-c", str(tmp_config), "collect"])

        assert result.exit_code == 0, result.output
        assert "Authors collected: 3" in result.output
        document = orjson.loads((tmp_path / "publications.json").read_bytes())
        assert len(document["authors"]) == 3

    def test_missing_roster(self, tmp_config: Path, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["-c", str(tmp_config), "collect", "--roster", str(tmp_path / "none.csv")],
        )
        assert result.exit_code == 1
        assert "Cannot read roster" in result.output

    def test_missing_config(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["-c", str(tmp_path / "nope.yaml"), "collect"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_roster_without_identifier_column(
        self, tmp_config: Path, tmp_path: Path
    ) -> None:
        roster = tmp_path / "renamed.csv"
        roster.write_text("name,ORCID\nJane,111\n")
        runner = CliRunner()
        result = runner.invoke(
            main, ["-c", str(tmp_config), "collect", "--roster", str(roster)]
        )
        assert result.exit_code == 1
        assert "no 'orcid_id' column" in result.output
        assert not (tmp_path / "publications.json").exists()


class TestShowCommand:
    def test_show_all(self, snapshot_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["show", "--dataset", str(snapshot_path)])

        assert result.exit_code == 0, result.output
        assert "Data last updated: 2025-03-01" in result.output
        assert "Neural Engines (2019) -- Ada Lovelace (Math) [Scopus]" in result.output
        assert "Showing 5 of 5 publications." in result.output

    def test_show_filtered(self, snapshot_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["show", "--dataset", str(snapshot_path), "--search", "neural", "--year", "2019"],
        )
        assert "Showing 2 of 5 publications." in result.output

    def test_show_no_match(self, snapshot_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["show", "--dataset", str(snapshot_path), "--search", "zzz"]
        )
        assert "No publications match your criteria." in result.output

    def test_show_json(self, snapshot_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["show", "--dataset", str(snapshot_path), "--json", "--oldest-first"]
        )
        data = orjson.loads(result.output[result.output.index("{") :])
        assert data["cards"][0]["year"] == "2019"

    def test_show_unavailable(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["show", "--dataset", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Error loading publication data" in result.output


class TestStatsCommand:
    def test_stats(self, snapshot_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["stats", "--dataset", str(snapshot_path)])

        assert result.exit_code == 0, result.output
        assert "Total publications: 5" in result.output
        assert "Scopus: 2" in result.output
        assert "N/A: 1" in result.output
