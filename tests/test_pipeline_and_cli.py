"""环节四：数据目录批量检查、CSV 报告与命令行。"""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wad_inspector.cli.main import app
from wad_inspector.core.cache import ArchiveInfoCache
from wad_inspector.core.config import ScanConfig
from wad_inspector.core.exceptions import InvalidConfigurationError
from wad_inspector.core.progress import ProgressUpdate
from wad_inspector.core.scanner import collect_archive_files
from wad_inspector.processing.pipeline import inspect_batch
from wad_fixtures import build_wad, write_pk3, write_wad

runner = CliRunner()


def make_data_dir(root: Path) -> Path:
    data = root / "wads"
    (data / "mods" / "deep").mkdir(parents=True)
    write_wad(data / "doom2.wad", ["MAP02", "MAP01"], signature=b"IWAD")
    write_wad(data / "Heretic.WAD", ["E1M1"], signature=b"IWAD")
    write_wad(data / "mods" / "sunlust.wad", ["MAP01", "MAP32"])
    write_pk3(data / "mods" / "deep" / "pack.pk3", {"maps/MAP05/TEXTMAP": b""})
    (data / "mods" / "broken.pk3").write_bytes(b"garbage")
    (data / "readme.txt").write_text("not scanned")
    return data


def test_scanner_filters_and_sorts(tmp_path: Path) -> None:
    data = make_data_dir(tmp_path)

    sources = collect_archive_files(ScanConfig(sources=[data]))

    assert [s.relative_path.as_posix() for s in sources] == [
        "doom2.wad",
        "Heretic.WAD",
        "mods/broken.pk3",
        "mods/deep/pack.pk3",
        "mods/sunlust.wad",
    ]


def test_scanner_respects_recursion_and_excludes(tmp_path: Path) -> None:
    data = make_data_dir(tmp_path)

    flat = collect_archive_files(ScanConfig(sources=[data], allow_recursive=False))
    assert [s.source_path.name for s in flat] == ["doom2.wad", "Heretic.WAD"]

    excluded = collect_archive_files(ScanConfig(sources=[data], exclude_patterns=("*.PK3",)))
    assert all(s.source_path.suffix.lower() != ".pk3" for s in excluded)

    single = collect_archive_files(ScanConfig(sources=[data / "doom2.wad", data / "doom2.wad"]))
    assert len(single) == 1
    assert single[0].relative_path == Path("doom2.wad")


@pytest.mark.parametrize(
    "kwargs",
    [{"max_workers": 0}, {"include_extensions": ("wad",)}, {"include_extensions": (".",)}],
)
def test_invalid_config_is_rejected(tmp_path: Path, kwargs: dict) -> None:
    with pytest.raises(InvalidConfigurationError):
        ScanConfig(sources=[tmp_path], **kwargs)


def test_batch_separates_base_games_from_mods(tmp_path: Path) -> None:
    data = make_data_dir(tmp_path)
    report = tmp_path / "out" / "report.csv"
    updates: list[ProgressUpdate] = []

    result = inspect_batch(ScanConfig(sources=[data], report_path=report), progress_callback=updates.append)

    assert [o.info.file_name for o in result.base_games] == ["doom2.wad", "Heretic.WAD"]
    assert [o.info.file_name for o in result.mods] == ["broken.pk3", "pack.pk3", "sunlust.wad"]
    assert [o.info.file_name for o in result.failed] == ["broken.pk3"]
    assert result.base_games[0].info.map_names == ("MAP01", "MAP02")
    assert updates[-1].finished and updates[-1].total == 5

    assert result.report_path == report
    with report.open(encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 5
    by_name = {row["relative_path"]: row for row in rows}
    assert by_name["doom2.wad"]["status"] == "base-game"
    assert by_name["doom2.wad"]["map_names"] == "MAP01 MAP02"
    assert by_name["mods/broken.pk3"]["status"] == "error"
    assert by_name["mods/broken.pk3"]["error_message"] == "invalid package archive"
    assert by_name["mods/deep/pack.pk3"]["archive_kind"] == "PK3"


def test_batch_with_worker_pool_matches_serial(tmp_path: Path) -> None:
    data = make_data_dir(tmp_path)

    serial = inspect_batch(ScanConfig(sources=[data]))
    pooled = inspect_batch(ScanConfig(sources=[data], max_workers=2))

    assert [o.info for o in pooled.all_outcomes()] == [o.info for o in serial.all_outcomes()]


def test_batch_uses_cache(tmp_path: Path) -> None:
    data = make_data_dir(tmp_path)
    cache = ArchiveInfoCache()

    inspect_batch(ScanConfig(sources=[data]), cache=cache)

    assert len(cache) == 5
    assert cache.get(data / "doom2.wad").is_primary


def test_empty_source_produces_empty_result(tmp_path: Path) -> None:
    result = inspect_batch(ScanConfig(sources=[tmp_path / "missing"]))

    assert result.all_outcomes() == []


def test_cli_inspect_json(tmp_path: Path) -> None:
    wad = write_wad(tmp_path / "doom.wad", ["E1M2", "E1M1"], signature=b"IWAD")

    outcome = runner.invoke(app, ["inspect", "--json", str(wad)])

    assert outcome.exit_code == 0, outcome.output
    payload = json.loads(outcome.stdout)
    assert payload[0]["archive_kind"] == "IWAD"
    assert payload[0]["map_names"] == ["E1M1", "E1M2"]


def test_cli_inspect_reports_invalid_with_exit_code(tmp_path: Path) -> None:
    bad = tmp_path / "tiny.wad"
    bad.write_bytes(b"PWAD")

    outcome = runner.invoke(app, ["inspect", "--json", str(bad), str(tmp_path / "gone.wad")])

    assert outcome.exit_code == 1
    payload = json.loads(outcome.stdout)
    assert [item["error_message"] for item in payload] == ["file too small", "file not found"]


def test_cli_scan_writes_report(tmp_path: Path) -> None:
    data = make_data_dir(tmp_path)
    report = tmp_path / "scan.csv"

    outcome = runner.invoke(app, ["scan", str(data), "--report", str(report)])

    assert outcome.exit_code == 0, outcome.output
    assert report.exists()
    assert "基础游戏 2 个" in outcome.output


def test_cli_scan_rejects_bad_extension(tmp_path: Path) -> None:
    outcome = runner.invoke(app, ["scan", str(tmp_path), "--ext", "wad"])

    assert outcome.exit_code != 0


def test_cli_warp(tmp_path: Path) -> None:
    assert runner.invoke(app, ["warp", "e2m3"]).output.strip() == "-warp 2 3"
    assert runner.invoke(app, ["warp", "MAP07"]).output.strip() == "-warp 7"
    assert runner.invoke(app, ["warp", "TITLE"]).exit_code == 2


def test_package_with_embedded_wad_listed_as_mod(tmp_path: Path) -> None:
    data = tmp_path / "data"
    data.mkdir()
    write_pk3(data / "bundle.pk3", {"base/iwad.wad": build_wad(["MAP01"], signature=b"IWAD")})

    result = inspect_batch(ScanConfig(sources=[data]))

    assert result.base_games == []
    assert result.mods[0].info.map_names == ("MAP01",)
