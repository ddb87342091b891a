import io
import os
from pathlib import Path

from plunge import purge
from plunge.ignore_engine import build_ignore_engine
from plunge.models import PurgeReport
from plunge.purge import build_skip_list, destination_offset, iter_directory, purge_files


def _write(path: Path, content: str = "x") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _purge(source: Path, destination: Path, relative_paths: list[str], ignore=None) -> tuple[PurgeReport, str]:
    out = io.StringIO()
    report = purge_files(
        str(source),
        str(destination),
        destination_offset(str(destination)),
        build_skip_list(str(source), relative_paths),
        PurgeReport(),
        out=out,
        ignore=ignore,
    )
    return report, out.getvalue()


def test_destination_offset_skips_the_root_and_one_separator() -> None:
    assert destination_offset("/d") == 3
    assert destination_offset("/d/") == 3


def test_iter_directory_yields_names_and_kinds(tmp_path: Path) -> None:
    _write(tmp_path / "file.txt")
    (tmp_path / "folder").mkdir()

    assert sorted(iter_directory(str(tmp_path))) == [("file.txt", False), ("folder", True)]


def test_orphan_file_is_reported(tmp_path: Path) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    _write(source / "a.txt")
    _write(destination / "a.txt")
    _write(destination / "orphan.txt")

    report, output = _purge(source, destination, ["a.txt"])

    assert report.entries == ["orphan.txt"]
    assert output == "orphan.txt\n"


def test_files_present_in_source_but_not_listed_are_not_reported(tmp_path: Path) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    _write(source / "unlisted.txt")
    _write(destination / "unlisted.txt")

    report, output = _purge(source, destination, [])

    assert report.entries == []
    assert output == ""


def test_known_directories_are_descended_and_only_leaves_reported(tmp_path: Path) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    _write(source / "sub" / "b.txt")
    _write(destination / "sub" / "b.txt")
    _write(destination / "sub" / "extra.txt")
    _write(destination / "sub" / "inner" / "deep.txt")
    (source / "sub" / "inner").mkdir()

    report, _ = _purge(source, destination, ["sub/b.txt"])

    assert sorted(report.entries) == ["sub/extra.txt", "sub/inner/deep.txt"]


def test_orphan_directory_is_reported_once(tmp_path: Path) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    source.mkdir()
    _write(destination / "olddir" / "one.txt")
    _write(destination / "olddir" / "nested" / "two.txt")

    report, output = _purge(source, destination, [])

    assert report.entries == ["olddir"]
    assert output == "olddir\n"


def test_directory_known_only_from_the_list_is_descended(tmp_path: Path) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    source.mkdir()
    _write(destination / "keep" / "listed.txt")
    _write(destination / "keep" / "stray.txt")

    report, _ = _purge(source, destination, ["keep/listed.txt"])

    assert report.entries == ["keep/stray.txt"]


def test_duplicate_list_entries_do_not_change_the_report(tmp_path: Path) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    _write(source / "a.txt")
    _write(destination / "a.txt")
    _write(destination / "b.txt")

    report, _ = _purge(source, destination, ["a.txt", "a.txt"])

    assert report.entries == ["b.txt"]


def test_excluded_entries_are_neither_reported_nor_descended(tmp_path: Path) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    source.mkdir()
    _write(destination / ".git" / "HEAD")
    _write(destination / "notes.tmp")
    _write(destination / "real.txt")

    report, _ = _purge(source, destination, [], ignore=build_ignore_engine([".git/", "*.tmp"]))

    assert report.entries == ["real.txt"]


def test_unlistable_directory_is_logged_and_counted(tmp_path: Path, caplog) -> None:
    report = purge_files(
        str(tmp_path / "s"),
        str(tmp_path / "missing"),
        len(str(tmp_path)) + 1,
        [],
        PurgeReport(),
        out=io.StringIO(),
    )

    assert report.entries == []
    assert report.failed_directories == 1
    assert "Cannot list" in caplog.text


def test_long_orphan_paths_are_elided_to_one_line(tmp_path: Path) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    source.mkdir()
    levels = ["level%02d" % index for index in range(12)]
    deep = destination.joinpath(*levels)
    _write(deep / "leaf.txt")
    source.joinpath(*levels[:-1]).mkdir(parents=True)

    report, output = _purge(source, destination, [])

    assert report.entries == ["/".join(levels)]
    assert output.endswith("/level11\n")
    assert len(output) == 79


def test_unlistable_subdirectory_only_abandons_that_subtree(tmp_path: Path, monkeypatch, caplog) -> None:
    source = tmp_path / "s"
    destination = tmp_path / "d"
    for name in ("alpha", "broken", "omega"):
        (source / name).mkdir(parents=True)
        _write(destination / name / "orphan.txt")
    _write(destination / "top.txt")
    broken = str(destination / "broken")
    real_scandir = purge.os.scandir

    def scandir(path):
        if os.fspath(path) == broken:
            raise PermissionError(13, "Permission denied", path)
        return real_scandir(path)

    monkeypatch.setattr(purge.os, "scandir", scandir)

    report, _ = _purge(source, destination, [])

    assert sorted(report.entries) == ["alpha/orphan.txt", "omega/orphan.txt", "top.txt"]
    assert report.failed_directories == 1
    assert "Cannot list" in caplog.text
