import zipfile
from pathlib import Path

import py7zr
import pytest

from cbarchiver.core.archive_handler import (
    AUTO_ZIP_THRESHOLD,
    ArchiveHandler,
    ContainerType,
    select_container_type,
)
from cbarchiver.core.errors import ArchiveFailed, ArchiveVerifyFailed, SpawnFailed


@pytest.mark.parametrize(
    "name,expected",
    [
        ("auto", ContainerType.AUTO),
        ("cb7", ContainerType.SEVEN_ZIP),
        ("7z", ContainerType.SEVEN_ZIP),
        ("CBZ", ContainerType.ZIP),
        ("zip", ContainerType.ZIP),
        (ContainerType.ZIP, ContainerType.ZIP),
    ],
)
def test_from_name(name, expected):
    assert ContainerType.from_name(name) is expected


def test_from_name_rejects_unknown_types():
    with pytest.raises(ValueError, match="Supported types are: auto, cb7, cbz"):
        ContainerType.from_name("cbr")


def test_auto_switches_to_zip_above_threshold():
    assert select_container_type(ContainerType.AUTO, 0) is ContainerType.SEVEN_ZIP
    assert select_container_type(ContainerType.AUTO, AUTO_ZIP_THRESHOLD) is ContainerType.SEVEN_ZIP
    assert select_container_type(ContainerType.AUTO, AUTO_ZIP_THRESHOLD + 1) is ContainerType.ZIP


def test_explicit_types_ignore_size():
    assert select_container_type(ContainerType.ZIP, 1) is ContainerType.ZIP
    assert select_container_type(ContainerType.SEVEN_ZIP, 10 * AUTO_ZIP_THRESHOLD) is ContainerType.SEVEN_ZIP


def test_archive_path_is_a_sibling(tmp_path):
    folder = tmp_path / "Vol 01"
    assert ArchiveHandler.archive_path(folder, ContainerType.SEVEN_ZIP) == tmp_path / "Vol 01.cb7"
    assert ArchiveHandler.archive_path(folder, ContainerType.ZIP) == tmp_path / "Vol 01.cbz"
    assert ArchiveHandler.archive_path("comics/Vol 02/", ContainerType.ZIP) == Path("comics/Vol 02.cbz")


def test_build_command_for_each_type(tmp_path):
    handler = ArchiveHandler("/usr/bin/7z")
    pages = [tmp_path / "0.jpg", tmp_path / "1.jpg"]

    seven = handler.build_command(ContainerType.SEVEN_ZIP, tmp_path / "v.cb7", pages)
    assert seven == [
        "/usr/bin/7z", "a", "-mx=9", "-bb3", "-t7z", "-ms=on",
        str(tmp_path / "v.cb7"), str(pages[0]), str(pages[1]),
    ]

    zipped = handler.build_command(ContainerType.ZIP, tmp_path / "v.cbz", pages)
    assert zipped == [
        "/usr/bin/7z", "a", "-mx=9", "-bb3", "-tzip",
        str(tmp_path / "v.cbz"), str(pages[0]), str(pages[1]),
    ]


def test_run_writes_a_zip_archive(tmp_path, fake_7z, make_pages):
    folder = make_pages(tmp_path / "vol", ["0.jpg", "1.jpg"])
    pages = sorted(folder.iterdir())
    archive = tmp_path / "vol.cbz"

    ArchiveHandler(str(fake_7z.path)).run(ContainerType.ZIP, archive, pages)

    with zipfile.ZipFile(archive) as z:
        assert sorted(z.namelist()) == ["0.jpg", "1.jpg"]
    assert fake_7z.calls()[0][:4] == ["a", "-mx=9", "-bb3", "-tzip"]


def test_run_writes_a_7z_archive(tmp_path, fake_7z, make_pages):
    folder = make_pages(tmp_path / "vol", ["0.jpg", "1.jpg", "2.jpg"])
    pages = sorted(folder.iterdir())
    archive = tmp_path / "vol.cb7"

    ArchiveHandler(str(fake_7z.path)).run(ContainerType.SEVEN_ZIP, archive, pages)

    with py7zr.SevenZipFile(archive, "r") as z:
        assert sorted(z.getnames()) == ["0.jpg", "1.jpg", "2.jpg"]


def test_run_reports_stderr_on_failure(tmp_path, fake_7z, make_pages):
    folder = make_pages(tmp_path / "vol", ["0.jpg"])
    fake_7z.fail()

    with pytest.raises(ArchiveFailed) as exc:
        ArchiveHandler(str(fake_7z.path)).run(
            ContainerType.ZIP, tmp_path / "vol.cbz", [folder / "0.jpg"]
        )

    assert str(exc.value) == "boom: cannot write archive"
    assert exc.value.returncode == 2


def test_failure_without_stderr_names_the_status():
    assert str(ArchiveFailed("", 3)) == "7z exited with status 3"


def test_run_reports_missing_executable(tmp_path):
    missing = str(tmp_path / "no-such-7z")
    with pytest.raises(SpawnFailed) as exc:
        ArchiveHandler(missing).run(ContainerType.ZIP, tmp_path / "v.cbz", [])
    assert str(exc.value).startswith(f"{missing}: ")


def test_run_kills_a_hung_archiver(tmp_path):
    sleeper = tmp_path / "slow7z"
    sleeper.write_text("#!/bin/sh\nexec sleep 30\n")
    sleeper.chmod(0o755)

    with pytest.raises(ArchiveFailed, match="timed out"):
        ArchiveHandler(str(sleeper), timeout=0.5).run(ContainerType.ZIP, tmp_path / "v.cbz", [])


def test_verify_archive_accepts_matching_contents(tmp_path, fake_7z, make_pages):
    folder = make_pages(tmp_path / "vol", ["0.jpg", "1.jpg"])
    pages = sorted(folder.iterdir())
    handler = ArchiveHandler(str(fake_7z.path))
    for container_type in (ContainerType.ZIP, ContainerType.SEVEN_ZIP):
        archive = ArchiveHandler.archive_path(folder, container_type)
        handler.run(container_type, archive, pages)
        ArchiveHandler.verify_archive(archive, container_type, pages)


def test_verify_archive_reports_missing_pages(tmp_path, make_pages):
    folder = make_pages(tmp_path / "vol", ["0.jpg", "1.jpg"])
    archive = tmp_path / "vol.cbz"
    with zipfile.ZipFile(archive, "w") as z:
        z.write(folder / "0.jpg", "0.jpg")

    with pytest.raises(ArchiveVerifyFailed, match="missing: 1.jpg"):
        ArchiveHandler.verify_archive(archive, ContainerType.ZIP, sorted(folder.iterdir()))


@pytest.mark.parametrize("container_type", [ContainerType.ZIP, ContainerType.SEVEN_ZIP])
def test_verify_archive_rejects_unreadable_archives(tmp_path, container_type):
    archive = tmp_path / f"vol.{container_type.ext}"
    archive.write_bytes(b"not an archive at all")

    with pytest.raises(ArchiveVerifyFailed):
        ArchiveHandler.verify_archive(archive, container_type, [tmp_path / "0.jpg"])
