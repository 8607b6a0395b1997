import json
import sys
from pathlib import Path

import pytest
from PIL import Image

from cbarchiver.core.archiver_locator import ArchiverLocator

FAKE_7Z_SOURCE = '''
import json
import sys
import zipfile
from pathlib import Path

CALLS = Path(__CALLS__)
FAIL = Path(__FAIL__)


def main(argv):
    if not argv:
        return 0
    with open(CALLS, "a", encoding="utf-8") as f:
        f.write(json.dumps(argv) + "\\n")
    if FAIL.exists():
        sys.stderr.write("boom: cannot write archive\\n")
        return 2

    options = [a for a in argv[1:] if a.startswith("-")]
    archive, *files = [a for a in argv[1:] if not a.startswith("-")]
    if "-tzip" in options:
        with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as z:
            for name in files:
                z.write(name, Path(name).name)
                print("+ " + Path(name).name)
    else:
        import py7zr

        with py7zr.SevenZipFile(archive, "w") as z:
            for name in files:
                z.write(name, Path(name).name)
                print("+ " + Path(name).name)
    return 0


sys.exit(main(sys.argv[1:]))
'''


class FakeArchiver:
    """A 7z stand-in that writes real zip/7z archives and records its argv."""

    def __init__(self, directory):
        directory.mkdir(parents=True, exist_ok=True)
        self.calls_file = directory / "calls.jsonl"
        self.fail_marker = directory / "fail"
        script = directory / "fake_7z.py"
        script.write_text(
            FAKE_7Z_SOURCE.replace("__CALLS__", repr(str(self.calls_file)))
            .replace("__FAIL__", repr(str(self.fail_marker))),
            encoding="utf-8",
        )
        self.path = directory / "7z"
        self.path.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
        self.path.chmod(0o755)

    def calls(self):
        if not self.calls_file.exists():
            return []
        with open(self.calls_file, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    def fail(self):
        self.fail_marker.write_text("1")

    def locator(self):
        return ArchiverLocator(candidates=[str(self.path)])


@pytest.fixture
def fake_7z(tmp_path):
    return FakeArchiver(tmp_path / "bin")


class MissingLocator:
    def locate(self):
        return None


@pytest.fixture
def missing_locator():
    return MissingLocator()


COLORS = [(200, 30, 30), (30, 200, 30), (30, 30, 200), (200, 200, 30), (30, 200, 200)]


def write_page(path, index=0):
    with Image.new("RGB", (16, 24), COLORS[index % len(COLORS)]) as img:
        img.save(path, "JPEG")
    return path


@pytest.fixture
def make_pages():
    """Create a folder of small JPEG pages; returns the folder path."""

    def _make_pages(folder: Path, names):
        folder.mkdir(parents=True, exist_ok=True)
        for i, name in enumerate(names):
            write_page(folder / name, i)
        return folder

    return _make_pages
