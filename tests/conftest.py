"""Shared test fixtures: a small export snapshot and stub change listers."""

import csv
import json

import pytest

from crosslayer.exceptions import ServiceError
from crosslayer.linkage import KeyNormalizer


class StubLister:
    """ChangeLister answering from a uuid -> paths table."""

    def __init__(self, files, fail_on=()):
        self.files = files
        self.fail_on = set(fail_on)
        self.calls = []

    def list_files(self, uuid):
        self.calls.append(uuid)
        if uuid in self.fail_on:
            raise ServiceError(["stub", uuid], "exit status 1", identifier=uuid)
        return list(self.files.get(uuid, []))


def write_csv(path, rows):
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f).writerows(rows)


def write_dump(path, changes):
    path.write_text(json.dumps({"changes": changes}), encoding="utf-8")


def padded(width, **cells):
    """A positional CSV row with the given columns filled in."""
    row = [""] * width
    for index, value in cells.items():
        row[int(index.lstrip("c"))] = value
    return row


SNAPSHOT_CHANGES = [
    {"author": "alice", "comment": "Fix login #12", "Modified": "15-mar-2010 02:30 PM", "uuid": "u1"},
    {"author": "alice", "comment": "Fix login #12", "Modified": "15-mar-2010 02:30 PM", "uuid": "u2"},
    {"author": "bob", "comment": "Add report", "Modified": "16-mar-2010 09:05 AM", "uuid": "u3"},
    {"author": "carol", "comment": "Tweak - layout", "Modified": "17-mar-2010 12:10 PM", "uuid": "u4"},
    {"author": "bob", "comment": "Refactor #7", "Modified": "18-mar-2010 12:00 AM", "uuid": "u5"},
    # belongs to the February dump; skipped here
    {"author": "dave", "comment": "Old", "Modified": "28-fev-2010 10:00 AM", "uuid": "u6"},
]

SNAPSHOT_FILES = {
    "u1": ["/siop-jpa/src/Login.java"],
    "u2": ["/siop-war/web/login.xhtml"],
    "u3": ["/siop-ejb/src/Report.java"],
    "u4": ["/siop-war/web/layout.xhtml", "/docs/readme.txt"],
    "u5": ["/siop-jpa/src/Base.java"],
}


@pytest.fixture
def normalizer():
    return KeyNormalizer()


@pytest.fixture
def stub_lister():
    return StubLister(SNAPSHOT_FILES)


@pytest.fixture
def export_dir(tmp_path):
    """Export snapshot: one March dump plus the tracker CSVs.

    Expected attribution:
        u1+u2  defect 101 (feature Login)
        u3, u4 story 55 (feature Reports)
        u5     unattributed, ticket #7 (a bug per siop-issues.csv)
    """
    write_dump(tmp_path / "2010-mar.json", SNAPSHOT_CHANGES)
    write_csv(
        tmp_path / "defects.csv",
        [
            padded(5, c1="Id", c3="Filed Against", c4="Change Sets"),
            padded(
                5,
                c1="101",
                c3="Login: authentication",
                c4="cs1 - Fix login #12 - alice - 15/03/2010 14:30",
            ),
        ],
    )
    write_csv(
        tmp_path / "features.csv",
        [padded(11, c1="55", c10="Reports: monthly totals")],
    )
    write_csv(
        tmp_path / "stories.csv",
        [
            padded(
                10,
                c8="S55",
                c9="cs2 - Add report - bob - 16/03/2010 09:05\n"
                "cs3 - Tweak - layout - carol - 17/03/2010 12:10",
            )
        ],
    )
    write_csv(tmp_path / "siop-issues.csv", [["7", "1"], ["8", "0"]])
    return tmp_path


@pytest.fixture
def lister_cls():
    return StubLister
