"""Shared fixtures: bare git directories laid out on disk."""

from pathlib import Path

import pytest

OID_MAIN = "1" * 40
OID_TAG = "2" * 40
OID_FEATURE = "3" * 40


def write_ref(gitdir: Path, name: str, contents: str) -> None:
    path = gitdir / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents + "\n")


@pytest.fixture
def gitdir(tmp_path):
    """An empty bare repository with no packs directory and no refs."""
    gitdir = tmp_path / "repo.git"
    (gitdir / "objects").mkdir(parents=True)
    (gitdir / "refs" / "heads").mkdir(parents=True)
    (gitdir / "refs" / "tags").mkdir(parents=True)
    (gitdir / "HEAD").write_text("ref: refs/heads/main\n")
    return gitdir


@pytest.fixture
def populated_gitdir(gitdir):
    """A repository with two refs and two packs."""
    write_ref(gitdir, "refs/heads/main", OID_MAIN)
    write_ref(gitdir, "refs/tags/v1", OID_TAG)
    pack_dir = gitdir / "objects" / "pack"
    pack_dir.mkdir()
    for sha in ("a" * 40, "b" * 40):
        (pack_dir / f"pack-{sha}.pack").write_bytes(b"PACK")
        (pack_dir / f"pack-{sha}.idx").write_bytes(b"\377tOc")
    return gitdir
