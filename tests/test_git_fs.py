import pytest

from git_fs import LocalFileSystem, join


def test_join():
    assert join("repo.git", "objects/pack") == "repo.git/objects/pack"
    assert join("/srv/repo/", ".git") == "/srv/repo/.git"
    assert join(None, ".git") == ".git"


@pytest.mark.asyncio
async def test_readdir_is_sorted(tmp_path):
    for name in ("c", "a", "b"):
        (tmp_path / name).write_text("")

    assert await LocalFileSystem().readdir(str(tmp_path)) == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_readdir_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        await LocalFileSystem().readdir(str(tmp_path / "missing"))


@pytest.mark.asyncio
async def test_readdir_deep_lists_files_only(tmp_path):
    (tmp_path / "heads" / "feature").mkdir(parents=True)
    (tmp_path / "heads" / "feature" / "x").write_text("")
    (tmp_path / "heads" / "main").write_text("")
    (tmp_path / "tags").mkdir()

    assert await LocalFileSystem().readdir_deep(str(tmp_path)) == ["heads/feature/x", "heads/main"]


@pytest.mark.asyncio
async def test_read_missing_file_returns_none(tmp_path):
    fs = LocalFileSystem()

    assert await fs.read(str(tmp_path / "missing")) is None
    assert await fs.read(str(tmp_path)) is None


@pytest.mark.asyncio
async def test_write_creates_parents_and_overwrites(tmp_path):
    fs = LocalFileSystem()
    path = str(tmp_path / "objects" / "info" / "packs")

    await fs.write(path, "P pack-old.pack\nP pack-older.pack\n")
    await fs.write(path, "\n")

    assert await fs.read(path) == "\n"
