"""Regenerate the metadata files git's dumb HTTP protocol relies on.

A dumb server can only hand out static files, so clients learn about the
repository's packs from ``objects/info/packs`` and about its refs from
``info/refs``. ``update_server_info`` rebuilds both, the way
``git update-server-info`` does.
"""
import asyncio
import logging
from typing import Optional, Protocol, Sequence

from git_errors import UpdateServerInfoError, assert_parameter
from git_fs import FileSystem, join
from git_refs import RefStore

PACK_MARKER = "P"
PACK_SUFFIX = ".pack"

logger = logging.getLogger(__name__)


class Refs(Protocol):
    async def list_refs(self, prefix: str = 'refs') -> list[str]: ...

    async def resolve(self, ref: str) -> str: ...


def format_packs(pack_names: Sequence[str]) -> str:
    return '\n'.join(f'{PACK_MARKER} {name}' for name in pack_names) + '\n'


def format_refs(resolved_refs: Sequence[tuple[str, str]]) -> str:
    return '\n'.join(f'{objid}\trefs/{ref}' for ref, objid in resolved_refs) + '\n'


async def list_packs(fs: FileSystem, gitdir: str) -> list[str]:
    try:
        entries = await fs.readdir(join(gitdir, 'objects/pack'))
    except FileNotFoundError:
        # A repository that has never been packed has no pack directory.
        return []
    return [entry for entry in entries if entry.endswith(PACK_SUFFIX)]


async def resolve_refs(refs: Refs) -> list[tuple[str, str]]:
    names = await refs.list_refs('refs')
    tasks = [asyncio.ensure_future(refs.resolve(f'refs/{name}')) for name in names]
    try:
        objids = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
    return list(zip(names, objids))


async def update_server_info(
    fs: FileSystem,
    dir: Optional[str] = None,
    gitdir: Optional[str] = None,
    refs: Optional[Refs] = None,
) -> None:
    """Rewrite ``objects/info/packs`` and ``info/refs`` under ``gitdir``.

    ``gitdir`` defaults to ``<dir>/.git``. ``refs`` defaults to a
    :class:`RefStore` reading the same git directory through ``fs``.

    Both files are computed before either is written. Any failure is raised
    as :class:`UpdateServerInfoError` carrying the original exception.
    """
    if gitdir is None and dir is not None:
        gitdir = join(dir, '.git')
    try:
        assert_parameter('fs', fs)
        assert_parameter('gitdir', gitdir)
        if refs is None:
            refs = RefStore(fs, gitdir)

        packs = await list_packs(fs, gitdir)
        resolved_refs = await resolve_refs(refs)

        packs_path = join(gitdir, 'objects/info/packs')
        refs_path = join(gitdir, 'info/refs')
        logger.debug(f"Writing {packs_path} and {refs_path}")
        await fs.write(packs_path, format_packs(packs))
        await fs.write(refs_path, format_refs(resolved_refs))
    except Exception as err:
        raise UpdateServerInfoError(err) from err
    logger.info(f"Updated server info in {gitdir}: {len(packs)} packs, {len(resolved_refs)} refs")
