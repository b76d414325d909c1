import asyncio
import logging
import re
from collections import namedtuple
from typing import Optional

from git_errors import RefNotFoundError, SymrefLoopError
from git_fs import FileSystem, join

SYMREF_PREFIX = "ref: "
MAX_SYMREF_DEPTH = 5
OBJECT_ID = re.compile(r'^(?:[0-9a-f]{40}|[0-9a-f]{64})$')
BAD_REF_CHARS = set('\177 ~^:?*[\\')

# Order in which git expands an abbreviated ref name.
REF_PATH_TEMPLATES = [
    '{}',
    'refs/{}',
    'refs/tags/{}',
    'refs/heads/{}',
    'refs/remotes/{}',
    'refs/remotes/{}/HEAD',
]

logger = logging.getLogger(__name__)

PackedRef = namedtuple('PackedRef', ['objid', 'ref'])


def parse_packed_refs(text: str) -> list[PackedRef]:
    packed_refs: list[PackedRef] = []
    for line in map(str.rstrip, text.splitlines()):
        if not line or line.startswith('#') or line.startswith('^'):
            continue
        objid, ref = line.split(' ', maxsplit=1)
        packed_refs.append(PackedRef(objid, ref))
    return packed_refs


def is_object_id(value: str) -> bool:
    return OBJECT_ID.match(value) is not None


def check_ref_format(refname: str) -> bool:
    """Check a full ref name against git-check-ref-format's rules.

    Lock files left behind while git updates a ref (``main.lock``) fail
    this check, as do names git itself would refuse to create.
    """
    if '/' not in refname or '..' in refname or '@{' in refname or refname == '@':
        return False
    if refname.endswith('/') or refname.endswith('.'):
        return False
    for component in refname.split('/'):
        if not component or component.startswith('.') or component.endswith('.lock'):
            return False
    return not any(ord(c) < 0o40 or c in BAD_REF_CHARS for c in refname)


class RefStore:
    """Reads loose refs and ``packed-refs`` from a git directory.

    ``packed-refs`` is read once per store; create a new store to pick up
    changes made by ``git pack-refs``.
    """

    def __init__(self, fs: FileSystem, gitdir: str) -> None:
        self.fs = fs
        self.gitdir = gitdir
        self._packed_refs: Optional[dict[str, str]] = None
        self._packed_refs_lock = asyncio.Lock()

    async def packed_refs(self) -> dict[str, str]:
        async with self._packed_refs_lock:
            if self._packed_refs is None:
                text = await self.fs.read(join(self.gitdir, 'packed-refs'))
                packed = parse_packed_refs(text) if text is not None else []
                self._packed_refs = {p.ref: p.objid for p in packed}
        return self._packed_refs

    async def list_refs(self, prefix: str = 'refs') -> list[str]:
        """List ref names below ``prefix``, relative to it.

        Loose refs and packed refs are merged; the result is sorted so two
        listings of an unchanged repository are identical. Names that are not
        valid refs, such as lock files, are skipped.
        """
        prefix = prefix.rstrip('/')
        names = set(await self.fs.readdir_deep(join(self.gitdir, prefix)))
        for ref in await self.packed_refs():
            if ref.startswith(prefix + '/'):
                names.add(ref[len(prefix) + 1:])
        refs = []
        for name in sorted(names):
            if check_ref_format(f'{prefix}/{name}'):
                refs.append(name)
            else:
                logger.debug(f"Skipping invalid ref name {prefix}/{name}")
        return refs

    async def read_ref(self, ref: str) -> Optional[str]:
        """Read a ref without following symbolic indirection."""
        contents = await self.fs.read(join(self.gitdir, ref))
        if contents is not None:
            return contents.strip()
        return (await self.packed_refs()).get(ref)

    async def expand_ref(self, ref: str) -> str:
        if ref == 'HEAD' or ref.startswith('refs/'):
            candidates = [ref]
        else:
            candidates = [template.format(ref) for template in REF_PATH_TEMPLATES]
        for candidate in candidates:
            if await self.read_ref(candidate) is not None:
                return candidate
        raise RefNotFoundError(ref)

    async def resolve(self, ref: str) -> str:
        if is_object_id(ref):
            return ref
        name = await self.expand_ref(ref)
        for depth in range(MAX_SYMREF_DEPTH + 1):
            contents = await self.read_ref(name)
            if contents is None:
                raise RefNotFoundError(name)
            if not contents.startswith(SYMREF_PREFIX):
                if not is_object_id(contents):
                    raise RefNotFoundError(name)
                return contents
            logger.debug(f"Following symbolic ref {name} -> {contents}")
            name = contents[len(SYMREF_PREFIX):]
        raise SymrefLoopError(ref, MAX_SYMREF_DEPTH)
