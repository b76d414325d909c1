#!/usr/bin/env python3

import argparse
import asyncio
import logging
import os
import sys
import typing as t

from git_settings import settings
from git_errors import UpdateServerInfoError
from git_fs import LocalFileSystem
from server_info import update_server_info


def parse_args(argv: t.Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Update auxiliary info files to help dumb servers",
    )
    parser.add_argument('path', nargs='?', default='.', help="working tree or git directory")
    return parser.parse_args(argv)


def locate_gitdir(path: str) -> tuple[t.Optional[str], t.Optional[str]]:
    """Return ``(dir, gitdir)``; a path holding ``.git`` is a working tree."""
    if os.path.isdir(os.path.join(path, '.git')):
        return path, None
    return None, path


def run(argv: t.Optional[t.Sequence[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=settings.log_level)
    dir, gitdir = locate_gitdir(args.path)
    try:
        asyncio.run(update_server_info(LocalFileSystem(), dir=dir, gitdir=gitdir))
    except UpdateServerInfoError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(run())
