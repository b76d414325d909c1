import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from starlette.convertors import Convertor, register_url_convertor

from git_errors import UpdateServerInfoError
from git_fs import LocalFileSystem
from git_settings import settings
from server_info import update_server_info


NO_CACHE_HEADERS = {
    "Expires": "Fri, 01 Jan 1980 00:00:00 GMT",
    "Pragma": "no-cache",
    "Cache-Control": "no-cache, max-age=0, must-revalidate",
}

logger = logging.getLogger(__name__)

class GitRepoConvertor(Convertor[str]):
    regex = ".*(?=/update-server-info$)"

    def convert(self, value: str) -> str:
        return str(value)

    def to_string(self, value: str) -> str:
        return str(value)

register_url_convertor("git_repo", GitRepoConvertor())


app = FastAPI()


def get_local_repo(namespace: str, repo: str) -> Path:
    if namespace not in settings.namespaces:
        raise HTTPException(status_code=404, detail=f"Unknown namespace '{namespace}'")
    root = settings.namespaces[namespace].resolve()
    local_repo = (root / repo).resolve()
    # An absolute or symlinked repo path must still land inside the namespace root.
    if local_repo == root or not local_repo.is_relative_to(root) or not local_repo.is_dir():
        raise HTTPException(status_code=404, detail=f"Repository '{namespace}/{repo}' not found")
    return local_repo


@app.post("/git/{namespace}/{repo:git_repo}/update-server-info")
async def git_update_server_info(namespace: str, repo: str) -> Response:
    local_repo = get_local_repo(namespace, repo)
    logger.info(f"Updating server info for {local_repo}")
    try:
        await update_server_info(fs=LocalFileSystem(), gitdir=local_repo.as_posix())
    except UpdateServerInfoError as err:
        logger.error(f"Failed to update server info for {local_repo}: {err.error!r}")
        raise HTTPException(status_code=500, detail=str(err.error)) from err
    return Response(status_code=204, headers=NO_CACHE_HEADERS)
