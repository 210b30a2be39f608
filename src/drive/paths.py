import posixpath
from typing import Tuple
from urllib.parse import quote

from src.drive.models import RemoteRepoRef

# Characters encodeURIComponent leaves alone, in addition to quote()'s "_.-~".
_SEGMENT_SAFE = "!*'()"


def url_join(*parts: str) -> str:
    segments = []
    for part in parts:
        for segment in part.split("/"):
            if segment and segment != ".":
                segments.append(segment)
    return "/".join(segments)


def encode_parts(route: str) -> str:
    return "/".join(quote(segment, safe=_SEGMENT_SAFE) for segment in route.split("/"))


def split_path(path: str) -> Tuple[str, str]:
    """Split a drive path into its repository and the path inside it.

    Args:
        path: Drive path such as "project/docs/index.md"

    Returns:
        Tuple of (repository, in-repository path)
    """
    segments = path.split("/")
    return segments[0], url_join(*segments[1:])


def parent_dir(repo_path: str) -> str:
    return url_join(posixpath.dirname(repo_path))


def resolve(user: str, path: str) -> RemoteRepoRef:
    repo, repo_path = split_path(path)
    return RemoteRepoRef(user=user, repo=repo, repo_path=repo_path)


def contents_route(user: str, repo: str, repo_path: str = "") -> str:
    return encode_parts(url_join("repos", user, repo, "contents", repo_path))


def repos_route(user: str) -> str:
    return encode_parts(url_join("users", user, "repos"))


def blob_route(user: str, repo: str, sha: str) -> str:
    return encode_parts(url_join("repos", user, repo, "git", "blobs", sha))
