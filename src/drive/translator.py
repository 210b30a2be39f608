"""Translation of GitHub API v3 responses into drive content models.

Raw responses are first tagged as one of four shapes, then converted:

- ``GitHubDirectory``: an array of entries from a contents listing
- ``GitHubFile``: a single file entry, possibly carrying a base64 payload
- ``GitHubDirPlaceholder``: a single directory entry without its children
- ``GitHubRepoCollection``: the repositories of a user or organization
"""

import base64
import binascii
import json
import logging
import posixpath
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Union

from src.drive.errors import DriveError
from src.drive.models import ContentModel, FileType

logger = logging.getLogger(__name__)

FileTypeForPath = Callable[[str], FileType]


@dataclass
class GitHubFile:
    name: str
    path: str
    sha: str = ""
    content: Optional[str] = None
    download_url: Optional[str] = None


@dataclass
class GitHubDirPlaceholder:
    name: str
    path: str
    sha: str = ""


@dataclass
class GitHubDirectory:
    entries: List[Union[GitHubFile, GitHubDirPlaceholder]]

    def find(self, repo_path: str) -> Optional[Union[GitHubFile, GitHubDirPlaceholder]]:
        for entry in self.entries:
            if entry.path == repo_path:
                return entry
        return None


@dataclass
class GitHubRepoCollection:
    names: List[str]


GitHubContents = Union[GitHubDirectory, GitHubFile, GitHubDirPlaceholder]


def _parse_entry(raw: dict) -> Union[GitHubFile, GitHubDirPlaceholder]:
    """Tag one contents entry; symlinks and submodules are not supported."""
    kind = raw.get("type")
    if kind == "file":
        return GitHubFile(
            name=raw.get("name", ""),
            path=raw.get("path", ""),
            sha=raw.get("sha", ""),
            content=raw.get("content") or None,
            download_url=raw.get("download_url"),
        )
    if kind == "dir":
        return GitHubDirPlaceholder(name=raw.get("name", ""), path=raw.get("path", ""), sha=raw.get("sha", ""))
    raise DriveError(f"Unsupported GitHub contents type: {kind!r}")


def parse_contents(raw: Any) -> GitHubContents:
    """Tag a response from the contents route.

    Args:
        raw: Decoded JSON, either one entry object or a list of entries

    Returns:
        The tagged response

    Raises:
        DriveError: If the response is neither a supported entry nor a listing.
            Unsupported entries inside a listing are skipped instead.
    """
    if isinstance(raw, list):
        entries = []
        for item in raw:
            try:
                entries.append(_parse_entry(item))
            except DriveError as exc:
                logger.warning(f"Skipping {item.get('path', '')!r}: {exc}")
        return GitHubDirectory(entries)
    if isinstance(raw, dict):
        return _parse_entry(raw)
    raise DriveError(f"Unexpected GitHub contents response: {type(raw).__name__}")


def parse_repos(raw: Any) -> GitHubRepoCollection:
    if not isinstance(raw, list):
        raise DriveError(f"Unexpected GitHub repository listing: {type(raw).__name__}")
    return GitHubRepoCollection([repo["name"] for repo in raw])


def with_content(entry: GitHubFile, content: Optional[str]) -> GitHubFile:
    return replace(entry, content=content)


def _decode_payload(payload: Optional[str], file_format: str) -> Any:
    if not payload:
        return None
    if file_format == "base64":
        return payload
    try:
        text = base64.b64decode(payload).decode("utf-8", errors="replace")
    except binascii.Error as exc:
        raise DriveError(f"Cannot decode file content as {file_format}: {exc}") from exc
    if file_format == "json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DriveError(f"Cannot parse file content as json: {exc}") from exc
    return text


def _directory(path: str, content: Optional[List[ContentModel]]) -> ContentModel:
    return ContentModel(
        name=posixpath.basename(path),
        path=path,
        type="directory",
        format="json",
        content=content,
    )


def to_content_model(path: str, contents: GitHubContents, file_type_for_path: FileTypeForPath) -> ContentModel:
    """Convert tagged GitHub contents into a content model rooted at ``path``.

    Children of a listing get ``path + "/" + name`` and keep the order the
    API returned them in.
    """
    if isinstance(contents, GitHubDirectory):
        children = [
            to_content_model(posixpath.join(path, entry.name), entry, file_type_for_path)
            for entry in contents.entries
        ]
        return _directory(path, children)

    if isinstance(contents, GitHubFile):
        file_type = file_type_for_path(path)
        return ContentModel(
            name=posixpath.basename(path),
            path=path,
            type="file",
            format=file_type.file_format,
            content=_decode_payload(contents.content, file_type.file_format),
            mimetype=file_type.mime_types[0] if file_type.mime_types else None,
        )

    if isinstance(contents, GitHubDirPlaceholder):
        return _directory(path, None)

    raise DriveError(f"Cannot translate {type(contents).__name__}")


def repos_to_directory(collection: GitHubRepoCollection) -> ContentModel:
    # One unexpanded directory per repository, no deeper nesting.
    content = [_directory(name, None) for name in collection.names]
    return ContentModel(name="", path="", type="directory", format="json", content=content)
