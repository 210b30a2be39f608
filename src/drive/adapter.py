import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from src.drive import paths
from src.drive.errors import (
    ApiRequestError,
    NotFoundError,
    PathEmptyError,
    RateLimitedError,
    ReadOnlyError,
    UserNotSetError,
)
from src.drive.filetypes import FileTypeRegistry
from src.drive.models import ContentModel
from src.drive.selector import TransportSelector
from src.drive.state import AccessState, ObservableValue, Signal
from src.drive.transport_protocol import GITHUB_API, TransportProtocol
from src.drive.translator import (
    FileTypeForPath,
    GitHubDirectory,
    GitHubFile,
    parse_contents,
    parse_repos,
    repos_to_directory,
    to_content_model,
    with_content,
)
from src.drive.transports import DirectTransport, ProxiedTransport

logger = logging.getLogger(__name__)

RATE_LIMIT_MARKER = "rate limit"
OVERSIZED_MARKER = "blob"


class FailureKind(Enum):
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    OVERSIZED = "oversized"
    OTHER = "other"


def classify_failure(error: Exception) -> FailureKind:
    if not isinstance(error, ApiRequestError):
        return FailureKind.OTHER
    if error.status == 404:
        return FailureKind.NOT_FOUND
    if error.status == 403 and RATE_LIMIT_MARKER in error.body:
        return FailureKind.RATE_LIMITED
    if error.status == 403 and OVERSIZED_MARKER in error.body:
        return FailureKind.OVERSIZED
    return FailureKind.OTHER


class GitHubDrive:
    """A read-only drive onto the GitHub repositories of one user or organization.

    Paths have the form ``<repo>/<path inside repo>``; the empty path lists
    the user's repositories. Lookup failures while browsing degrade to an
    empty directory and flip the advisory flags instead of raising.
    """

    def __init__(
        self,
        file_type_for_path: Optional[FileTypeForPath] = None,
        proxied: Optional[TransportProtocol] = None,
        direct: Optional[TransportProtocol] = None,
        user: str = "",
    ):
        self._file_type_for_path = file_type_for_path or FileTypeRegistry()
        self._transport = TransportSelector(proxied or ProxiedTransport(), direct or DirectTransport())
        self._state = AccessState()
        self._file_changed = Signal(self)
        self._is_disposed = False
        self._user = user

    @property
    def name(self) -> str:
        return "GitHub"

    @property
    def base_url(self) -> str:
        return GITHUB_API

    @property
    def user(self) -> str:
        return self._user

    @user.setter
    def user(self, user: str) -> None:
        self._user = user

    @property
    def valid_user_state(self) -> ObservableValue:
        return self._state.user_valid

    @property
    def rate_limited_state(self) -> ObservableValue:
        return self._state.rate_limited

    @property
    def file_changed(self) -> Signal:
        """Emitted after a successful file operation; a read-only drive never emits."""
        return self._file_changed

    @property
    def is_disposed(self) -> bool:
        return self._is_disposed

    def dispose(self) -> None:
        if self._is_disposed:
            return
        self._is_disposed = True
        self._file_changed.clear()
        self._state.clear()

    async def get(self, path: str, options: Optional[Dict[str, Any]] = None) -> ContentModel:
        """Get a file or directory.

        Args:
            path: Drive path, "<repo>/<path inside repo>"
            options: Fetch options from the host; accepted and ignored

        Returns:
            The content model for ``path``, or an empty directory when the
            user is unset or the resource does not exist

        Raises:
            RateLimitedError: If GitHub rate limits the request
            ApiRequestError: For any other unexpected API failure
        """
        if not self._user:
            self._state.user_valid.set(False)
            return ContentModel.dummy_directory()

        if not path:
            return await self._list_repos()

        ref = paths.resolve(self._user, path)
        try:
            raw = await self._transport.request(paths.contents_route(ref.user, ref.repo, ref.repo_path))
        except Exception as exc:
            kind = classify_failure(exc)
            if kind is FailureKind.NOT_FOUND:
                logger.warning("GitHub: cannot find org/repo. Perhaps you misspelled something?")
                self._state.user_valid.set(False)
                return ContentModel.dummy_directory()
            if kind is FailureKind.RATE_LIMITED:
                self._state.rate_limited.set(True)
                logger.error(str(exc))
                raise RateLimitedError.from_error(exc) from exc
            if kind is FailureKind.OVERSIZED:
                self._state.mark_ok()
                return await self._get_blob(path)
            logger.error(str(exc))
            raise

        self._state.mark_ok()
        return to_content_model(path, parse_contents(raw), self._file_type_for_path)

    async def get_download_url(self, path: str) -> str:
        if not self._user:
            raise UserNotSetError()
        if not path:
            raise PathEmptyError()

        ref = paths.resolve(self._user, path)
        entry = (await self._list_parent(ref.repo, ref.repo_path)).find(ref.repo_path)
        if not isinstance(entry, GitHubFile) or not entry.download_url:
            raise NotFoundError(f"GitHub: no download url for {path}")
        return entry.download_url

    async def new_untitled(self, options: Optional[Dict[str, Any]] = None) -> ContentModel:
        raise ReadOnlyError()

    async def delete(self, path: str) -> None:
        raise ReadOnlyError()

    async def rename(self, path: str, new_path: str) -> ContentModel:
        raise ReadOnlyError()

    async def save(self, path: str, options: Optional[Dict[str, Any]] = None) -> ContentModel:
        raise ReadOnlyError()

    async def copy(self, from_file: str, to_dir: str) -> ContentModel:
        raise ReadOnlyError()

    async def create_checkpoint(self, path: str) -> Dict[str, str]:
        raise ReadOnlyError()

    async def list_checkpoints(self, path: str) -> List[Dict[str, str]]:
        return []

    async def restore_checkpoint(self, path: str, checkpoint_id: str) -> None:
        raise ReadOnlyError()

    async def delete_checkpoint(self, path: str, checkpoint_id: str) -> None:
        raise ReadOnlyError("Read only")

    async def _request_resource(self, route: str) -> Any:
        try:
            return await self._transport.request(route)
        except ApiRequestError as exc:
            if classify_failure(exc) is FailureKind.RATE_LIMITED:
                self._state.rate_limited.set(True)
                logger.error(str(exc))
                raise RateLimitedError.from_error(exc) from exc
            raise

    async def _list_parent(self, repo: str, repo_path: str) -> GitHubDirectory:
        route = paths.contents_route(self._user, repo, paths.parent_dir(repo_path))
        listing = parse_contents(await self._request_resource(route))
        if not isinstance(listing, GitHubDirectory):
            raise NotFoundError(f"GitHub: parent of {repo}/{repo_path} is not a directory")
        return listing

    async def _get_blob(self, path: str) -> ContentModel:
        """Fetch a file too large for the contents API (> 1 MB).

        The parent listing still carries the file's sha, which addresses the
        blob in the Git Data API.
        """
        ref = paths.resolve(self._user, path)
        entry = (await self._list_parent(ref.repo, ref.repo_path)).find(ref.repo_path)
        if not isinstance(entry, GitHubFile):
            raise NotFoundError(f"Cannot find sha for blob {path}")

        blob = await self._request_resource(paths.blob_route(ref.user, ref.repo, entry.sha))
        return to_content_model(path, with_content(entry, blob.get("content")), self._file_type_for_path)

    async def _list_repos(self) -> ContentModel:
        try:
            raw = await self._transport.request(paths.repos_route(self._user))
        except Exception as exc:
            if classify_failure(exc) is FailureKind.RATE_LIMITED:
                self._state.rate_limited.set(True)
            else:
                logger.warning("GitHub: cannot find user. Perhaps you misspelled something?")
                self._state.user_valid.set(False)
            return ContentModel.dummy_directory()

        self._state.mark_ok()
        return repos_to_directory(parse_repos(raw))
