"""Shared pytest fixtures for GitHub drive tests.

Transports are replaced by ``RecordingTransport``, which answers from a
route -> response table and records every route it was asked for. A response
that is an exception instance is raised instead of returned.
"""

import base64
import json
from typing import Any, Dict, List, Optional

import pytest

from src.drive.adapter import GitHubDrive
from src.drive.errors import ApiRequestError, TransportUnavailableError
from src.drive.filetypes import FileTypeRegistry

USER = "octocat"


class RecordingTransport:
    def __init__(self, responses: Optional[Dict[str, Any]] = None, default: Any = None):
        self.responses = dict(responses or {})
        self.default = default
        self.calls: List[str] = []

    async def request(self, api_path: str) -> Any:
        self.calls.append(api_path)
        if api_path in self.responses:
            response = self.responses[api_path]
        elif self.default is not None:
            response = self.default
        else:
            response = ApiRequestError(404, '{"message": "Not Found"}', "Not Found")
        if isinstance(response, Exception):
            raise response
        return response


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def file_entry(path: str, content: Optional[str] = None, sha: str = "abc123") -> Dict[str, Any]:
    entry = {
        "type": "file",
        "name": path.split("/")[-1],
        "path": path,
        "sha": sha,
        "download_url": f"https://raw.githubusercontent.com/{USER}/repo/master/{path}",
    }
    if content is not None:
        entry["content"] = content
        entry["encoding"] = "base64"
    return entry


def dir_entry(path: str) -> Dict[str, Any]:
    return {"type": "dir", "name": path.split("/")[-1], "path": path, "sha": "d1r"}


def rate_limit_error() -> ApiRequestError:
    body = json.dumps({"message": "API rate limit exceeded for 127.0.0.1."})
    return ApiRequestError(403, body, "API rate limit exceeded")


def oversized_error() -> ApiRequestError:
    body = json.dumps(
        {
            "message": "This API returns blobs up to 1 MB in size. The requested blob is too large to fetch via the API",
            "errors": [{"code": "too_large"}],
        }
    )
    return ApiRequestError(403, body, "Forbidden")


@pytest.fixture
def no_proxy():
    """Proxy whose probe fails, so the drive falls back to direct calls."""
    return RecordingTransport({"": TransportUnavailableError("No GitHub proxy configured")})


@pytest.fixture
def direct():
    return RecordingTransport()


@pytest.fixture
def drive(no_proxy, direct):
    return GitHubDrive(file_type_for_path=FileTypeRegistry(), proxied=no_proxy, direct=direct, user=USER)
