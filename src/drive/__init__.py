from .adapter import GitHubDrive
from .errors import DriveError, NotFoundError, RateLimitedError, ReadOnlyError
from .filetypes import FileTypeRegistry
from .models import ContentModel, FileType, TransportMode
from .transports import DirectTransport, ProxiedTransport

__all__ = [
    "GitHubDrive",
    "DriveError",
    "NotFoundError",
    "RateLimitedError",
    "ReadOnlyError",
    "FileTypeRegistry",
    "ContentModel",
    "FileType",
    "TransportMode",
    "DirectTransport",
    "ProxiedTransport",
]
