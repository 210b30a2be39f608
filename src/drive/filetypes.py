import posixpath
from typing import List, Optional

from src.drive.models import FileType

TEXT = FileType(name="text", file_format="text", mime_types=["text/plain"])

DEFAULT_FILE_TYPES = [
    FileType("notebook", "json", ["application/x-ipynb+json"], [".ipynb"]),
    FileType("json", "text", ["application/json"], [".json"]),
    FileType("markdown", "text", ["text/markdown"], [".md", ".markdown"]),
    FileType("python", "text", ["text/x-python"], [".py"]),
    FileType("csv", "text", ["text/csv"], [".csv"]),
    FileType("svg", "text", ["image/svg+xml"], [".svg"]),
    FileType("png", "base64", ["image/png"], [".png"]),
    FileType("gif", "base64", ["image/gif"], [".gif"]),
    FileType("jpeg", "base64", ["image/jpeg"], [".jpg", ".jpeg"]),
    FileType("pdf", "base64", ["application/pdf"], [".pdf"]),
    FileType("zip", "base64", ["application/zip"], [".zip"]),
    FileType("binary", "base64", ["application/octet-stream"], [".bin"]),
]


class FileTypeRegistry:
    """Extension-based file type lookup with a text fallback.

    Stands in for the host's own classifier when none is supplied.
    """

    def __init__(self, file_types: Optional[List[FileType]] = None, default: FileType = TEXT):
        self.file_types = list(DEFAULT_FILE_TYPES if file_types is None else file_types)
        self.default = default

    def get_file_types_for_path(self, path: str) -> List[FileType]:
        ext = posixpath.splitext(path)[1].lower()
        return [ft for ft in self.file_types if ext and ext in ft.extensions]

    def file_type_for_path(self, path: str) -> FileType:
        matches = self.get_file_types_for_path(path)
        return matches[0] if matches else self.default

    __call__ = file_type_for_path
