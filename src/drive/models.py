from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TransportMode(Enum):
    PROXIED = "proxied"
    DIRECT = "direct"


@dataclass
class FileType:
    name: str
    file_format: str
    mime_types: List[str] = field(default_factory=list)
    extensions: List[str] = field(default_factory=list)


@dataclass
class RemoteRepoRef:
    user: str
    repo: str
    repo_path: str = ""


@dataclass
class ContentModel:
    name: str
    path: str
    type: str
    format: str
    content: Any = None
    mimetype: Optional[str] = None
    writable: bool = False
    created: str = ""
    last_modified: str = ""

    @classmethod
    def dummy_directory(cls) -> "ContentModel":
        """Empty directory returned in place of errors while browsing."""
        return cls(name="", path="", type="directory", format="json", content=[])

    def to_dict(self) -> Dict[str, Any]:
        content = self.content
        if self.type == "directory" and content is not None:
            content = [child.to_dict() for child in content]
        return {
            "name": self.name,
            "path": self.path,
            "type": self.type,
            "format": self.format,
            "content": content,
            "mimetype": self.mimetype,
            "writable": self.writable,
            "created": self.created,
            "last_modified": self.last_modified,
        }

