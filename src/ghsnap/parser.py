import re
from dataclasses import dataclass

from .errors import MalformedIdentifier

# 只接受 org/project，或者 github 页面链接
_URL_PREFIX = re.compile(r"^https?://github\.com/")


@dataclass(frozen=True)
class Repo:
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def api_path(self) -> str:
        return f"/repos/{self.owner}/{self.name}"

    def archive_url(self, base_url: str, branch: str) -> str:
        base_url = base_url.removesuffix("/")
        return f"{base_url}/{self.owner}/{self.name}/archive/{branch}.zip"


def parse_repo(identifier: str) -> Repo:
    text = _URL_PREFIX.sub("", identifier.strip())
    text = text.removesuffix("/").removesuffix(".git")

    parts = text.split("/")
    if len(parts) != 2 or not all(parts):
        raise MalformedIdentifier(
            f"malformed identifier {identifier!r}, expected org/project"
        )
    if any(p in (".", "..") or not p.isprintable() for p in parts):
        raise MalformedIdentifier(f"malformed identifier {identifier!r}")

    return Repo(*parts)
