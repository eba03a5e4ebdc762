import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import orjson
from aiohttp import ClientSession as Session

from ..errors import MetadataFetchError
from ..parser import Repo

logger = logging.getLogger(__name__)


@dataclass
class RepoInfo:
    name: str
    description: Optional[str]
    default_branch: str
    # forge 返回的全部字段，原样写入 repo_info.json
    payload: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "RepoInfo":
        if not isinstance(payload, dict):
            raise MetadataFetchError(
                f"unexpected repo payload: {type(payload).__name__}"
            )
        try:
            name = payload["name"]
            branch = payload["default_branch"]
        except KeyError as e:
            raise MetadataFetchError(f"repo payload has no field {e}") from e
        if not branch:
            raise MetadataFetchError(f"{name} has no default branch (empty repo?)")

        return cls(
            name=name,
            description=payload.get("description"),
            default_branch=branch,
            payload=payload,
        )

    def dumps(self) -> bytes:
        return orjson.dumps(
            self.payload, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS
        )


class ForgeClient:
    """GitHub REST: GET /repos/{owner}/{repo}"""

    def __init__(
        self,
        client: Session,
        api_url: str = "https://api.github.com",
        token: Optional[str] = None,
    ):
        self.client = client
        self.api_url = api_url.removesuffix("/")
        self.headers = {"Accept": "application/vnd.github+json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        else:
            logger.debug("no access token, requests are anonymous")

    async def get_repo(self, repo: Repo) -> RepoInfo:
        url = f"{self.api_url}{repo.api_path}"
        logger.debug(f"GET {url}")
        async with self.client.get(url, headers=self.headers) as resp:
            content = await resp.read()
            if not resp.ok:
                raise MetadataFetchError(
                    f"GET {url}: {resp.status} {resp.reason}{_api_message(content)}"
                )

        try:
            data = orjson.loads(content)
        except orjson.JSONDecodeError as e:
            raise MetadataFetchError(f"GET {url}: invalid JSON: {e}") from e
        return RepoInfo.from_payload(data)


def _api_message(content: bytes) -> str:
    # 错误响应一般是 {"message": "Not Found", ...}
    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError:
        return ""
    if isinstance(data, dict) and data.get("message"):
        return f": {data['message']}"
    return ""
