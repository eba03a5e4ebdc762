import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Set

import aiofiles
import aiohttp
from fake_useragent import FakeUserAgent
from rich.progress import Progress

from ..config import DownloadConfig
from ..errors import GhsnapError
from ..parser import parse_repo
from ..progress import ProgressRecord, ProgressStore, Status
from .archive import ArchiveFetcher
from .forge import ForgeClient, RepoInfo

logger = logging.getLogger(__name__)

METADATA_FILENAME = "repo_info.json"

# 单个 repo 出错只记录，不中断整个循环
# ValueError: 例如分支名里带 NUL，路径无法创建
PER_REPO_ERRORS = (
    GhsnapError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
    ValueError,
)


@dataclass
class RunSummary:
    total: int = 0
    success: int = 0
    error: int = 0
    skipped: int = 0

    @property
    def processed(self) -> int:
        return self.success + self.error + self.skipped

    def __str__(self) -> str:
        return (
            f"Total: {self.total}; Successful: {self.success}; "
            f"Error: {self.error}; Skipped: {self.skipped}"
        )


def download_repos(
    repos: Sequence[str],
    config: DownloadConfig,
) -> RunSummary:
    logger.debug("into asyncio runtime")
    return asyncio.run(_download_repos(repos, config))


async def _download_repos(
    repos: Sequence[str],
    config: DownloadConfig,
) -> RunSummary:
    store = ProgressStore(Path(config.progress_log))
    skip_set = store.load_skip_set()
    if skip_set:
        logger.info(f"already completed {len(skip_set)} repos...skipping these")

    # 大仓库下载时间很长，只限制连接和单次读取
    timeout = aiohttp.ClientTimeout(
        total=None, sock_connect=config.timeout, sock_read=config.timeout
    )
    async with aiohttp.ClientSession(
        headers={"User-Agent": str(FakeUserAgent().random)},
        timeout=timeout,
    ) as client:
        with Progress(transient=True) as progress:
            forge = ForgeClient(client, config.api_url, config.access_token)
            fetcher = ArchiveFetcher(client, config.chunk_size, progress=progress)

            return await process_repos(
                repos,
                skip_set,
                store,
                forge,
                fetcher,
                Path(config.download_root),
                base_url=config.base_url,
                limit=config.limit,
            )


async def process_repos(
    repos: Sequence[str],
    skip_set: Set[str],
    store: ProgressStore,
    forge: ForgeClient,
    fetcher: ArchiveFetcher,
    download_root: Path,
    *,
    base_url: str = "https://github.com",
    limit: Optional[int] = None,
) -> RunSummary:
    """the main loop, one repo at a time

    a repo in `skip_set` is counted and left alone. every other repo ends
    with exactly one record appended to `store`. stops after `limit` repos.
    """
    summary = RunSummary(total=len(repos))

    for n, repo_id in enumerate(repos, 1):
        logger.info(f"{n} of {summary.total}: {repo_id}")

        if repo_id in skip_set:
            logger.info("....ALREADY DONE: SKIPPING")
            summary.skipped += 1
        else:
            record = await _process_repo(
                repo_id, forge, fetcher, download_root, base_url
            )
            store.append(record)
            if record.ok:
                summary.success += 1
            else:
                summary.error += 1

        if limit is not None and n >= limit:
            logger.info(f"reached limit {limit}, stop")
            break

    return summary


async def _process_repo(
    repo_id: str,
    forge: ForgeClient,
    fetcher: ArchiveFetcher,
    download_root: Path,
    base_url: str,
) -> ProgressRecord:
    info: Optional[RepoInfo] = None
    try:
        repo = parse_repo(repo_id)
        info = await forge.get_repo(repo)

        download_dir = download_root / repo.owner / repo.name
        # 分支名可能带 /，例如 release/1.x
        archive_name = f"{info.default_branch.replace('/', '-')}.zip"

        download_dir.mkdir(parents=True, exist_ok=True)
        url = repo.archive_url(base_url, info.default_branch)
        size = await fetcher.fetch(url, download_dir / archive_name)
        await _write_metadata(download_dir / METADATA_FILENAME, info)
    except PER_REPO_ERRORS as e:
        message = str(e) or type(e).__name__
        logger.error(f"**** ERROR: {message}")
        return _record(repo_id, info, Status.ERROR, message)

    logger.info(f"downloaded {download_dir / archive_name} ({size} bytes)")
    return _record(repo_id, info, Status.SUCCESS)


async def _write_metadata(path: Path, info: RepoInfo) -> None:
    async with aiofiles.open(path, "wb") as fp:
        await fp.write(info.dumps())


def _record(
    repo_id: str,
    info: Optional[RepoInfo],
    status: Status,
    error: str = "",
) -> ProgressRecord:
    return ProgressRecord(
        repo=repo_id,
        name=info.name if info else None,
        description=info.description if info else None,
        primary_branch=info.default_branch if info else None,
        status=status,
        error=error,
    )
