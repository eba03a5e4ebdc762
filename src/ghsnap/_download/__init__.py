from .archive import ArchiveFetcher
from .forge import ForgeClient, RepoInfo
from .web import RunSummary, download_repos, process_repos

__all__ = [
    "ArchiveFetcher",
    "ForgeClient",
    "RepoInfo",
    "RunSummary",
    "download_repos",
    "process_repos",
]
