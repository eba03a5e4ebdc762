import pytest

from ghsnap._download.forge import RepoInfo
from ghsnap.errors import ArchiveFetchError, MetadataFetchError


class FakeForge:
    def __init__(self, branches=None, fail=()):
        self.branches = branches or {}
        self.fail = set(fail)
        self.calls = []

    async def get_repo(self, repo):
        self.calls.append(str(repo))
        if str(repo) in self.fail:
            raise MetadataFetchError(f"GET /repos/{repo}: 404 Not Found")
        return RepoInfo.from_payload(
            {
                "name": repo.name,
                "full_name": str(repo),
                "description": f"the {repo.name}",
                "default_branch": self.branches.get(str(repo), "main"),
            }
        )


class FakeFetcher:
    def __init__(self, fail=()):
        self.fail = set(fail)
        self.calls = []

    async def fetch(self, url, dst):
        self.calls.append(url)
        if url in self.fail:
            raise ArchiveFetchError(f"GET {url}: 500 Internal Server Error")
        dst.write_bytes(b"PK zip")
        return 6


@pytest.fixture
def forge():
    return FakeForge()


@pytest.fixture
def fetcher():
    return FakeFetcher()
