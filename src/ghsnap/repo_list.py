import logging
from pathlib import Path
from typing import List

from .errors import ListLoadError

logger = logging.getLogger(__name__)


# repo list file format:
#    owner1/name1
#    owner2/name2
#    # comment
#    ...
def load_repo_list(path: Path) -> List[str]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ListLoadError(f"cannot read repo list {path}: {e}") from e

    repos = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        repos.append(line)

    logger.debug(f"loaded {len(repos)} repos from {path}")
    return repos
