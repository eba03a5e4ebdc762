"""download github repos as zip snapshots

reads `org/project` lines from the input file and saves
  <output>/<org>/<project>/<default_branch>.zip
  <output>/<org>/<project>/repo_info.json

every attempt is appended to the progress log; repos that already
succeeded are skipped, so an interrupted run can simply be restarted.
the access token is read from $GH_ACCESS_TOKEN.

only one instance may run against a progress log / output dir at a time.
"""

import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from ._download import RunSummary, download_repos
from .config import DownloadConfig, load_config
from .errors import GhsnapError
from .logging_config import setup_logging
from .repo_list import load_repo_list

logger = logging.getLogger(__name__)


def download(config: DownloadConfig) -> RunSummary:
    input_file = Path(config.input_file)
    repos = load_repo_list(input_file)

    logger.info(f"Started at {datetime.now()}.  Filename: {input_file}.")
    logger.info(f"Found {len(repos)} repos.")
    if config.limit is not None:
        logger.info(f"Limit: {config.limit}")

    Path(config.download_root).mkdir(parents=True, exist_ok=True)
    summary = download_repos(repos, config)

    logger.info(f"Finished at {datetime.now()}")
    return summary


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=__doc__, formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("-c", "--config", type=Path, help="config file (ghsnap.toml)")
    parser.add_argument("-i", "--input", help="file listing org/project per line")
    parser.add_argument("-o", "--output", help="download root directory")
    parser.add_argument(
        "-n", "--limit", type=_positive_int, help="stop after this many repos"
    )
    parser.add_argument("--progress-log", help="progress log file")
    parser.add_argument("--debug", action="store_true", help="Set log level as DEBUG")
    return parser.parse_args(argv)


def _apply_args(config: DownloadConfig, args: argparse.Namespace) -> DownloadConfig:
    if args.input is not None:
        config.input_file = args.input
    if args.output is not None:
        config.download_root = args.output
    if args.limit is not None:
        config.limit = args.limit
    if args.progress_log is not None:
        config.progress_log = args.progress_log
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.debug)

    logger.debug(f"{args=}")

    try:
        config = _apply_args(load_config(args.config).download, args)
        summary = download(config)
    except (GhsnapError, ValueError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1

    print(summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
