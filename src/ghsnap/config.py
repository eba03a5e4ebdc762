import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from mashumaro.mixins.toml import DataClassTOMLMixin

logger = logging.getLogger(__name__)


@dataclass
class DownloadConfig:
    input_file: str = field(default="archive-repos.txt")
    download_root: str = field(default=".")
    # None 表示不限制
    limit: Optional[int] = field(default=None)
    progress_log: str = field(default="repo_progress.jsonl")
    base_url: str = field(default="https://github.com")
    api_url: str = field(default="https://api.github.com")
    token_env: str = field(default="GH_ACCESS_TOKEN")
    timeout: float = field(default=300)
    chunk_size: int = field(default=1 << 20)

    def __post_init__(self):
        if self.limit is not None and self.limit < 1:
            raise ValueError(f"limit must be positive, got {self.limit}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @property
    def access_token(self) -> Optional[str]:
        return os.environ.get(self.token_env) or None


@dataclass
class Config(DataClassTOMLMixin):
    download: DownloadConfig = field(default_factory=DownloadConfig)


CONFIG_FILE_PATH = Path("ghsnap.toml")


def load_config(cfg_path: Optional[Path] = None) -> Config:
    if cfg_path is None:
        cfg_path = CONFIG_FILE_PATH

    if not cfg_path.exists():
        logger.info(f"not found {cfg_path}, use default config")
        return Config()
    content = cfg_path.read_text(encoding="utf-8")
    logger.info(f"use config from {cfg_path}")
    config = Config.from_toml(content)
    logger.debug(f"{config=}")
    return config
