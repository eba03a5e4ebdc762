"""progress log

One JSON object per line, appended after every attempted repo.
A repo that has any `success` record is skipped on the next run.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Set

import orjson
from mashumaro.mixins.orjson import DataClassORJSONMixin

from .errors import ProgressLogParseError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Status(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


def _now() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class ProgressRecord(DataClassORJSONMixin):
    repo: str
    name: Optional[str]
    description: Optional[str]
    primary_branch: Optional[str]
    status: Status
    error: str = ""
    timestamp: str = field(default_factory=_now)

    @property
    def ok(self) -> bool:
        return self.status is Status.SUCCESS


def parse_record(line: bytes) -> ProgressRecord:
    try:
        data = orjson.loads(line)
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        return ProgressRecord.from_dict(data)
    except (ValueError, LookupError, TypeError) as e:
        raise ProgressLogParseError(str(e)) from e


class ProgressStore:
    def __init__(self, path: Path):
        self.path = path

    def records(self) -> Iterator[ProgressRecord]:
        # 按字节读取，坏掉的 UTF-8 只影响那一行
        with self.path.open("rb") as fp:
            for lineno, line in enumerate(fp, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield parse_record(line)
                except ProgressLogParseError as e:
                    logger.warning(f"{self.path}:{lineno}: skip bad record: {e}")

    def load_skip_set(self) -> Set[str]:
        if not self.path.exists():
            logger.debug(f"no progress log at {self.path}")
            return set()

        try:
            return {r.repo for r in self.records() if r.ok}
        except OSError as e:
            logger.warning(f"cannot read progress log {self.path}: {e}")
            return set()

    def append(self, record: ProgressRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        line = record.to_jsonb() + b"\n"
        # 追加写，写完立即落盘，崩溃后也不会丢记录
        with self.path.open("ab+") as fp:
            # 上次崩溃可能留下没有换行的半行，先补上换行
            if fp.seek(0, os.SEEK_END) > 0:
                fp.seek(-1, os.SEEK_END)
                if fp.read(1) != b"\n":
                    line = b"\n" + line
            fp.write(line)
            fp.flush()
            os.fsync(fp.fileno())
