import logging
from pathlib import Path
from typing import Optional

import aiofiles
from aiohttp import ClientSession as Session
from rich.progress import Progress

from ..errors import ArchiveFetchError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1 << 20  # 1 MB


class ArchiveFetcher:
    def __init__(
        self,
        client: Session,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        progress: Optional[Progress] = None,
    ):
        self.client = client
        self.chunk_size = chunk_size
        self.progress = progress

    async def fetch(self, url: str, dst: Path) -> int:
        """stream `url` into `dst`, return the number of bytes written

        data goes to `<dst>.part` first and is renamed when complete,
        so `dst` is never a truncated archive.
        """
        part = dst.with_name(dst.name + ".part")
        logger.debug(f"GET {url} -> {part}")

        try:
            size = await self._stream(url, part, dst.name)
        except Exception:
            part.unlink(missing_ok=True)
            raise

        part.replace(dst)
        return size

    async def _stream(self, url: str, path: Path, label: str) -> int:
        async with self.client.get(url) as resp:
            if not resp.ok:
                raise ArchiveFetchError(f"GET {url}: {resp.status} {resp.reason}")

            task_id = None
            if self.progress is not None:
                # codeload 通常不返回 Content-Length
                task_id = self.progress.add_task(label, total=resp.content_length)

            size = 0
            try:
                async with aiofiles.open(path, "wb") as fp:
                    async for chunk in resp.content.iter_chunked(self.chunk_size):
                        await fp.write(chunk)
                        size += len(chunk)
                        if task_id is not None:
                            self.progress.update(task_id, advance=len(chunk))
            finally:
                if task_id is not None:
                    self.progress.remove_task(task_id)

        return size
