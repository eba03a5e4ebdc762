import logging

from rich.logging import RichHandler


def setup_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=debug, markup=False)],
        force=True,
    )
    # aiohttp 的 debug 日志太多
    logging.getLogger("asyncio").setLevel(logging.WARNING)
