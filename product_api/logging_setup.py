# product_api/logging_setup.py
import logging

from rich.logging import RichHandler


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # uvicorn's access log duplicates the request line logged by the app
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
