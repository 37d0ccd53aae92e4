"""Logging setup shared by the web app and the CLI."""
import logging


def setup_logging(level: str = "INFO") -> None:
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    for name in ("werkzeug", "gestormaterias"):
        logging.getLogger(name).setLevel(resolved)
