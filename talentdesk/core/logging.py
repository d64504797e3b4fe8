"""Process-wide logging setup."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    resolved = getattr(logging, str(level or "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)

    # SQL echo is controlled by settings.DEBUG, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if resolved <= logging.DEBUG else logging.WARNING
    )
