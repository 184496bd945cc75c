from __future__ import annotations

import logging


LOG_FORMAT = "[BlockCrush] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the package logger.

    Calling it again only changes the level.
    """
    root = logging.getLogger("block_crush")
    root.setLevel(level)
    if not any(getattr(h, "_block_crush", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._block_crush = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root
