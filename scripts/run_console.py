#!/usr/bin/env python3
"""Serve the stack console with uvicorn using the configured host and port."""

from __future__ import annotations

import uvicorn

from core.config import settings


def main() -> None:
    uvicorn.run(
        "api.main:app",
        host=settings.console_host,
        port=settings.console_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
