"""Run the RealChat server with uvicorn: `python -m realchat`."""

import uvicorn

from realchat.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "realchat.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
