"""Run the Showdown server: python -m showdown"""

import uvicorn

from showdown.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "showdown.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
