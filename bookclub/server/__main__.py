"""Run the BookClub API with uvicorn: ``python -m bookclub.server``."""

import uvicorn

from bookclub.server.core.config import settings


def main() -> None:
    uvicorn.run(
        "bookclub.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
