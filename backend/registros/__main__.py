"""Process entry point: `python -m registros` or the `registros-api` script."""

import uvicorn

from registros.config import settings


def main() -> None:
    uvicorn.run(
        "registros.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
