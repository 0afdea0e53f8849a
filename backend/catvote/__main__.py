"""Run the CatVote API with uvicorn: `python -m catvote`."""

import uvicorn

from catvote.config import settings


def main() -> None:
    uvicorn.run(
        "catvote.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
