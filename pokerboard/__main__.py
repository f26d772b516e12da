"""Run the API with uvicorn: ``python -m pokerboard``."""

import uvicorn

from pokerboard.core.config import settings


def main():
    uvicorn.run(
        "pokerboard.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,  # keep the JSON handler installed by pokerboard.main
    )


if __name__ == "__main__":
    main()
