"""Start the upload service: ``python -m quizgen_extractor``."""

import uvicorn

from quizgen_extractor.api import create_app
from quizgen_extractor.config import ServiceConfig


def main() -> None:
    config = ServiceConfig.from_env()
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
