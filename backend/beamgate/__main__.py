import logging

import uvicorn

from beamgate.config import get_settings
from beamgate.main import create_app


def main() -> None:
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not settings.api_key_configured:
        logging.getLogger(__name__).warning(
            "HB_API_KEY is not set; every request will fail with ConfigurationError"
        )

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
