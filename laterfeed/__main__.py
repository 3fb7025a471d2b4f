"""Run the laterfeed server: python -m laterfeed"""

import uvicorn

from .api.app import create_app
from .config.settings import settings
from .logging_config import setup_logging


def main():
    setup_logging(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
