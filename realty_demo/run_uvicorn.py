import os

import uvicorn

from realty_demo.logging_config import configure_logging


def main() -> None:
    """
    Uvicorn launcher.
    - Reads PORT from env, defaults to 5000 for local dev.
    - Logging configured before Uvicorn starts.
    - Single worker: demo state lives in process memory.
    """

    # Must run before uvicorn.run() so the server inherits logging.
    configure_logging()

    port = int(os.environ.get("PORT", 5000))

    uvicorn.run(
        "realty_demo.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        workers=1,
        log_config=None,
        use_colors=False,
    )


if __name__ == "__main__":
    main()
