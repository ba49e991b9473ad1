import logging

import uvicorn

from larder.utilities.config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL, DATA_DIR


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Print a friendly message that points to the URL you can open in a browser
    print(f"Larder API on http://{APP_HOST}:{APP_PORT}/docs (data in {DATA_DIR}, Press CTRL+C to quit)")
    uvicorn.run("larder.api.api_run:app", host=APP_HOST, port=APP_PORT, reload=DEBUG, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
