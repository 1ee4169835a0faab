"""blogauth entrypoint.

Run with:
  python -m blogauth
"""

import logging
import os

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("BLOGAUTH_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("BLOGAUTH_HOST", "0.0.0.0")
    port = int(os.getenv("BLOGAUTH_PORT", "8000"))
    reload = os.getenv("BLOGAUTH_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run("blogauth.app:create_app", factory=True, host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
