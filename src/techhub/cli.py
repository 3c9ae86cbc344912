"""CLI entry point for techhub."""

import argparse
import logging
from typing import Optional


def main(argv: Optional[list[str]] = None) -> None:
    """Serve the TechHub API."""
    from dotenv import load_dotenv

    load_dotenv()  # Load .env file (e.g. AI_GATEWAY_API_KEY, GITHUB_TOKEN)

    import uvicorn

    from techhub.app import create_app
    from techhub.config import Settings

    parser = argparse.ArgumentParser(prog="techhub", description="Serve the TechHub API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    # Settings stay unresolved so the gateway key is read per request
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
