"""Mimic: launcher. Optionally imports a Slack export, then serves the bot."""

import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn

from mimic.config import Settings


def main():
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Mimic chat bot")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--import-export", type=Path, default=None, metavar="DIR",
                        help="Import a Slack export directory before serving")
    parser.add_argument("--import-only", action="store_true",
                        help="Exit after --import-export instead of serving")
    parser.add_argument("--reload", action="store_true",
                        help="Restart the server on code changes")
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.data_dir:
        # create_app() re-reads settings from the environment
        os.environ["DATA_DIR"] = str(args.data_dir.resolve())
        settings = settings.model_copy(update={"data_dir": args.data_dir.resolve()})

    if args.import_export:
        from mimic.importer import import_export
        from mimic.storage import Storage

        try:
            total = import_export(Storage(settings.data_dir), args.import_export)
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Imported {total} messages into {settings.data_dir}")
        if args.import_only:
            return
    elif args.import_only:
        parser.error("--import-only requires --import-export")

    print(f"Starting Mimic on http://localhost:{settings.port} ...")
    uvicorn.run(
        "mimic.app:create_app", factory=True,
        host=settings.host, port=settings.port, reload=args.reload,
    )


if __name__ == "__main__":
    main()
