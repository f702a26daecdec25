"""CLI entry point: python -m powerplant.mcp [save_dir]"""

from __future__ import annotations

import logging
import sys


def main() -> None:
    from powerplant.cli import DEFAULT_SAVE_DIR

    save_dir = sys.argv[1] if len(sys.argv) > 1 else str(DEFAULT_SAVE_DIR)

    # stdout carries the protocol; keep log output on stderr
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    from powerplant.mcp.server import create_server
    from powerplant.persistence import FileBlobStore, PersistenceAdapter

    server = create_server(PersistenceAdapter(FileBlobStore(save_dir)))
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
