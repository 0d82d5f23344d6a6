"""Development entry point (no install).

Runs the interactive session with `python main.py`, or `python main.py doctor`.
The packages live under `src/`, which is put on `sys.path` when the project
is not installed.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main() -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    # Menus and status lines contain emoji and arrows; cp1252 consoles cannot encode them.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
