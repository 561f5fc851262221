"""Run script.

Lets the CLI run with `python -m companyinfo.main` during development, besides
the `companyinfo` console script and `python -m companyinfo`.
"""

from __future__ import annotations

import sys

# Workaround for UnicodeEncodeError on Windows terminals (cp1252 vs utf-8):
# registry labels and values are Georgian.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from companyinfo.cli.main import run  # noqa: E402


def main() -> None:
    run()


if __name__ == "__main__":
    main()
