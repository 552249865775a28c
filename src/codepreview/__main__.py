"""Allow ``python -m codepreview``."""

from __future__ import annotations

from codepreview.ui.cli import main


if __name__ == "__main__":
    main()
