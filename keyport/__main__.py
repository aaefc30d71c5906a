"""Allow ``python -m keyport``."""

import sys

from keyport.cli import main


if __name__ == "__main__":
    sys.exit(main())
