"""Allow ``python -m trellis``."""
import sys

from trellis.cli._dispatcher import main

if __name__ == "__main__":
    sys.exit(main())
