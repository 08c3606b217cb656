"""Allow running as `python -m sharingan`."""

import sys

from sharingan.cli import main

if __name__ == '__main__':
    sys.exit(main())
