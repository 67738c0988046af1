"""
coinbase_clock – Main entry point.

Runs the server-time check (see actions/check_server_time.py).
"""

import sys

from actions.check_server_time import main


if __name__ == "__main__":
    sys.exit(main())
