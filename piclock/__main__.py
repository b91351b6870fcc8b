"""Clock service entrypoint.

Usage: python -m piclock
"""

from piclock.clock.service import main

if __name__ == "__main__":
    main()
