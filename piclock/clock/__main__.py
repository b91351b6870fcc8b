"""Clock service entrypoint.

Renders the time and weather on the configured displays until SIGTERM or
SIGINT.

Usage: python -m piclock.clock
"""

from piclock.clock.service import main

if __name__ == "__main__":
    main()
