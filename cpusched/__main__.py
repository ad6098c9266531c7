"""
Allows running the simulator with ``python -m cpusched``.
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
