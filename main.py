"""
Run a CHIP-8 ROM in a window.

    python main.py path/to/game.ch8 --ipf 10 --quirks default
"""

import sys

from chipjax.host import main

if __name__ == "__main__":
    sys.exit(main())
