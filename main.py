# main.py
import sys

from road_router.cli import main

if __name__ == "__main__":
    sys.exit(main())
