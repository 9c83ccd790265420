import sys

from src.regionocr.app import main

if __name__ == '__main__':
    # main() owns argument parsing, the Qt event loop and the exit status.
    sys.exit(main())
