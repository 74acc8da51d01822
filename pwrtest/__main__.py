import sys

from pwrtest.cli import main

if __name__ == "__main__":
    sys.exit(main())
