"""Allow running as ``python -m metrix``."""

from metrix.metrix import main

if __name__ == '__main__':
    main()
