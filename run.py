import sys

from sand_cave.run import main

if __name__ == "__main__":
    sys.exit(main())
