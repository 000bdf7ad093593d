"""Main entry point for the VSFS consistency checker."""

import sys
from typing import List, Optional

from checker import FileSystemChecker
from disk_image import DiskImage
from errors import ImageIOError, UsageError
from reporter import Reporter


def parse_args(argv: List[str]) -> str:
    """Return the image path, the only accepted argument."""
    if len(argv) != 2:
        prog = argv[0] if argv else 'vsfsck'
        raise UsageError(f"Usage: {prog} <vsfs.img>")
    return argv[1]


def check_image(path: str, reporter: Optional[Reporter] = None) -> Reporter:
    """Check the image at path. Raises ImageIOError if it cannot be read."""
    reporter = reporter if reporter is not None else Reporter()
    with DiskImage(path) as disk:
        FileSystemChecker(disk, reporter).run()
    return reporter


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Findings never change the exit status."""
    argv = sys.argv if argv is None else argv
    try:
        path = parse_args(argv)
        check_image(path)
    except UsageError as e:
        print(e, file=sys.stderr)
        return 1
    except ImageIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
