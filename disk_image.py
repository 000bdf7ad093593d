"""Read-only block access to a VSFS image file."""

from constants import BLOCK_SIZE, TOTAL_BLOCKS
from errors import ImageIOError


class DiskImage:
    """Reads fixed-size blocks from an image file."""

    def __init__(self, path: str, blocks: int = TOTAL_BLOCKS):
        self.path = path
        self.blocks = blocks
        self.reads = 0
        self.fd = None

    def open(self) -> 'DiskImage':
        """Open the image for reading."""
        try:
            self.fd = open(self.path, 'rb')
        except OSError as e:
            raise ImageIOError(f"Cannot open image: {self.path}: {e.strerror or e}") from e
        return self

    def close(self):
        """Close the image."""
        if self.fd:
            self.fd.close()
            self.fd = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def read(self, block_num: int) -> bytes:
        """Read a block from the image. Every call goes to the file."""
        if self.fd is None:
            raise ImageIOError(f"{self.path}: image is not open")
        if block_num < 0 or block_num >= self.blocks:
            raise ImageIOError(f"{self.path}: invalid block number {block_num}")

        try:
            self.fd.seek(block_num * BLOCK_SIZE)
            data = self.fd.read(BLOCK_SIZE)
        except OSError as e:
            raise ImageIOError(f"{self.path}: error reading block {block_num}: {e}") from e

        if len(data) < BLOCK_SIZE:
            raise ImageIOError(f"{self.path}: short read of block {block_num} "
                               f"({len(data)} of {BLOCK_SIZE} bytes)")
        self.reads += 1
        return data
