"""Build VSFS images, clean or deliberately damaged."""

import sys

from constants import (
    BLOCK_SIZE, TOTAL_BLOCKS, SUPERBLOCK_BLOCK_NO, INODE_BITMAP_BLOCK_NO,
    DATA_BITMAP_BLOCK_NO, INODE_TABLE_START_BLOCK, INODE_SIZE,
    MAX_INODES, MAX_DATA_BLOCKS
)
from structures import SuperBlock, Inode, Bitmap


class ImageBuilder:
    """In-memory VSFS image, written out in one go."""

    def __init__(self):
        self.superblock = SuperBlock()
        self.inode_bitmap = [False] * MAX_INODES
        self.data_bitmap = [False] * MAX_DATA_BLOCKS
        self.inodes = [Inode() for _ in range(MAX_INODES)]

    def set_superblock(self, **fields) -> 'ImageBuilder':
        for name, value in fields.items():
            if not hasattr(self.superblock, name):
                raise AttributeError(f"SuperBlock has no field '{name}'")
            setattr(self.superblock, name, value)
        return self

    def set_inode(self, inode_num: int, inode: Inode) -> 'ImageBuilder':
        self.inodes[inode_num] = inode
        return self

    def mark_inode(self, inode_num: int, used: bool = True) -> 'ImageBuilder':
        self.inode_bitmap[inode_num] = used
        return self

    def mark_data_block(self, block: int, used: bool = True) -> 'ImageBuilder':
        self.data_bitmap[block] = used
        return self

    def add_file(self, inode_num: int, direct: int, **fields) -> Inode:
        """Create a valid inode and mark it and its direct block in the bitmaps."""
        inode = Inode()
        inode.mode = 0o100644
        inode.links = 1
        inode.blocks = 1
        inode.size = BLOCK_SIZE
        inode.direct = direct
        for name, value in fields.items():
            if not hasattr(inode, name):
                raise AttributeError(f"Inode has no field '{name}'")
            setattr(inode, name, value)

        self.set_inode(inode_num, inode)
        self.mark_inode(inode_num)
        if 0 <= direct < MAX_DATA_BLOCKS:
            self.mark_data_block(direct)
        return inode

    def to_bytes(self) -> bytes:
        image = bytearray(TOTAL_BLOCKS * BLOCK_SIZE)

        def put(block_num, data):
            image[block_num * BLOCK_SIZE:(block_num + 1) * BLOCK_SIZE] = data

        put(SUPERBLOCK_BLOCK_NO, self.superblock.pack())
        put(INODE_BITMAP_BLOCK_NO, Bitmap.pack(self.inode_bitmap))
        put(DATA_BITMAP_BLOCK_NO, Bitmap.pack(self.data_bitmap))

        table_start = INODE_TABLE_START_BLOCK * BLOCK_SIZE
        for i, inode in enumerate(self.inodes):
            offset = table_start + i * INODE_SIZE
            image[offset:offset + INODE_SIZE] = inode.pack()

        return bytes(image)

    def write(self, path: str):
        with open(path, 'wb') as f:
            f.write(self.to_bytes())


def main():
    if len(sys.argv) != 2:
        print(f"Usage: {sys.argv[0]} <output.img>", file=sys.stderr)
        sys.exit(1)

    ImageBuilder().write(sys.argv[1])
    print(f"Wrote clean image: {TOTAL_BLOCKS} blocks, {MAX_INODES} inodes")


if __name__ == "__main__":
    main()
