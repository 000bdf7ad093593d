"""Global constants for the VSFS image layout."""

# Block layout
BLOCK_SIZE = 4096  # 4KB blocks
TOTAL_BLOCKS = 64
SUPERBLOCK_BLOCK_NO = 0
INODE_BITMAP_BLOCK_NO = 1
DATA_BITMAP_BLOCK_NO = 2
INODE_TABLE_START_BLOCK = 3
INODE_TABLE_BLOCKS = 5
DATA_BLOCK_START = 8

# Inode table
INODE_SIZE = 256  # Size of each inode slot in bytes
INODES_PER_BLOCK = BLOCK_SIZE // INODE_SIZE  # 16 inodes per block
MAX_INODES = INODES_PER_BLOCK * INODE_TABLE_BLOCKS  # 80 inodes
MAX_DATA_BLOCKS = TOTAL_BLOCKS - DATA_BLOCK_START  # 56 data blocks

MAGIC_NUMBER = 0xD34D
