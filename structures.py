"""Data structures for the VSFS image."""

import struct
from typing import List, Sequence

from constants import (
    BLOCK_SIZE, MAGIC_NUMBER, TOTAL_BLOCKS, INODE_BITMAP_BLOCK_NO,
    DATA_BITMAP_BLOCK_NO, INODE_TABLE_START_BLOCK, DATA_BLOCK_START,
    INODE_SIZE, MAX_INODES
)


class SuperBlock:
    """Represents the file system superblock."""

    FORMAT = '<H8I'
    HEADER_SIZE = struct.calcsize(FORMAT)  # 34 bytes, rest of the block is reserved

    def __init__(self):
        self.magic = MAGIC_NUMBER
        self.block_size = BLOCK_SIZE
        self.total_blocks = TOTAL_BLOCKS
        self.inode_bitmap_block = INODE_BITMAP_BLOCK_NO
        self.data_bitmap_block = DATA_BITMAP_BLOCK_NO
        self.inode_table_start = INODE_TABLE_START_BLOCK
        self.data_block_start = DATA_BLOCK_START
        self.inode_size = INODE_SIZE
        self.inode_count = MAX_INODES
        self.reserved = b''

    def pack(self) -> bytes:
        """Pack superblock into one block."""
        data = struct.pack(self.FORMAT,
                           self.magic,
                           self.block_size,
                           self.total_blocks,
                           self.inode_bitmap_block,
                           self.data_bitmap_block,
                           self.inode_table_start,
                           self.data_block_start,
                           self.inode_size,
                           self.inode_count)
        data += self.reserved[:BLOCK_SIZE - len(data)]
        padding_size = BLOCK_SIZE - len(data)
        return data + (b'\x00' * padding_size)

    @staticmethod
    def unpack(data: bytes) -> 'SuperBlock':
        """Unpack superblock from bytes."""
        sb = SuperBlock()
        values = struct.unpack(SuperBlock.FORMAT, data[:SuperBlock.HEADER_SIZE])
        sb.magic = values[0]
        sb.block_size = values[1]
        sb.total_blocks = values[2]
        sb.inode_bitmap_block = values[3]
        sb.data_bitmap_block = values[4]
        sb.inode_table_start = values[5]
        sb.data_block_start = values[6]
        sb.inode_size = values[7]
        sb.inode_count = values[8]
        sb.reserved = bytes(data[SuperBlock.HEADER_SIZE:BLOCK_SIZE])
        return sb


class Inode:
    """Represents an inode structure."""

    FORMAT = '<14I'
    FIELDS_SIZE = struct.calcsize(FORMAT)  # 56 bytes, padded to INODE_SIZE

    def __init__(self):
        self.mode = 0
        self.uid = 0
        self.gid = 0
        self.size = 0
        self.atime = 0
        self.ctime = 0
        self.mtime = 0
        self.dtime = 0
        self.links = 0
        self.blocks = 0
        self.direct = 0
        self.indirect = 0
        self.double_indirect = 0
        self.triple_indirect = 0

    @property
    def is_valid(self) -> bool:
        """An inode is in use when it has links and was never deleted."""
        return self.links > 0 and self.dtime == 0

    def pack(self) -> bytes:
        """Pack inode into a full 256-byte slot."""
        packed = struct.pack(self.FORMAT,
                             self.mode,
                             self.uid,
                             self.gid,
                             self.size,
                             self.atime,
                             self.ctime,
                             self.mtime,
                             self.dtime,
                             self.links,
                             self.blocks,
                             self.direct,
                             self.indirect,
                             self.double_indirect,
                             self.triple_indirect)
        return packed + b'\x00' * (INODE_SIZE - len(packed))

    @staticmethod
    def unpack(data: bytes) -> 'Inode':
        """Unpack inode from bytes."""
        if len(data) < Inode.FIELDS_SIZE:
            data = data + b'\x00' * (Inode.FIELDS_SIZE - len(data))

        inode = Inode()
        values = struct.unpack(Inode.FORMAT, data[:Inode.FIELDS_SIZE])
        (inode.mode, inode.uid, inode.gid, inode.size,
         inode.atime, inode.ctime, inode.mtime, inode.dtime,
         inode.links, inode.blocks, inode.direct, inode.indirect,
         inode.double_indirect, inode.triple_indirect) = values
        return inode

    def __repr__(self):
        return (f"Inode(links={self.links}, dtime={self.dtime}, direct={self.direct}, "
                f"indirect={self.indirect}, double_indirect={self.double_indirect}, "
                f"triple_indirect={self.triple_indirect})")


class Bitmap:
    """One bit per entry, least significant bit first within each byte."""

    @staticmethod
    def unpack(data: bytes, count: int) -> List[bool]:
        """Unpack the first count entries; trailing bits are ignored."""
        if count > len(data) * 8:
            raise ValueError(f"Bitmap of {len(data)} bytes cannot hold {count} entries")
        return [bool((data[i // 8] >> (i % 8)) & 1) for i in range(count)]

    @staticmethod
    def pack(bits: Sequence[bool]) -> bytes:
        """Pack entries into one block."""
        if len(bits) > BLOCK_SIZE * 8:
            raise ValueError(f"{len(bits)} entries do not fit in one block")
        raw = bytearray(BLOCK_SIZE)
        for i, used in enumerate(bits):
            if used:
                raw[i // 8] |= 1 << (i % 8)
        return bytes(raw)
