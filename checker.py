"""Consistency checks for a VSFS image."""

from typing import List

from constants import (
    BLOCK_SIZE, MAGIC_NUMBER, TOTAL_BLOCKS, SUPERBLOCK_BLOCK_NO,
    INODE_BITMAP_BLOCK_NO, DATA_BITMAP_BLOCK_NO, INODE_TABLE_START_BLOCK,
    DATA_BLOCK_START, INODE_SIZE, MAX_INODES, MAX_DATA_BLOCKS
)
from structures import SuperBlock, Inode, Bitmap
from disk_image import DiskImage
import reporter as rpt
from reporter import Reporter


class CheckState:
    """Declared and observed usage for one check run."""

    def __init__(self):
        self.inode_bitmap = [False] * MAX_INODES
        self.data_bitmap = [False] * MAX_DATA_BLOCKS
        self.inode_used = [False] * MAX_INODES
        self.data_block_used = [False] * MAX_DATA_BLOCKS
        self.block_ref_count = [0] * MAX_DATA_BLOCKS


class FileSystemChecker:
    """Runs every check against an open image.

    Geometry always comes from the constants module. The superblock is
    validated against it but never trusted to locate anything.
    """

    # (attribute, expected value, label)
    LAYOUT_FIELDS = [
        ('inode_bitmap_block', INODE_BITMAP_BLOCK_NO, 'inode bitmap block'),
        ('data_bitmap_block', DATA_BITMAP_BLOCK_NO, 'data bitmap block'),
        ('inode_table_start', INODE_TABLE_START_BLOCK, 'inode table start block'),
        ('data_block_start', DATA_BLOCK_START, 'data block start'),
    ]

    def __init__(self, disk: DiskImage, reporter: Reporter = None):
        self.disk = disk
        self.reporter = reporter if reporter is not None else Reporter()

    def run(self) -> CheckState:
        """Run every phase in order. Findings never stop the run."""
        state = CheckState()
        out = self.reporter

        self.check_superblock()
        out.info("Superblock validation completed.")

        self.load_bitmaps(state)
        out.info("Bitmaps loaded successfully.")

        self.check_inodes(state)
        out.info("Inode checks completed.")

        self.check_inode_bitmap(state)
        self.check_data_bitmap(state)
        out.info("Bitmap consistency checks completed.")

        self.check_duplicate_blocks(state)
        self.check_bad_blocks()
        out.info("Block reference checks completed.")

        return state

    # ---- superblock ----

    def check_superblock(self) -> SuperBlock:
        """Validate every superblock field against the fixed layout."""
        sb = SuperBlock.unpack(self.disk.read(SUPERBLOCK_BLOCK_NO))
        out = self.reporter

        if sb.magic != MAGIC_NUMBER:
            out.error(rpt.BAD_MAGIC,
                      f"Invalid magic number in superblock "
                      f"(expected 0x{MAGIC_NUMBER:04X}, found 0x{sb.magic:04X}).",
                      field='magic', expected=MAGIC_NUMBER, actual=sb.magic)
        if sb.block_size != BLOCK_SIZE:
            out.error(rpt.BAD_BLOCK_SIZE,
                      f"Invalid block size in superblock "
                      f"(expected {BLOCK_SIZE}, found {sb.block_size}).",
                      field='block_size', expected=BLOCK_SIZE, actual=sb.block_size)
        if sb.total_blocks != TOTAL_BLOCKS:
            out.error(rpt.BAD_TOTAL_BLOCKS,
                      f"Invalid total block count in superblock "
                      f"(expected {TOTAL_BLOCKS}, found {sb.total_blocks}).",
                      field='total_blocks', expected=TOTAL_BLOCKS, actual=sb.total_blocks)

        for attr, expected, label in self.LAYOUT_FIELDS:
            actual = getattr(sb, attr)
            if actual != expected:
                out.error(rpt.BAD_LAYOUT_POINTER,
                          f"Incorrect {label} in superblock "
                          f"(expected {expected}, found {actual}).",
                          field=attr, expected=expected, actual=actual)

        if sb.inode_size != INODE_SIZE:
            out.error(rpt.BAD_INODE_SIZE,
                      f"Invalid inode size in superblock "
                      f"(expected {INODE_SIZE}, found {sb.inode_size}).",
                      field='inode_size', expected=INODE_SIZE, actual=sb.inode_size)
        if sb.inode_count > MAX_INODES:
            out.error(rpt.BAD_INODE_COUNT,
                      f"Inode count in superblock exceeds maximum allowed "
                      f"(maximum {MAX_INODES}, found {sb.inode_count}).",
                      field='inode_count', expected=MAX_INODES, actual=sb.inode_count)

        return sb

    # ---- decoding ----

    def load_bitmap(self, block_num: int, count: int) -> List[bool]:
        return Bitmap.unpack(self.disk.read(block_num), count)

    def load_bitmaps(self, state: CheckState):
        state.inode_bitmap = self.load_bitmap(INODE_BITMAP_BLOCK_NO, MAX_INODES)
        state.data_bitmap = self.load_bitmap(DATA_BITMAP_BLOCK_NO, MAX_DATA_BLOCKS)

    def load_inode(self, inode_num: int) -> Inode:
        """Load an inode from the inode table."""
        if inode_num < 0 or inode_num >= MAX_INODES:
            raise ValueError(f"Inode number {inode_num} out of range")

        # Calculate block and offset
        block_num = INODE_TABLE_START_BLOCK + (inode_num * INODE_SIZE) // BLOCK_SIZE
        block_offset = (inode_num * INODE_SIZE) % BLOCK_SIZE

        data = self.disk.read(block_num)
        return Inode.unpack(data[block_offset:block_offset + INODE_SIZE])

    # ---- passes ----

    def check_inodes(self, state: CheckState) -> int:
        """Check inodes against the inode bitmap and record what they use.

        Only the direct pointer counts towards block usage. Blocks reachable
        solely through indirect pointers show up as unreferenced later.
        """
        out = self.reporter
        errors = 0

        for i in range(MAX_INODES):
            inode = self.load_inode(i)
            valid = inode.is_valid

            if state.inode_bitmap[i] and not valid:
                out.error(rpt.INODE_NOT_VALID,
                          f"Inode {i} marked used in bitmap but is invalid.", inode=i)
                errors += 1
            if not state.inode_bitmap[i] and valid:
                out.error(rpt.INODE_NOT_MARKED,
                          f"Inode {i} is valid but not marked used in bitmap.", inode=i)
                errors += 1

            if not valid:
                continue

            state.inode_used[i] = True
            block = inode.direct
            if block >= MAX_DATA_BLOCKS:
                out.error(rpt.BAD_DIRECT_BLOCK,
                          f"Inode {i} has invalid direct block {block}.", inode=i, block=block)
                errors += 1
                continue

            state.data_block_used[block] = True
            state.block_ref_count[block] += 1
            if not state.data_bitmap[block]:
                out.error(rpt.BLOCK_NOT_MARKED,
                          f"Inode {i} references block {block} not marked in data bitmap.",
                          inode=i, block=block)
                errors += 1

        return errors

    def check_data_bitmap(self, state: CheckState) -> int:
        """Compare the data bitmap with the blocks inodes actually use."""
        out = self.reporter
        errors = 0

        for b in range(MAX_DATA_BLOCKS):
            if state.data_bitmap[b] and not state.data_block_used[b]:
                out.error(rpt.BLOCK_NOT_REFERENCED,
                          f"Data block {b} marked used in bitmap but not referenced.", block=b)
                errors += 1
            if not state.data_bitmap[b] and state.data_block_used[b]:
                out.error(rpt.BLOCK_USED_NOT_MARKED,
                          f"Data block {b} is used but not marked in bitmap.", block=b)
                errors += 1
            if state.block_ref_count[b] > 1:
                out.error(rpt.DUPLICATE_BLOCK,
                          f"Data block {b} is referenced by multiple inodes.",
                          block=b, refs=state.block_ref_count[b])
                errors += 1

        return errors

    def check_inode_bitmap(self, state: CheckState) -> int:
        """Compare the inode bitmap with the inodes found valid."""
        out = self.reporter
        errors = 0

        for i in range(MAX_INODES):
            if state.inode_bitmap[i] and not state.inode_used[i]:
                out.error(rpt.INODE_BITMAP_EXTRA,
                          f"Inode {i} marked used but not actually used.", inode=i)
                errors += 1
            if not state.inode_bitmap[i] and state.inode_used[i]:
                out.error(rpt.INODE_BITMAP_MISSING,
                          f"Inode {i} is used but not marked in bitmap.", inode=i)
                errors += 1

        if errors == 0:
            out.info("Inode bitmap is consistent.")
        return errors

    def check_duplicate_blocks(self, state: CheckState) -> int:
        """Report every data block referenced by more than one inode."""
        out = self.reporter
        errors = 0

        for b, refs in enumerate(state.block_ref_count):
            if refs > 1:
                out.error(rpt.DUPLICATE_BLOCK,
                          f"Data block {b} is referenced by multiple inodes.",
                          block=b, refs=refs)
                errors += 1

        if errors == 0:
            out.info("No duplicate data block references found.")
        return errors

    def check_bad_blocks(self) -> int:
        """Range-check every pointer of every valid inode.

        Rescans the inode table on its own. A zero indirect pointer means
        the pointer is unset.
        """
        out = self.reporter
        errors = 0

        for i in range(MAX_INODES):
            inode = self.load_inode(i)
            if not inode.is_valid:
                continue

            if inode.direct >= MAX_DATA_BLOCKS:
                out.error(rpt.BAD_DIRECT_BLOCK,
                          f"Inode {i} has invalid direct block {inode.direct}.",
                          inode=i, block=inode.direct)
                errors += 1

            for label, block in (('single', inode.indirect),
                                 ('double', inode.double_indirect),
                                 ('triple', inode.triple_indirect)):
                if block != 0 and block >= MAX_DATA_BLOCKS:
                    out.error(rpt.BAD_INDIRECT_BLOCK,
                              f"Inode {i} has invalid {label} indirect block {block}.",
                              inode=i, block=block, level=label)
                    errors += 1

        if errors == 0:
            out.info("No invalid block references found in inodes.")
        return errors
