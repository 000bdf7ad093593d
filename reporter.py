"""Diagnostic output for check runs."""

import sys
from typing import List, Optional

# Finding categories
BAD_MAGIC = 'bad-magic'
BAD_BLOCK_SIZE = 'bad-block-size'
BAD_TOTAL_BLOCKS = 'bad-total-blocks'
BAD_LAYOUT_POINTER = 'bad-layout-pointer'
BAD_INODE_SIZE = 'bad-inode-size'
BAD_INODE_COUNT = 'bad-inode-count'
INODE_NOT_VALID = 'inode-marked-but-invalid'
INODE_NOT_MARKED = 'inode-valid-but-unmarked'
BAD_DIRECT_BLOCK = 'bad-direct-block'
BAD_INDIRECT_BLOCK = 'bad-indirect-block'
BLOCK_NOT_MARKED = 'block-referenced-but-unmarked'
BLOCK_NOT_REFERENCED = 'block-marked-but-unreferenced'
BLOCK_USED_NOT_MARKED = 'block-used-but-unmarked'
DUPLICATE_BLOCK = 'duplicate-block'
INODE_BITMAP_EXTRA = 'inode-bitmap-extra'
INODE_BITMAP_MISSING = 'inode-bitmap-missing'


class Finding:
    """A single inconsistency detected in the image."""

    def __init__(self, category: str, message: str, **details):
        self.category = category
        self.message = message
        self.details = details

    def __repr__(self):
        return f"Finding({self.category!r}, {self.message!r})"


class Reporter:
    """Prints one line per finding and keeps them for later inspection."""

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout
        self.findings: List[Finding] = []

    def error(self, category: str, message: str, **details) -> Finding:
        finding = Finding(category, message, **details)
        self.findings.append(finding)
        print(f"ERROR: {message}", file=self.stream)
        return finding

    def info(self, message: str):
        print(message, file=self.stream)

    def count(self, category: Optional[str] = None) -> int:
        if category is None:
            return len(self.findings)
        return sum(1 for f in self.findings if f.category == category)

    @property
    def has_errors(self) -> bool:
        return bool(self.findings)
