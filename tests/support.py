"""Shared helpers for building and checking images in tests."""

import io
import os
import shutil
import tempfile
import unittest

from checker import FileSystemChecker
from disk_image import DiskImage
from image_builder import ImageBuilder
from reporter import Reporter


class CheckerTestCase(unittest.TestCase):
    """Writes images into a temporary directory and runs the checker on them."""

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix='vsfsck-')
        self.builder = ImageBuilder()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def write_image(self, builder=None, name='vsfs.img'):
        path = os.path.join(self.tmpdir, name)
        (builder or self.builder).write(path)
        return path

    def run_checker(self, builder=None):
        """Return (reporter, state, output lines) for a full run."""
        path = self.write_image(builder)
        stream = io.StringIO()
        reporter = Reporter(stream)
        with DiskImage(path) as disk:
            state = FileSystemChecker(disk, reporter).run()
        return reporter, state, stream.getvalue().splitlines()

    def error_lines(self, lines):
        return [line for line in lines if line.startswith('ERROR:')]
