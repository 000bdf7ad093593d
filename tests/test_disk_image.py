import os

from constants import BLOCK_SIZE, SUPERBLOCK_BLOCK_NO, MAGIC_NUMBER
from disk_image import DiskImage
from errors import ImageIOError
from structures import SuperBlock
from tests.support import CheckerTestCase


class TestDiskImage(CheckerTestCase):

    def test_read_returns_full_block(self):
        path = self.write_image()
        with DiskImage(path) as disk:
            data = disk.read(SUPERBLOCK_BLOCK_NO)
        self.assertEqual(len(data), BLOCK_SIZE)
        self.assertEqual(SuperBlock.unpack(data).magic, MAGIC_NUMBER)

    def test_every_read_goes_to_file(self):
        path = self.write_image()
        with DiskImage(path) as disk:
            disk.read(3)
            disk.read(3)
            self.assertEqual(disk.reads, 2)

    def test_close_on_exit(self):
        path = self.write_image()
        with DiskImage(path) as disk:
            pass
        self.assertIsNone(disk.fd)
        disk.close()

    def test_missing_file(self):
        with self.assertRaises(ImageIOError):
            DiskImage(os.path.join(self.tmpdir, 'missing.img')).open()

    def test_short_read(self):
        path = os.path.join(self.tmpdir, 'short.img')
        with open(path, 'wb') as f:
            f.write(b'\x00' * (BLOCK_SIZE * 2 + 10))
        with DiskImage(path) as disk:
            disk.read(1)
            with self.assertRaises(ImageIOError):
                disk.read(2)

    def test_block_out_of_range(self):
        path = self.write_image()
        with DiskImage(path) as disk:
            with self.assertRaises(ImageIOError):
                disk.read(64)
            with self.assertRaises(ImageIOError):
                disk.read(-1)

    def test_read_without_open(self):
        with self.assertRaises(ImageIOError):
            DiskImage(self.write_image()).read(0)
