"""Shared fixtures for building fake audio files on disk."""

import os
import shutil
import tempfile
import unittest
from datetime import datetime, timezone


class AudioDirTestCase(unittest.TestCase):
    """Runs each test inside a fresh temporary directory."""

    def setUp(self):
        self.old_cwd = os.getcwd()
        self.tmpdir = tempfile.mkdtemp()
        os.chdir(self.tmpdir)

    def tearDown(self):
        os.chdir(self.old_cwd)
        shutil.rmtree(self.tmpdir)

    def make_file(self, name, size, mtime):
        """Write a file of `size` bytes whose modification time is `mtime` (ISO, UTC)."""
        with open(name, "wb") as f:
            f.write(b"\0" * size)
        stamp = datetime.fromisoformat(mtime).replace(tzinfo=timezone.utc).timestamp()
        os.utime(name, (stamp, stamp))
        return name


def titles_from(mapping):
    """Side effect for a patched read_tag_title that looks titles up by file name."""

    def read_title(stream):
        return mapping[stream.name]

    return read_title
