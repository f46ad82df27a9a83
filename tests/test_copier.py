import unittest
from unittest.mock import patch
import os
import sys
import shutil
import hashlib
import tempfile

# Add src to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from hatch.utils import VerifiedCopier, calculate_hash, MATCH, OVERWRITTEN, SIZE_MISMATCH, HASH_MISMATCH

class TestVerifiedCopier(unittest.TestCase):

    def setUp(self):
        self.root = tempfile.mkdtemp()
        self.src = os.path.join(self.root, "clip.mov")
        with open(self.src, 'wb') as f: f.write(b"frame" * 200)
        self.dest = os.path.join(self.root, "backup", "Day1", "clip.mov")

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_copy_creates_parent_and_matches(self):
        bucket, record = VerifiedCopier().copy(self.src, self.dest, "Day1/clip.mov")
        self.assertEqual(bucket, "copied")
        self.assertEqual(record['verification'], MATCH)
        self.assertEqual(record['size'], 1000)
        self.assertEqual(record['dest_path'], self.dest)
        self.assertTrue(os.path.exists(self.dest))
        self.assertNotIn('hash', record)

    def test_overwrite_tag(self):
        os.makedirs(os.path.dirname(self.dest))
        with open(self.dest, 'wb') as f: f.write(b"old")
        bucket, record = VerifiedCopier().copy(self.src, self.dest, "clip.mov", OVERWRITTEN)
        self.assertEqual(bucket, "copied")
        self.assertEqual(record['verification'], OVERWRITTEN)
        self.assertEqual(os.path.getsize(self.dest), 1000)

    def test_missing_source_is_failure(self):
        bucket, record = VerifiedCopier().copy(os.path.join(self.root, "gone.mov"), self.dest, "gone.mov")
        self.assertEqual(bucket, "failed")
        self.assertTrue(record['error'])
        self.assertEqual(record['display_name'], "gone.mov")

    def test_size_mismatch_leaves_copy(self):
        with patch('hatch.utils.copier.os.path.getsize', side_effect=[1000, 999]):
            bucket, record = VerifiedCopier().copy(self.src, self.dest, "clip.mov")
        self.assertEqual(bucket, "failed")
        self.assertEqual(record['error'], SIZE_MISMATCH)
        self.assertTrue(os.path.exists(self.dest))

    def test_checksum_mode_records_hash(self):
        bucket, record = VerifiedCopier(verify_checksum=True).copy(self.src, self.dest, "clip.mov")
        self.assertEqual(bucket, "copied")
        self.assertIn(record['hash_type'], ("xxHash64", "MD5"))
        self.assertEqual(record['hash'], calculate_hash(self.dest)[0])

    def test_checksum_mismatch(self):
        with patch('hatch.utils.copier.calculate_hash', side_effect=[("aa", "MD5"), ("bb", "MD5")]):
            bucket, record = VerifiedCopier(verify_checksum=True).copy(self.src, self.dest, "clip.mov")
        self.assertEqual(bucket, "failed")
        self.assertEqual(record['error'], HASH_MISMATCH)

    @patch('hatch.utils.copier.HAS_XXHASH', False)
    def test_md5_fallback(self):
        digest, algo = calculate_hash(self.src)
        self.assertEqual(algo, "MD5")
        self.assertEqual(digest, hashlib.md5(b"frame" * 200).hexdigest())

if __name__ == '__main__':
    unittest.main()
