import unittest
from unittest.mock import patch
import os
import sys
import shutil
import tempfile

# Add src to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from hatch.utils import ProjectScaffolder

class TestProjectScaffolder(unittest.TestCase):

    def setUp(self):
        self.root = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_creates_tree(self):
        res = ProjectScaffolder.create(self.root, "2024_ACME_Spot", ["01_Footage/A_Cam", "02_Audio", "", "   ", None])
        self.assertTrue(res['success'])
        self.assertEqual(res['path'], os.path.join(self.root, "2024_ACME_Spot"))
        self.assertTrue(os.path.isdir(os.path.join(res['path'], "01_Footage", "A_Cam")))
        self.assertTrue(os.path.isdir(os.path.join(res['path'], "02_Audio")))

    def test_refuses_existing_root(self):
        os.makedirs(os.path.join(self.root, "Taken"))
        res = ProjectScaffolder.create(self.root, "Taken", ["a"])
        self.assertFalse(res['success'])
        self.assertEqual(res['error'], "Folder already exists!")

    def test_parent_segments_stripped(self):
        res = ProjectScaffolder.create(self.root, "Proj", ["../escape", "/abs"])
        self.assertTrue(res['success'])
        self.assertFalse(os.path.exists(os.path.join(self.root, "escape")))
        self.assertTrue(os.path.isdir(os.path.join(res['path'], "escape")))
        self.assertTrue(os.path.isdir(os.path.join(res['path'], "abs")))

    def test_missing_params(self):
        res = ProjectScaffolder.create("", "Proj", [])
        self.assertFalse(res['success'])
        self.assertEqual(res['error'], "Missing params")

    @patch('hatch.utils.scaffold.EnvUtils.open_file')
    def test_open_folder(self, mock_open):
        res = ProjectScaffolder.create(self.root, "Proj", [], open_folder=True)
        mock_open.assert_called_once_with(res['path'])

if __name__ == '__main__':
    unittest.main()
