"""
Unit tests for harborrp.__main__ module
"""
import runpy
import unittest
from unittest.mock import patch


class TestMainEntryPoint(unittest.TestCase):
    """Test the main entry point functionality"""

    def test_main_module_imports(self):
        """Test that main module can be imported"""
        import harborrp.__main__
        self.assertTrue(hasattr(harborrp.__main__, 'main'))

    @patch('harborrp.cli.main', return_value=None)
    def test_none_return_exits_zero(self, mock_main):
        """python -m harborrp exits 0 when main returns None"""
        with self.assertRaises(SystemExit) as ctx:
            runpy.run_module('harborrp', run_name='__main__')
        self.assertEqual(ctx.exception.code, 0)
        mock_main.assert_called_once()

    @patch('harborrp.cli.main', return_value=1)
    def test_failure_return_propagates(self, mock_main):
        with self.assertRaises(SystemExit) as ctx:
            runpy.run_module('harborrp', run_name='__main__')
        self.assertEqual(ctx.exception.code, 1)


if __name__ == '__main__':
    unittest.main()
