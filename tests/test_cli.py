import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PIL import Image

from termfolio import cli
from termfolio.terminal import HIDE_CURSOR, RESET, SHOW_CURSOR


class TestParseArgs(unittest.TestCase):
    def test_defaults(self):
        args = cli.parse_args([])
        self.assertIsNone(args.config)
        self.assertIsNone(args.speed)
        self.assertEqual(args.width, 0)
        self.assertFalse(args.palette_256)

    def test_options(self):
        args = cli.parse_args(["resume.json", "--speed", "0.5", "--256", "-v"])
        self.assertEqual(args.config, "resume.json")
        self.assertEqual(args.speed, 0.5)
        self.assertTrue(args.palette_256)
        self.assertTrue(args.verbose)

    def test_rejects_bad_speed(self):
        for value in ("inf", "nan", "-1", "fast"):
            with self.subTest(value=value):
                with patch("sys.stderr", new_callable=io.StringIO) as stderr:
                    with self.assertRaises(SystemExit) as ctx:
                        cli.parse_args(["--speed", value])
                self.assertEqual(ctx.exception.code, 2)
                self.assertIn("--speed", stderr.getvalue())

    def test_zero_speed_allowed(self):
        self.assertEqual(cli.parse_args(["--speed", "0"]).speed, 0.0)


class TestMain(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.dir = Path(self._tmp.name)

    def test_pattern(self):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            self.assertEqual(cli.main(["--pattern"]), 0)
        out = stdout.getvalue()
        self.assertEqual(out.count("\n"), 10)
        self.assertIn("\033[38;2;", out)

    def test_image_mono(self):
        path = self.dir / "red.png"
        Image.new("RGB", (2, 2), (255, 0, 0)).save(path)
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            code = cli.main(["--image", str(path), "--width", "2", "--height", "2", "--mono"])
        self.assertEqual(code, 0)
        self.assertEqual(stdout.getvalue(), "::\n::\n")

    def test_image_colored(self):
        path = self.dir / "red.png"
        Image.new("RGB", (2, 2), (255, 0, 0)).save(path)
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            code = cli.main(["--image", str(path), "--width", "2", "--256"])
        self.assertEqual(code, 0)
        self.assertEqual(stdout.getvalue(), "\033[38;5;196m\033[48;5;196m▀" * 2 + RESET + "\n")

    def test_image_missing(self):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            code = cli.main(["--image", str(self.dir / "nope.png")])
        self.assertEqual(code, 1)
        self.assertEqual(stdout.getvalue(), "")

    def test_bad_config(self):
        path = self.dir / "resume.json"
        path.write_text("{not json", encoding="utf-8")
        self.assertEqual(cli.main([str(path)]), 1)

    def test_streams_config(self):
        path = self.dir / "resume.json"
        path.write_text(json.dumps({
            "pages": [{"type": "raw", "content": {"text": "AB"}, "stayTime": 10}],
        }), encoding="utf-8")
        stdout = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
        with patch("sys.stdout", stdout):
            code = cli.main([str(path), "--speed", "0"])
        self.assertEqual(code, 0)
        self.assertEqual(stdout.buffer.getvalue().decode("utf-8"),
                         HIDE_CURSOR + "AB\n" + RESET + SHOW_CURSOR)


if __name__ == '__main__':
    unittest.main()
