import json
import tempfile
import unittest
from pathlib import Path

from termfolio import config
from termfolio.config import (
    ImageContent,
    LogoContent,
    MarkdownContent,
    RawContent,
    SpeedConfig,
)
from termfolio.effects import Effect
from termfolio.errors import ConfigError
from termfolio.transitions import Transition

SAMPLE = {
    "global": {"speed": {"typing": 25, "typingPause": 120, "transition": 60, "effect": 40}},
    "pages": [
        {
            "type": "logo",
            "content": {"text": "ACME", "subtitle": "Dev", "font": "slant"},
            "transition": "fade",
            "stayTime": 1500,
        },
        {
            "type": "markdown",
            "content": {"markdown": "# Hi"},
            "effect": "typing",
            "speed": {"typing": 5},
            "speedMultiplier": 0.5,
        },
        {
            "type": "image",
            "content": {"src": "me.gif", "width": 40, "colored": True, "trueColor": False,
                        "animated": True, "frameDelay": 80},
        },
        {"type": "raw", "content": {"text": "bye"}, "effect": "decrypt"},
    ],
}


class TestParseConfig(unittest.TestCase):
    def test_parse(self):
        cfg = config.parse_config(SAMPLE)
        self.assertEqual(cfg.speed, SpeedConfig(25, 120, 60, 40))
        self.assertEqual(len(cfg.pages), 4)

        logo, markdown, image, raw = cfg.pages
        self.assertEqual(logo.content, LogoContent(text="ACME", subtitle="Dev", font="slant"))
        self.assertIs(logo.transition, Transition.FADE)
        self.assertEqual(logo.stay_time, 1500)

        self.assertEqual(markdown.content, MarkdownContent("# Hi"))
        self.assertIs(markdown.effect, Effect.TYPING)
        self.assertEqual(markdown.speed.typing, 5)
        self.assertIsNone(markdown.speed.typing_pause)
        self.assertEqual(markdown.speed_multiplier, 0.5)

        self.assertEqual(image.content, ImageContent(src="me.gif", width=40, colored=True,
                                                     true_color=False, animated=True,
                                                     frame_delay=80))
        self.assertIs(image.effect, Effect.NONE)
        self.assertEqual(image.speed_multiplier, 1.0)

        self.assertEqual(raw.content, RawContent("bye"))
        self.assertIs(raw.effect, Effect.DECRYPT)

    def test_unknown_names_are_normalized(self):
        with self.assertLogs("termfolio", level="WARNING") as logs:
            cfg = config.parse_config({"pages": [
                {"type": "video", "content": {"text": "clip"}, "effect": "sparkle",
                 "transition": "wipe"},
            ]})
        page = cfg.pages[0]
        self.assertEqual(page.content, RawContent("clip"))
        self.assertIs(page.effect, Effect.NONE)
        self.assertIs(page.transition, Transition.NONE)
        self.assertEqual(len(logs.records), 3)

    def test_bad_multiplier(self):
        for value in (-1, "fast", True, float("inf")):
            with self.subTest(value=value):
                with self.assertLogs("termfolio.config", level="WARNING"):
                    page = config.parse_page({"type": "raw", "speedMultiplier": value})
                self.assertEqual(page.speed_multiplier, 1.0)
        self.assertEqual(config.parse_page({"type": "raw", "speedMultiplier": 0}).speed_multiplier, 0.0)

    def test_negative_speeds_clamp(self):
        page = config.parse_page({"type": "raw", "speed": {"typing": -10}, "stayTime": -5})
        self.assertEqual(page.speed.typing, 0)
        self.assertEqual(page.stay_time, 0)

    def test_invalid_shapes(self):
        with self.assertRaises(ConfigError):
            config.parse_config([])
        with self.assertRaises(ConfigError):
            config.parse_config({"pages": {"type": "raw"}})
        with self.assertRaises(ConfigError):
            config.parse_config({"pages": ["raw"]})

    def test_invalid_nested_shapes(self):
        bad = [
            {"pages": [{"type": "raw", "content": "AB"}]},
            {"pages": [{"type": "image", "content": ["me.png"]}]},
            {"pages": [{"type": "raw", "speed": 20}]},
            {"global": {"speed": [20]}, "pages": []},
            {"global": 5, "pages": []},
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(ConfigError):
                    config.parse_config(raw)

    def test_nested_null_means_missing(self):
        cfg = config.parse_config({"global": None, "pages": [
            {"type": "raw", "content": None, "speed": None},
        ]})
        self.assertEqual(cfg.pages[0].content, RawContent(""))
        self.assertEqual(cfg.pages[0].speed, SpeedConfig())

    def test_empty(self):
        cfg = config.parse_config({})
        self.assertEqual(cfg.pages, [])
        self.assertEqual(cfg.speed, SpeedConfig())


class TestSpeedConfig(unittest.TestCase):
    def test_merged(self):
        base = SpeedConfig(typing=20, typing_pause=100, transition=80)
        merged = base.merged(SpeedConfig(typing=5, effect=0))
        self.assertEqual(merged, SpeedConfig(typing=5, typing_pause=100, transition=80, effect=0))


class TestLoadConfig(unittest.TestCase):
    def test_base_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "resume.json"
            path.write_text(json.dumps(SAMPLE), encoding="utf-8")
            cfg = config.load_config(path)
            self.assertEqual(cfg.base_dir, Path(tmp).resolve())
            self.assertEqual(len(cfg.pages), 4)

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            config.load_config("/nonexistent/resume.json")

    def test_default_config(self):
        cfg = config.default_config()
        self.assertIsInstance(cfg.pages[0].content, LogoContent)
        self.assertIsInstance(cfg.pages[-1].content, RawContent)
        self.assertIs(cfg.pages[-1].transition, Transition.NONE)


if __name__ == '__main__':
    unittest.main()
