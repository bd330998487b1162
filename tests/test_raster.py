import unittest

from termfolio.raster import Canvas, Raster, resize, round_half_up, target_height


def _solid(width, height, rgba):
    return Raster(width, height, bytes(rgba) * (width * height))


class TestRaster(unittest.TestCase):
    def test_pixel_count_is_checked(self):
        with self.assertRaises(ValueError):
            Raster(2, 2, bytes(15))

    def test_pixel(self):
        raster = Raster(2, 1, bytes([1, 2, 3, 4, 5, 6, 7, 8]))
        self.assertEqual(raster.pixel(1, 0), (5, 6, 7, 8))


class TestResize(unittest.TestCase):
    def test_output_size(self):
        src = Raster(3, 5, bytes(range(60)))
        for width, height in [(1, 1), (3, 5), (7, 2), (10, 13)]:
            with self.subTest(width=width, height=height):
                out = resize(src, width, height)
                self.assertEqual(len(out.pixels), width * height * 4)
                self.assertEqual((out.width, out.height), (width, height))

    def test_solid_color_is_preserved(self):
        out = resize(_solid(4, 4, (10, 200, 30, 255)), 9, 3)
        self.assertEqual(out.pixels, bytes((10, 200, 30, 255)) * 27)

    def test_bilinear_midpoint(self):
        # black | white, upscaled to 4 columns: x=1 samples src x=0.5
        src = Raster(2, 1, bytes([0, 0, 0, 255, 255, 255, 255, 255]))
        out = resize(src, 4, 1)
        self.assertEqual(out.pixel(0, 0), (0, 0, 0, 255))
        self.assertEqual(out.pixel(1, 0), (128, 128, 128, 255))
        self.assertEqual(out.pixel(2, 0), (255, 255, 255, 255))
        # edge clamp: x=3 samples src x=1.5, right neighbour clamped to x=1
        self.assertEqual(out.pixel(3, 0), (255, 255, 255, 255))

    def test_channels_are_independent(self):
        src = Raster(2, 1, bytes([255, 0, 0, 0, 0, 0, 255, 255]))
        out = resize(src, 4, 1)
        self.assertEqual(out.pixel(1, 0), (128, 0, 128, 128))

    def test_invalid_target(self):
        with self.assertRaises(ValueError):
            resize(_solid(1, 1, (0, 0, 0, 0)), 0, 3)


class TestTargetHeight(unittest.TestCase):
    def test_half_block_keeps_aspect(self):
        self.assertEqual(target_height(100, 50, 40, colored=True), 20)

    def test_glyph_mode_halves(self):
        self.assertEqual(target_height(100, 50, 40, colored=False), 10)

    def test_explicit_height_wins(self):
        self.assertEqual(target_height(100, 50, 40, colored=False, height=33), 33)

    def test_at_least_one_row(self):
        self.assertEqual(target_height(1000, 1, 10, colored=False), 1)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(0.49), 0)


class TestCanvas(unittest.TestCase):
    def test_starts_transparent(self):
        canvas = Canvas(2, 2)
        self.assertEqual(canvas.snapshot().pixels, bytes(16))

    def test_transparent_frame_keeps_canvas(self):
        canvas = Canvas(2, 2)
        first = bytes((9, 8, 7, 255)) * 4
        canvas.composite(first)
        canvas.composite(bytes((1, 1, 1, 0)) * 4)
        self.assertEqual(canvas.snapshot().pixels, first)

    def test_opaque_frame_replaces_canvas(self):
        canvas = Canvas(2, 2)
        canvas.composite(bytes((9, 8, 7, 255)) * 4)
        second = bytes((1, 2, 3, 255)) * 4
        canvas.composite(second)
        self.assertEqual(canvas.snapshot().pixels, second)

    def test_sparse_update(self):
        canvas = Canvas(2, 1)
        canvas.composite(bytes((9, 9, 9, 255)) * 2)
        canvas.composite(bytes((0, 0, 0, 0, 5, 5, 5, 255)))
        self.assertEqual(canvas.snapshot().pixels, bytes((9, 9, 9, 255, 5, 5, 5, 255)))

    def test_size_mismatch(self):
        with self.assertRaises(ValueError):
            Canvas(2, 2).composite(bytes(4))


if __name__ == '__main__':
    unittest.main()
