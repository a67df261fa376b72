"""
Tests for the Image composite.
"""

import copy
import threading
import unittest

from patchwork_shapes.models.geometry import Vec2
from patchwork_shapes.models.image import Image
from patchwork_shapes.models.shape import ShapeError, Circle, Polygon, Line, Ellipse
from patchwork_shapes.render.rasterizer import PillowSurface
from patchwork_shapes.utils.logger import LogCapture


def demo_image():
    """Image holding one shape of each variant."""
    image = Image()
    image.add_component(Circle((400, 300), 50, "red"))
    image.add_component(Polygon([(500, 200), (550, 200), (550, 250), (500, 250)], "blue"))
    image.add_component(Line((400, 300), (100, 100), (255, 128, 50)))
    image.add_component(Ellipse((600, 500), (100, 50), "green"))
    image.annotate("Patchwork demo")
    return image


class TestImageComposition(unittest.TestCase):
    """Tests for component ownership and origin handling."""

    def test_add_applies_origin(self):
        image = Image(origin=(10, 0))
        image.add_component(Circle((0, 0), 1))
        self.assertEqual(image.components()[0].origin, Vec2(10, 0))

    def test_add_self_is_rejected(self):
        image = Image()
        with self.assertRaises(ShapeError):
            image.add_component(image)

    def test_cyclic_nesting_is_rejected(self):
        """Test an image cannot be added below itself at any depth."""
        a = Image()
        b = Image()
        c = Image()
        b.add_component(a)
        a.add_component(c)

        self.assertTrue(b.holds(c))
        self.assertFalse(c.holds(b))
        with self.assertRaises(ShapeError):
            a.add_component(b)
        with self.assertRaises(ShapeError):
            c.add_component(b)

        a.add_component(Circle((0, 0), 1))
        b.translate((1, 0))
        self.assertEqual(a.components()[1].origin, Vec2(1, 0))

    def test_components_is_snapshot(self):
        image = demo_image()
        snapshot = image.components()
        snapshot.clear()
        self.assertEqual(len(image), 4)
        self.assertEqual([s.type.value for s in image], ["circle", "polygon", "line", "ellipse"])

    def test_clear(self):
        image = demo_image().clear()
        self.assertEqual(len(image), 0)

    def test_set_origin(self):
        """Test components move by the old origin minus the new one."""
        image = Image()
        image.add_component(Circle((5, 5), 1))
        image.set_origin((2, 1))
        self.assertEqual(image.origin, Vec2(2, 1))
        self.assertEqual(image.components()[0].origin, Vec2(3, 4))

        image.add_component(Circle((0, 0), 1))
        self.assertEqual(image.components()[1].origin, Vec2(2, 1))

    def test_annotation(self):
        image = Image(annotation="first")
        self.assertEqual(image.get_annotation(), "first")
        image.annotate("second")
        self.assertEqual(image.annotation, "second")

    def test_nested_image_origin(self):
        inner = Image(origin=(100, 0))
        inner.add_component(Circle((0, 0), 5))
        outer = Image(origin=(0, 50))
        outer.add_component(inner)
        self.assertEqual(inner.components()[0].origin, Vec2(100, 50))


class TestImageGeometry(unittest.TestCase):
    """Tests for aggregate metrics and transform fan-out."""

    def test_bounding_box_union(self):
        image = Image()
        image.add_component(Circle((0, 0), 1))
        image.add_component(Ellipse((10, 10), (2, 3)))
        self.assertEqual(image.bounding_box().as_tuple(), (-1, 12, -1, 13))

    def test_empty_image(self):
        image = Image()
        self.assertTrue(image.bounding_box().is_empty)
        self.assertEqual(image.area(), 0.0)
        self.assertEqual(image.perimeter(), 0.0)

    def test_metrics_use_bounding_box(self):
        image = Image()
        image.add_component(Polygon([(0, 0), (2, 0), (2, 2), (0, 2)]))
        image.add_component(Circle((5, 5), 1))
        self.assertEqual(image.area(), 36.0)
        self.assertEqual(image.perimeter(), 24.0)

    def test_contains_point(self):
        image = demo_image()
        self.assertTrue(image.contains_point((400, 300)))
        self.assertTrue(image.contains_point((525, 225)))
        self.assertFalse(image.contains_point((0, 0)))

    def test_translate_fans_out(self):
        image = demo_image()
        expected = [s.copy().translate((5, -5)) for s in image]
        image.translate((5, -5))
        self.assertEqual(image.components(), expected)

    def test_transforms_fan_out(self):
        image = demo_image()
        expected = [s.copy().rotate(0.5, (1, 2)).homothety(2, (0, 0)).central_sym((3, 3)) for s in image]
        image.rotate(0.5, (1, 2)).homothety(2, (0, 0)).central_sym((3, 3))
        self.assertEqual(image.components(), expected)

    def test_homothety_without_center_uses_component_pivots(self):
        image = Image()
        image.add_component(Circle((10, 0), 1))
        image.add_component(Line((0, 0), (2, 0)))
        image.homothety(2)

        circle, line = image.components()
        self.assertEqual(circle.origin, Vec2(10, 0))
        self.assertAlmostEqual(circle.radius, 2)
        self.assertEqual(line.point, Vec2(-1, 0))
        self.assertEqual(line.end_point, Vec2(3, 0))

    def test_axial_sym_zero_direction_touches_nothing(self):
        image = demo_image()
        before = [s.copy() for s in image]
        with self.assertRaises(ShapeError):
            image.axial_sym((0, 0), (0, 0))
        self.assertEqual(image.components(), before)

    def test_axial_sym(self):
        image = Image()
        image.add_component(Circle((3, 4), 1))
        image.axial_sym((0, 0), (1, 0))
        self.assertEqual(image.components()[0].origin, Vec2(3, -4))


class TestImageSerialization(unittest.TestCase):
    """Tests for composite serialization."""

    def test_serialize(self):
        image = Image()
        image.add_component(Circle((400, 300), 50, "red"))
        image.annotate("hi")
        self.assertEqual(image.serialize(), "circle 400.00 300.00 50.00 255 0 0 annotation 2 hi")

    def test_round_trip(self):
        """Test a composite survives serialize then deserialize."""
        image = demo_image()
        restored = Image()
        result = restored.deserialize(image.serialize())

        self.assertTrue(result.ok)
        self.assertEqual(restored.components(), image.components())
        self.assertEqual(restored.get_annotation(), "Patchwork demo")
        self.assertEqual(restored, image)

    def test_annotation_round_trip(self):
        for text in ("héllo wörld", "circle 1 2 3 0 0 0", "", "  padded  "):
            image = Image(annotation=text)
            image.add_component(Circle((1, 1), 1))
            restored = Image()
            restored.deserialize(image.serialize())
            self.assertEqual(restored.get_annotation(), text)
            self.assertEqual(len(restored), 1)

    def test_deserialize_replaces_content(self):
        image = demo_image()
        image.deserialize("ellipse 0 0 1 2 0 0 0")
        self.assertEqual(len(image), 1)
        self.assertEqual(image.get_annotation(), "Patchwork demo")

    def test_deserialize_ignores_origin(self):
        image = Image(origin=(10, 10))
        image.deserialize("circle 1 1 1 0 0 0")
        self.assertEqual(image.components()[0].origin, Vec2(1, 1))

    def test_corrupted_record_is_skipped(self):
        """Test a malformed record leaves the valid ones intact."""
        image = Image()
        with LogCapture("patchwork_shapes.serialization") as capture:
            result = image.deserialize(
                "circle foo 0 5 255 0 0 circle 1 2 3 0 0 255 annotation 2 ok"
            )

        self.assertEqual(len(image), 1)
        self.assertEqual(image.components()[0], Circle((1, 2), 3, "blue"))
        self.assertEqual(image.get_annotation(), "ok")
        self.assertEqual(len(result.errors), 1)
        self.assertTrue(any("circle" in m for m in capture.messages))

    def test_nested_images_flatten(self):
        inner = Image(annotation="inner")
        inner.add_component(Circle((100, 0), 5))
        outer = Image(annotation="outer")
        outer.add_component(Line((0, 0), (1, 1)))
        outer.add_component(inner)

        text = outer.serialize()
        self.assertEqual(text.count("annotation"), 1)
        self.assertTrue(text.endswith("annotation 5 outer"))

        restored = Image()
        restored.deserialize(text)
        self.assertEqual(len(restored), 2)
        self.assertEqual(restored.components()[1], Circle((100, 0), 5))


class TestImageCopying(unittest.TestCase):
    """Tests for explicit cloning."""

    def test_clone_is_deep(self):
        image = demo_image()
        duplicate = image.clone()
        self.assertEqual(duplicate, image)

        duplicate.translate((1, 1))
        duplicate.annotate("changed")
        self.assertEqual(image.components()[0].origin, Vec2(400, 300))
        self.assertEqual(image.get_annotation(), "Patchwork demo")

    def test_copy_method_clones(self):
        image = demo_image()
        duplicate = image.copy()
        self.assertIsNot(duplicate, image)
        self.assertIsNot(duplicate.components()[0], image.components()[0])

    def test_implicit_copies_are_rejected(self):
        image = demo_image()
        with self.assertRaises(TypeError):
            copy.copy(image)
        with self.assertRaises(TypeError):
            copy.deepcopy(image)


class TestImageThreading(unittest.TestCase):
    """Tests for concurrent access."""

    def test_concurrent_translations(self):
        image = Image()
        image.add_component(Circle((0, 0), 1))

        def worker():
            for _ in range(100):
                image.translate((1, 0))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(image.components()[0].origin, Vec2(800, 0))

    def test_concurrent_additions(self):
        image = Image(origin=(1, 1))

        def worker():
            for _ in range(50):
                image.add_component(Circle((0, 0), 1))
                image.bounding_box()

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(image), 200)
        self.assertTrue(all(c.origin == Vec2(1, 1) for c in image))


class TestImageDisplay(unittest.TestCase):
    """Tests for auto-fitted display."""

    def test_fit_ratio(self):
        image = Image()
        image.add_component(Circle((0, 0), 400))
        self.assertAlmostEqual(image.fit_ratio(200, 200), 0.25)

    def test_display_auto_fit(self):
        image = Image()
        image.add_component(Circle((0, 0), 400, "red"))
        surface = PillowSurface(200, 200)

        drawn = image.display(surface)

        self.assertGreater(drawn, 0)
        self.assertEqual(surface.get_pixel(100, 100).rgb, (255, 0, 0))
        self.assertEqual(surface.get_pixel(0, 0).rgb, (255, 255, 255))

    def test_debug_string(self):
        text = str(demo_image())
        self.assertIn("Circle", text)
        self.assertIn("annotation: Patchwork demo", text)


if __name__ == "__main__":
    unittest.main()
