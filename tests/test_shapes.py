"""
Tests for the primitive shapes.
"""

import math
import unittest

from patchwork_shapes.core import configure, reset_config
from patchwork_shapes.models.geometry import Vec2
from patchwork_shapes.models.shape import (
    ShapeType, ShapeError, Circle, Polygon, Line, Ellipse
)


def sample_shapes():
    """One shape of each variant."""
    return [
        Circle((400, 300), 50, "red"),
        Polygon([(500, 200), (550, 200), (550, 250), (500, 250)], "blue"),
        Line((400, 300), (100, 100), (255, 128, 50)),
        Ellipse((600, 500), (100, 50), "green"),
    ]


class TestShapeType(unittest.TestCase):
    """Tests for the ShapeType registry."""

    def test_from_keyword(self):
        self.assertIs(ShapeType.from_keyword("circle"), ShapeType.CIRCLE)
        self.assertIs(ShapeType.from_keyword("polygon"), ShapeType.POLYGON)
        self.assertIs(ShapeType.from_keyword("line"), ShapeType.LINE)
        self.assertIs(ShapeType.from_keyword("ellipse"), ShapeType.ELLIPSE)
        self.assertIsNone(ShapeType.from_keyword("square"))
        self.assertIsNone(ShapeType.from_keyword("image"))


class TestCircle(unittest.TestCase):
    """Tests for the Circle class."""

    def test_metrics(self):
        circle = Circle((0, 0), 10)
        self.assertAlmostEqual(circle.area(), 314.16, places=2)
        self.assertAlmostEqual(circle.perimeter(), 62.83, places=2)

    def test_negative_radius_is_clamped(self):
        self.assertEqual(Circle((0, 0), -3).radius, 0.0)

    def test_bounding_box(self):
        self.assertEqual(Circle((5, 5), 3).bounding_box().as_tuple(), (2, 8, 2, 8))

    def test_contains_point(self):
        circle = Circle((0, 0), 10)
        self.assertTrue(circle.contains_point((0, 10)))
        self.assertTrue(circle.contains_point(Vec2(3, 4)))
        self.assertFalse(circle.contains_point((0, 10.01)))

    def test_homothety(self):
        """Test scaling about the own center and about a point."""
        circle = Circle((0, 0), 10).homothety(2)
        self.assertEqual(circle.origin, Vec2(0, 0))
        self.assertAlmostEqual(circle.radius, 20)

        circle = Circle((0, 0), 10).homothety(2, (10, 0))
        self.assertEqual(circle.origin, Vec2(-10, 0))
        self.assertAlmostEqual(circle.radius, 20)

        circle = Circle((0, 0), 10).homothety(-0.5)
        self.assertAlmostEqual(circle.radius, 5)

    def test_rotate(self):
        circle = Circle((3, 4), 1)
        circle.rotate(1.0)
        self.assertEqual(circle.origin, Vec2(3, 4))

        circle = Circle((0, 0), 1).rotate(math.pi / 2, (1, 0))
        self.assertEqual(circle.origin, Vec2(1, -1))

    def test_symmetries(self):
        circle = Circle((3, 4), 2).axial_sym((0, 0), (1, 0))
        self.assertEqual(circle.origin, Vec2(3, -4))
        circle.central_sym((1, 1))
        self.assertEqual(circle.origin, Vec2(-1, 6))
        self.assertAlmostEqual(circle.radius, 2)

    def test_zero_axis_is_rejected(self):
        circle = Circle((3, 4), 2)
        with self.assertRaises(ShapeError):
            circle.axial_sym((0, 0), (0, 0))
        self.assertEqual(circle.origin, Vec2(3, 4))

    def test_serialize(self):
        self.assertEqual(
            Circle((1, 2), 3.5, "red").serialize(),
            "circle 1.00 2.00 3.50 255 0 0"
        )

    def test_copy_and_equality(self):
        circle = Circle((1, 2), 3, "red")
        duplicate = circle.copy()
        self.assertEqual(circle, duplicate)
        duplicate.translate((1, 0))
        self.assertNotEqual(circle, duplicate)
        self.assertNotEqual(circle, Circle((1, 2), 3, "blue"))
        with self.assertRaises(TypeError):
            hash(circle)

    def test_debug_string(self):
        text = str(Circle((1, 2), 3, "red"))
        self.assertTrue(text.startswith("Circle"))
        self.assertIn("(255, 0, 0)", text)


class TestPolygon(unittest.TestCase):
    """Tests for the Polygon class."""

    def setUp(self):
        self.square = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)], "blue")

    def test_metrics(self):
        self.assertAlmostEqual(self.square.area(), 1.0)
        self.assertAlmostEqual(self.square.perimeter(), 4.0)

        triangle = Polygon([(0, 0), (4, 0), (0, 3)])
        self.assertAlmostEqual(triangle.area(), 6.0)
        self.assertAlmostEqual(triangle.perimeter(), 12.0)

    def test_reference_point_is_box_center(self):
        square = Polygon([(0, 0), (2, 0), (2, 2), (0, 2)])
        self.assertEqual(square.reference_point(), Vec2(1, 1))

        square.homothety(2)
        self.assertEqual(square, Polygon([(-1, -1), (3, -1), (3, 3), (-1, 3)]))

    def test_rotate_about_own_center(self):
        square = Polygon([(0, 0), (2, 0), (2, 2), (0, 2)]).rotate(math.pi)
        self.assertEqual(square, Polygon([(2, 2), (0, 2), (0, 0), (2, 0)]))

    def test_contains_point(self):
        """Test even-odd membership on convex and concave outlines."""
        self.assertTrue(self.square.contains_point((0.5, 0.5)))
        self.assertFalse(self.square.contains_point((1.5, 0.5)))

        l_shape = Polygon([(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)])
        self.assertTrue(l_shape.contains_point((0.5, 1.5)))
        self.assertFalse(l_shape.contains_point((1.5, 1.5)))

    def test_bounding_box(self):
        polygon = Polygon([(0.5, 0.5), (2.2, 0.1), (1, 3.7)])
        self.assertEqual(polygon.bounding_box().as_tuple(), (0, 3, 0, 4))

    def test_axial_sym(self):
        polygon = Polygon([(1, 0), (2, 0), (2, 1)]).axial_sym((0, 0), (0, 1))
        self.assertEqual(polygon, Polygon([(-1, 0), (-2, 0), (-2, 1)]))

    def test_serialize(self):
        self.assertEqual(
            self.square.serialize(),
            "polygon 4 0.00 0.00 1.00 0.00 1.00 1.00 0.00 1.00 0 0 255"
        )

    def test_points_are_copied(self):
        points = self.square.points
        points.append(Vec2(5, 5))
        self.assertEqual(len(self.square.points), 4)


class TestLine(unittest.TestCase):
    """Tests for the Line class."""

    def tearDown(self):
        reset_config()

    def test_degenerate_metrics(self):
        line = Line((0, 0), (3, 4))
        self.assertEqual(line.area(), 1.0)
        self.assertEqual(line.perimeter(), 1.0)
        self.assertFalse(line.contains_point((1.5, 2)))

        configure({"degenerate_metric": 0.0})
        self.assertEqual(line.area(), 0.0)

    def test_endpoints(self):
        line = Line((1, 1), (3, 4))
        self.assertEqual(line.end_point, Vec2(4, 5))
        self.assertEqual(line.endpoints(), (Vec2(1, 1), Vec2(4, 5)))
        self.assertAlmostEqual(line.length(), 5.0)

    def test_translate(self):
        line = Line((1, 1), (3, 4)).translate((1, -1))
        self.assertEqual(line.point, Vec2(2, 0))
        self.assertEqual(line.direction, Vec2(3, 4))

    def test_rotate(self):
        """Test both endpoints rotate and the direction is recomputed."""
        line = Line((1, 0), (1, 0)).rotate(math.pi / 2, (0, 0))
        self.assertEqual(line.point, Vec2(0, 1))
        self.assertEqual(line.direction, Vec2(0, 1))

        line = Line((1, 0), (1, 0)).rotate(math.pi / 2)
        self.assertEqual(line.point, Vec2(1, 0))
        self.assertEqual(line.direction, Vec2(0, 1))

    def test_homothety(self):
        line = Line((1, 1), (1, 0)).homothety(2, (0, 0))
        self.assertEqual(line.point, Vec2(2, 2))
        self.assertEqual(line.direction, Vec2(2, 0))

    def test_homothety_about_midpoint(self):
        """Test scaling without a center keeps the segment midpoint fixed."""
        line = Line((0, 0), (2, 0))
        self.assertEqual(line.reference_point(), Vec2(1, 0))

        line.homothety(2)
        self.assertEqual(line.point, Vec2(-1, 0))
        self.assertEqual(line.end_point, Vec2(3, 0))

        line = Line((1, 1), (2, 2)).homothety(-1)
        self.assertEqual(line.point, Vec2(3, 3))
        self.assertEqual(line.end_point, Vec2(1, 1))

    def test_rotate_about_start_point(self):
        line = Line((2, 3), (0, 4)).rotate(math.pi)
        self.assertEqual(line.point, Vec2(2, 3))
        self.assertEqual(line.end_point, Vec2(2, -1))

    def test_axial_sym(self):
        line = Line((1, 0), (1, 1)).axial_sym((0, 0), (0, 1))
        self.assertEqual(line.point, Vec2(-1, 0))
        self.assertEqual(line.direction, Vec2(-1, 1))

    def test_bounding_box(self):
        self.assertEqual(Line((0, 0), (3, -2)).bounding_box().as_tuple(), (0, 3, -2, 0))

    def test_serialize(self):
        self.assertEqual(
            Line((400, 300), (100, 100), (255, 128, 50)).serialize(),
            "line 400.00 300.00 100.00 100.00 255 128 50"
        )


class TestEllipse(unittest.TestCase):
    """Tests for the Ellipse class."""

    def test_circle_equivalence(self):
        """Test an ellipse with equal radii matches the circle metrics."""
        ellipse = Ellipse((0, 0), (10, 10))
        circle = Circle((0, 0), 10)
        self.assertAlmostEqual(ellipse.area(), circle.area())
        self.assertAlmostEqual(ellipse.perimeter(), circle.perimeter())

    def test_ramanujan_perimeter(self):
        self.assertAlmostEqual(Ellipse((0, 0), (10, 5)).perimeter(), 48.4422, places=3)
        self.assertEqual(Ellipse((0, 0), (0, 0)).perimeter(), 0.0)

    def test_contains_point(self):
        ellipse = Ellipse((0, 0), (4, 2))
        self.assertTrue(ellipse.contains_point((4, 0)))
        self.assertTrue(ellipse.contains_point((0, 2)))
        self.assertTrue(ellipse.contains_point((2, 1)))
        self.assertFalse(ellipse.contains_point((3, 1.5)))

    def test_bounding_box(self):
        ellipse = Ellipse((600, 500), (100, 50))
        self.assertEqual(ellipse.bounding_box().as_tuple(), (500, 700, 450, 550))

    def test_transforms(self):
        ellipse = Ellipse((1, 2), (4, 2)).homothety(0.5)
        self.assertEqual(ellipse.radius, Vec2(2, 1))
        self.assertEqual(ellipse.origin, Vec2(1, 2))

        ellipse.rotate(1.0)
        self.assertEqual(ellipse.origin, Vec2(1, 2))

        ellipse.rotate(math.pi, (0, 0))
        self.assertEqual(ellipse.origin, Vec2(-1, -2))
        self.assertEqual(ellipse.radius, Vec2(2, 1))

    def test_homothety_about_own_center(self):
        """Test scaling without a center keeps the origin fixed."""
        ellipse = Ellipse((3, -2), (4, 2)).homothety(3)
        self.assertEqual(ellipse.origin, Vec2(3, -2))
        self.assertEqual(ellipse.radius, Vec2(12, 6))
        self.assertEqual(ellipse.bounding_box().as_tuple(), (-9, 15, -8, 4))

        ellipse.homothety(-0.5)
        self.assertEqual(ellipse.origin, Vec2(3, -2))
        self.assertEqual(ellipse.radius, Vec2(6, 3))

    def test_negative_radius(self):
        self.assertEqual(Ellipse((0, 0), (-3, 2)).radius, Vec2(3, 2))

    def test_serialize(self):
        self.assertEqual(
            Ellipse((600, 500), (100, 50), "green").serialize(),
            "ellipse 600.00 500.00 100.00 50.00 0 255 0"
        )


class TestTransformRoundTrips(unittest.TestCase):
    """Inverse transform pairs restore every variant."""

    def assertRestored(self, transform, inverse):
        for shape in sample_shapes():
            original = shape.copy()
            transform(shape)
            inverse(shape)
            self.assertEqual(shape, original, f"{shape.type.value} not restored")

    def test_translate(self):
        v = Vec2(12.5, -7.25)
        self.assertRestored(lambda s: s.translate(v), lambda s: s.translate(-v))

    def test_homothety(self):
        for ratio in (3.0, -2.0, 0.25):
            self.assertRestored(
                lambda s: s.homothety(ratio, (10, 20)),
                lambda s: s.homothety(1 / ratio, (10, 20))
            )

    def test_homothety_identity(self):
        self.assertRestored(lambda s: s.homothety(1.0), lambda s: s)

    def test_central_sym(self):
        self.assertRestored(
            lambda s: s.central_sym((3, -4)),
            lambda s: s.central_sym((3, -4))
        )

    def test_rotate(self):
        for angle in (0.3, math.pi / 2, 2.5):
            self.assertRestored(
                lambda s: s.rotate(angle, (-50, 75)),
                lambda s: s.rotate(-angle, (-50, 75))
            )

    def test_axial_sym(self):
        self.assertRestored(
            lambda s: s.axial_sym((1, 2), (3, 1)),
            lambda s: s.axial_sym((1, 2), (3, 1))
        )


if __name__ == "__main__":
    unittest.main()
