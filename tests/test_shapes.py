import math
import unittest
import numpy as np
import shapeframe
from shapeframe import (
    UNIT_SQUARE,
    UNIT_TRIANGLE,
    line_transform,
    line_transforms,
    parallelogram_transform,
    parallelogram_transforms,
    polyline_segment_count,
    polyline_segments,
    polyline_transforms,
    to_local,
    triangle_basis,
    triangle_transforms,
)

_SQUARE_INV = np.linalg.inv(UNIT_SQUARE)

# homogeneous local corners (0,0), (1,0), (0,1), (1,1) as columns
SQUARE_CORNERS = np.array([[0.0, 1.0, 0.0, 1.0],
                           [0.0, 0.0, 1.0, 1.0],
                           [0.0, 0.0, 0.0, 0.0],
                           [1.0, 1.0, 1.0, 1.0]])


def world_corners(matrix):
    """World positions of local (0,0), (1,0), (0,1), (1,1) for a quad transform."""
    return (matrix @ _SQUARE_INV @ SQUARE_CORNERS)[:3].T


class TestTriangle(unittest.TestCase):
    def setUp(self):
        self.p1 = np.array([1.0, 2.0, 3.0])
        self.p2 = np.array([4.0, 2.5, 3.0])
        self.p3 = np.array([2.0, 5.0, 4.0])

    def test_three_matrices(self):
        mats = triangle_transforms(self.p1, self.p2, self.p3)
        self.assertEqual(len(mats), 3)
        for m in mats:
            self.assertEqual(m.shape, (4, 4))
            np.testing.assert_allclose(m[3], [0, 0, 0, 1], atol=1e-12)

    def test_pieces_reach_the_vertices(self):
        mats = triangle_transforms(self.p1, self.p2, self.p3)
        np.testing.assert_allclose(world_corners(mats[0])[0], self.p1, atol=1e-9)
        np.testing.assert_allclose(world_corners(mats[1])[1], self.p2, atol=1e-9)
        np.testing.assert_allclose(world_corners(mats[2])[2], self.p3, atol=1e-9)

    def test_matches_basis_placement(self):
        placement = triangle_basis(self.p1, self.p2, self.p3).placement()
        for m, piece in zip(triangle_transforms(self.p1, self.p2, self.p3), UNIT_TRIANGLE):
            np.testing.assert_allclose(m, placement @ piece, atol=1e-12)

    def test_double_sided(self):
        mats = triangle_transforms(self.p1, self.p2, self.p3, double_sided=True)
        self.assertEqual(len(mats), 6)
        back = triangle_transforms(self.p1, self.p3, self.p2)
        for m, b in zip(mats[3:], back):
            np.testing.assert_allclose(m, b, atol=1e-12)

    def test_collinear_points(self):
        mats = triangle_transforms((0, 0, 0), (1, 0, 0), (2, 0, 0))
        self.assertEqual(len(mats), 3)
        for m in mats:
            self.assertTrue(np.all(np.isfinite(m)))


class TestLine(unittest.TestCase):
    def test_degenerate_is_identity(self):
        p = (3.0, -1.0, 2.0)
        np.testing.assert_array_equal(line_transform(p, p, 0.5, 0.0), np.eye(4))

    def test_horizontal_strip_is_centred(self):
        m = line_transform((0, 0, 0), (4, 0, 0), 0.2)
        expected = [[0, -0.1, 0], [4, -0.1, 0], [0, 0.1, 0], [4, 0.1, 0]]
        np.testing.assert_allclose(world_corners(m), expected, atol=1e-12)

    def test_negative_thickness_mirrors_strip(self):
        m = line_transform((0, 0, 0), (4, 0, 0), -0.2)
        expected = [[0, 0.1, 0], [4, 0.1, 0], [0, -0.1, 0], [4, -0.1, 0]]
        np.testing.assert_allclose(world_corners(m), expected, atol=1e-12)

    def test_vertical_line(self):
        m = line_transform((0, 0, 0), (0, 10, 0), 0.1, 0)
        self.assertTrue(np.all(np.isfinite(m)))
        # local x of the quad runs up the line
        x_column = (m @ _SQUARE_INV)[:3, 0]
        np.testing.assert_allclose(x_column / np.linalg.norm(x_column), [0, 1, 0], atol=1e-12)
        self.assertAlmostEqual(np.linalg.norm(x_column), 10.0)

    def test_roll_degrees(self):
        a = line_transform((0, 0, 0), (1, 2, 3), 0.3, 45.0, degrees=True)
        b = line_transform((0, 0, 0), (1, 2, 3), 0.3, math.pi / 4)
        np.testing.assert_allclose(a, b, atol=1e-12)

    def test_roll_keeps_segment(self):
        p1, p2 = np.array([1.0, 1.0, 1.0]), np.array([2.0, 3.0, -1.0])
        for roll in (0.0, 0.7, math.pi):
            corners = world_corners(line_transform(p1, p2, 0.4, roll))
            np.testing.assert_allclose((corners[0] + corners[2]) / 2, p1, atol=1e-9)
            np.testing.assert_allclose((corners[1] + corners[3]) / 2, p2, atol=1e-9)
            self.assertAlmostEqual(np.linalg.norm(corners[2] - corners[0]), 0.4)

    def test_double_sided(self):
        p1, p2 = (0, 0, 0), (4, 0, 0)
        front, back = line_transforms(p1, p2, 0.2, 0.3, double_sided=True)
        np.testing.assert_allclose(front, line_transform(p1, p2, 0.2, 0.3), atol=1e-12)
        np.testing.assert_allclose(back, line_transform(p2, p1, 0.2, 0.3 + math.pi), atol=1e-12)
        self.assertEqual(len(line_transforms(p1, p2, 0.2)), 1)


class TestParallelogram(unittest.TestCase):
    def test_tiling(self):
        p1 = np.array([1.0, 2.0, 3.0])
        p2 = np.array([3.0, 3.0, 3.0])
        p3 = np.array([1.5, 2.5, 5.0])
        p4 = p1 + (p2 - p1) + (p3 - p1)
        corners = world_corners(parallelogram_transform(p1, p2, p3))
        np.testing.assert_allclose(corners, [p1, p2, p3, p4], atol=1e-3)

    def test_matches_placement(self):
        p = ([0, 0, 0], [2, 0, 1], [1, 3, 0])
        np.testing.assert_allclose(
            parallelogram_transform(*p),
            triangle_basis(*p).placement() @ UNIT_SQUARE,
            atol=1e-12,
        )

    def test_double_sided(self):
        p1, p2, p3 = (0, 0, 0), (1, 0, 0), (0, 1, 0)
        mats = parallelogram_transforms(p1, p2, p3, double_sided=True)
        self.assertEqual(len(mats), 2)
        np.testing.assert_allclose(mats[1], parallelogram_transform(p1, p3, p2), atol=1e-12)
        # same four corners, opposite face
        np.testing.assert_allclose(
            np.sort(world_corners(mats[0]), axis=0),
            np.sort(world_corners(mats[1]), axis=0),
            atol=1e-9,
        )

    def test_collinear(self):
        m = parallelogram_transform((0, 0, 0), (1, 1, 1), (2, 2, 2))
        self.assertTrue(np.all(np.isfinite(m)))


class TestPolyline(unittest.TestCase):
    def setUp(self):
        self.points = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]

    def test_segment_count(self):
        for n in range(0, 6):
            pts = self.points[:n] if n <= 4 else self.points + [(5, 5, 5)]
            for closed in (False, True):
                expected = 0 if n < 2 else (n if closed and n > 2 else n - 1)
                with self.subTest(n=n, closed=closed):
                    self.assertEqual(polyline_segment_count(n, closed), expected)
                    self.assertEqual(len(polyline_segments(pts, closed)), expected)
                    self.assertEqual(len(polyline_transforms(pts, 0.1, closed=closed)), expected)

    def test_closing_segment(self):
        segments = polyline_segments(self.points, closed=True)
        np.testing.assert_array_equal(segments[-1][0], self.points[-1])
        np.testing.assert_array_equal(segments[-1][1], self.points[0])

    def test_segments_match_lines(self):
        mats = polyline_transforms(self.points, 0.1, roll=0.2)
        for m, (a, b) in zip(mats, zip(self.points[:-1], self.points[1:])):
            np.testing.assert_allclose(m, line_transform(a, b, 0.1, 0.2), atol=1e-12)

    def test_double_sided(self):
        mats = polyline_transforms(self.points, 0.1, closed=True, double_sided=True)
        self.assertEqual(len(mats), 8)
        np.testing.assert_allclose(
            mats[1], line_transform(self.points[1], self.points[0], 0.1, math.pi), atol=1e-12)

    def test_degrees(self):
        a = polyline_transforms(self.points, 0.1, roll=90.0, degrees=True)
        b = polyline_transforms(self.points, 0.1, roll=math.pi / 2)
        np.testing.assert_allclose(a, b, atol=1e-12)


class TestToLocal(unittest.TestCase):
    def test_translation_only(self):
        m = parallelogram_transform((10, 20, 30), (12, 20, 30), (10, 21, 30))
        local = to_local(m, (10, 20, 30))
        np.testing.assert_allclose(local[:3, :3], m[:3, :3])
        np.testing.assert_allclose(local[:3, 3], m[:3, 3] - [10, 20, 30])

    def test_public_api(self):
        for name in shapeframe.__all__:
            self.assertTrue(hasattr(shapeframe, name), name)


if __name__ == "__main__":
    unittest.main()
