import unittest
import numpy as np
from shapeframe.primitives import (
    UNIT_SQUARE,
    UNIT_TRIANGLE,
    unit_square,
    unit_triangle,
)


# homogeneous local corners (0,0), (1,0), (0,1), (1,1) as columns
SQUARE_CORNERS = np.array([[0.0, 1.0, 0.0, 1.0],
                           [0.0, 0.0, 1.0, 1.0],
                           [0.0, 0.0, 0.0, 0.0],
                           [1.0, 1.0, 1.0, 1.0]])


def strip_unit_square(matrix):
    return matrix @ np.linalg.inv(UNIT_SQUARE)


class TestUnitSquare(unittest.TestCase):
    def test_value(self):
        expected = np.array([[8.0, 0.0, 0.0, 0.4],
                             [0.0, 4.0, 0.0, 0.0],
                             [0.0, 0.0, 1.0, 0.0],
                             [0.0, 0.0, 0.0, 1.0]])
        np.testing.assert_allclose(unit_square(), expected)

    def test_read_only(self):
        with self.assertRaises(ValueError):
            UNIT_SQUARE[0, 0] = 1.0
        for piece in unit_triangle():
            with self.assertRaises(ValueError):
                piece[0, 0] = 1.0

    def test_same_object_every_call(self):
        self.assertIs(unit_square(), unit_square())
        self.assertIs(unit_triangle(), UNIT_TRIANGLE)


class TestUnitTriangle(unittest.TestCase):
    def corners(self, piece):
        return (strip_unit_square(piece) @ SQUARE_CORNERS)[:2].T

    def test_three_pieces(self):
        self.assertEqual(len(unit_triangle()), 3)

    def test_piece_corners(self):
        expected = [
            [[0.0, 0.0], [0.5, 0.0], [0.0, 0.5], [0.5, 0.5]],
            [[0.5, 0.0], [1.0, 0.0], [0.0, 0.5], [0.5, 0.5]],
            [[0.0, 0.5], [0.5, 0.0], [0.0, 1.0], [0.5, 0.5]],
        ]
        for piece, corners in zip(UNIT_TRIANGLE, expected):
            np.testing.assert_allclose(self.corners(piece), corners, atol=1e-12)

    def test_pieces_stay_inside_triangle(self):
        for piece in UNIT_TRIANGLE:
            pts = self.corners(piece)
            self.assertTrue(np.all(pts >= -1e-12))
            self.assertTrue(np.all(pts.sum(axis=1) <= 1.0 + 1e-12))

    def test_pieces_reach_every_vertex(self):
        pts = np.vstack([self.corners(piece) for piece in UNIT_TRIANGLE])
        for vertex in ([0.0, 0.0], [1.0, 0.0], [0.0, 1.0]):
            distances = np.linalg.norm(pts - vertex, axis=1)
            self.assertAlmostEqual(distances.min(), 0.0, places=12)

    def test_pieces_stay_flat(self):
        for piece in UNIT_TRIANGLE:
            stripped = strip_unit_square(piece)
            np.testing.assert_allclose(stripped[2, :2], [0.0, 0.0], atol=1e-12)
            np.testing.assert_allclose(stripped[3], [0.0, 0.0, 0.0, 1.0], atol=1e-12)


if __name__ == "__main__":
    unittest.main()
