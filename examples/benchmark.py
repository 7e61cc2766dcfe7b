from shapeframe import decompose, line_transform, parallelogram_transform, triangle_transforms
import timeit
import numpy as np

if __name__ == "__main__":
    p1 = np.array([1.0, 2.0, 3.0])
    p2 = np.array([4.0, 2.5, 3.0])
    p3 = np.array([2.0, 5.0, 4.0])

    # warmup (numba compilation)
    m = parallelogram_transform(p1, p2, p3)
    decompose(m)

    N = 100_000
    print("triangle: ", timeit.timeit(
        lambda: triangle_transforms(p1, p2, p3), number=N))
    print("line: ", timeit.timeit(
        lambda: line_transform(p1, p2, 0.1, 0.3), number=N))
    print("parallelogram: ", timeit.timeit(
        lambda: parallelogram_transform(p1, p2, p3), number=N))
    print("decompose: ", timeit.timeit(lambda: decompose(m), number=N))

    result = decompose(m)
    np.testing.assert_allclose(result.to_matrix(), m, atol=1e-3)
    print("scale:", result.scale)
    print("left rotation:", result.left_rotation)
    print("right rotation:", result.right_rotation)
