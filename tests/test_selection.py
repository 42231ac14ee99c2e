from __future__ import annotations

import unittest

import numpy as np

from pdfgrid.selection import find_subgrid, select_subgrid
from pdfgrid.subgrid import SubGrid


def _two_d(xs, q2s) -> SubGrid:
    return SubGrid.fixed_rank(
        nucleons=[1.0],
        alphas=[0.118],
        kts=[0.0],
        xs=xs,
        q2s=q2s,
        nflav=1,
        payload=np.zeros(len(xs) * len(q2s)),
    )


def _kt(kts) -> SubGrid:
    return SubGrid.fixed_rank(
        nucleons=[1.0],
        alphas=[0.118],
        kts=kts,
        xs=[1.0e-3, 1.0],
        q2s=[1.0, 10.0],
        nflav=1,
        payload=np.zeros(len(kts) * 4),
    )


class TestSelection(unittest.TestCase):
    def setUp(self) -> None:
        self.low = _two_d([1.0e-5, 1.0e-2, 1.0], [1.0, 10.0, 100.0])
        self.high = _two_d([1.0e-5, 1.0e-2, 1.0], [100.0, 1.0e3, 1.0e4])

    def test_first_containing_subgrid_wins(self) -> None:
        subgrids = [self.low, self.high]
        self.assertEqual(select_subgrid(subgrids, (0.1, 50.0)), 0)
        self.assertEqual(select_subgrid(subgrids, (0.1, 500.0)), 1)
        # shared boundary belongs to the first subgrid
        self.assertEqual(select_subgrid(subgrids, (0.1, 100.0)), 0)
        self.assertEqual(find_subgrid(subgrids, (0.1, 100.0)), 0)

    def test_nearest_subgrid_outside(self) -> None:
        subgrids = [self.low, self.high]
        self.assertIsNone(find_subgrid(subgrids, (0.1, 2.0e4)))
        self.assertEqual(select_subgrid(subgrids, (0.1, 2.0e4)), 1)
        self.assertEqual(select_subgrid(subgrids, (2.0, 0.5)), 0)

    def test_ties_go_to_first(self) -> None:
        twin = _two_d([1.0e-5, 1.0e-2, 1.0], [1.0, 10.0, 100.0])
        self.assertEqual(select_subgrid([self.low, twin], (5.0, 50.0)), 0)

    def test_subgrids_of_other_dimensionality_skipped(self) -> None:
        kt_grid = _kt([0.5, 1.0, 2.0])
        subgrids = [kt_grid, self.high]
        self.assertEqual(select_subgrid(subgrids, (0.1, 2.0e4)), 1)
        self.assertEqual(select_subgrid(subgrids, (1.0, 0.1, 5.0)), 0)
        self.assertEqual(select_subgrid(subgrids, (5.0, 0.1, 5.0)), 0)

    def test_overflowing_distance_still_selects(self) -> None:
        subgrids = [_two_d([1.0e-5, 1.0], [1.0, 10.0]), _two_d([1.0e-5, 1.0], [10.0, 100.0])]
        self.assertEqual(subgrids[1].distance_to_point((0.5, 1.0e200)), float("inf"))
        self.assertEqual(select_subgrid(subgrids, (0.5, 1.0e200)), 0)
        self.assertEqual(select_subgrid([self.low, _kt([0.5, 1.0]), self.high], (1.0e200, 50.0)), 0)

    def test_non_finite_point_rejected(self) -> None:
        for point in ((float("nan"), 50.0), (0.1, float("inf"))):
            with self.subTest(point=point):
                with self.assertRaisesRegex(ValueError, "non-finite"):
                    select_subgrid([self.low, self.high], point)

    def test_no_candidate(self) -> None:
        with self.assertRaises(ValueError):
            select_subgrid([], (0.1, 50.0))
        with self.assertRaises(ValueError):
            select_subgrid([self.low, self.high], (0.1, 0.2, 0.3, 0.4))


if __name__ == "__main__":
    unittest.main()
