from __future__ import annotations

import unittest

from pdfgrid.interpolation_config import (
    SUPPORTED_MASKS,
    InterpolationConfig,
    UnsupportedConfigurationError,
    active_mask,
    axes_from_mask,
)

EXPECTED = {
    (): InterpolationConfig.TWO_D,
    ("nucleons",): InterpolationConfig.THREE_D_NUCLEONS,
    ("alphas",): InterpolationConfig.THREE_D_ALPHAS,
    ("xi",): InterpolationConfig.THREE_D_XI,
    ("delta",): InterpolationConfig.THREE_D_DELTA,
    ("kt",): InterpolationConfig.THREE_D_KT,
    ("nucleons", "alphas"): InterpolationConfig.FOUR_D_NUCLEONS_ALPHAS,
    ("nucleons", "kt"): InterpolationConfig.FOUR_D_NUCLEONS_KT,
    ("alphas", "kt"): InterpolationConfig.FOUR_D_ALPHAS_KT,
    ("xi", "delta"): InterpolationConfig.FOUR_D_XI_DELTA,
    ("xi", "delta", "kt"): InterpolationConfig.FIVE_D,
    ("nucleons", "xi", "delta", "kt"): InterpolationConfig.SIX_D,
    ("nucleons", "alphas", "xi", "delta", "kt"): InterpolationConfig.SEVEN_D,
}


def _lengths(mask: int) -> tuple[int, int, int, int, int]:
    return tuple(3 if mask & (1 << bit) else 1 for bit in range(5))  # type: ignore[return-value]


class TestInterpolationConfig(unittest.TestCase):
    def test_documented_classes(self) -> None:
        for axes, config in EXPECTED.items():
            with self.subTest(axes=axes):
                lengths = {name: (4 if name in axes else 1) for name in ("nucleons", "alphas", "xi", "delta", "kt")}
                got = InterpolationConfig.from_dimensions(
                    lengths["nucleons"], lengths["alphas"], lengths["xi"], lengths["delta"], lengths["kt"]
                )
                self.assertIs(got, config)
                self.assertEqual(got.active_axes, axes)
                self.assertEqual(got.ndim, len(axes) + 2)

    def test_every_mask_is_classified_or_rejected(self) -> None:
        classified = 0
        for mask in range(32):
            with self.subTest(mask=mask):
                lengths = _lengths(mask)
                self.assertEqual(active_mask(*lengths), mask)
                if mask in SUPPORTED_MASKS:
                    config = InterpolationConfig.from_dimensions(*lengths)
                    self.assertEqual(config.mask, mask)
                    self.assertEqual(config.active_axes, axes_from_mask(mask))
                    classified += 1
                else:
                    with self.assertRaises(UnsupportedConfigurationError):
                        InterpolationConfig.from_dimensions(*lengths)
        self.assertEqual(classified, len(EXPECTED))
        self.assertEqual(len(SUPPORTED_MASKS), 13)

    def test_unsupported_examples(self) -> None:
        # delta+kT, alphas+xi+delta+kT, nucleons+alphas+kT, xi+kT
        for lengths in ((1, 1, 1, 2, 2), (1, 2, 2, 2, 2), (2, 2, 1, 1, 2), (1, 1, 2, 1, 2)):
            with self.subTest(lengths=lengths):
                with self.assertRaises(UnsupportedConfigurationError) as ctx:
                    InterpolationConfig.from_dimensions(*lengths)
                self.assertIsInstance(ctx.exception, ValueError)

    def test_empty_axis_rejected(self) -> None:
        with self.assertRaises(ValueError):
            InterpolationConfig.from_dimensions(1, 0, 1, 1, 1)

    def test_mask_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            InterpolationConfig.from_mask(32)


if __name__ == "__main__":
    unittest.main()
