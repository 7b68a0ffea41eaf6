import unittest

from catalog_lines import fk5_line

from star_catalog.context import CatalogContext
from star_catalog.fk5 import load_fk5_cross_index, parse_fk5_line
from star_catalog.model import UNKNOWN_MAGNITUDE


class Fk5ParserTests(unittest.TestCase):
    def test_positional_fields(self) -> None:
        star = parse_fk5_line(
            fk5_line(
                139,
                ra=(3, 47, 29.077),
                dec=("+", 24, 6, 18.49),
                pm_ra=0.0123,
                pm_dec=-4.52,
                vmag=2.87,
                hd=23630,
                designation="eta",
                constellation="Tau",
                name="ALCYONE; in the Pleiades",
            )
        )

        self.assertIsNotNone(star)
        self.assertEqual(star.fk5_number, 139)
        self.assertAlmostEqual(star.ra, 3 + 47 / 60 + 29.077 / 3600)
        self.assertAlmostEqual(star.dec, 24 + 6 / 60 + 18.49 / 3600)
        self.assertAlmostEqual(star.pm_ra, 0.0123)
        self.assertAlmostEqual(star.pm_dec, -4.52)
        self.assertAlmostEqual(star.magnitude, 2.87)
        self.assertEqual(star.hd_number, 23630)
        self.assertEqual((star.flamsteed, star.bayer_rank, star.constellation), (0, 7, 78))
        self.assertEqual(star.name, "Alcyone")

    def test_southern_declination_and_missing_magnitude(self) -> None:
        star = parse_fk5_line(fk5_line(5, dec=("-", 60, 30, 0.0), vmag=None))
        self.assertAlmostEqual(star.dec, -60.5)
        self.assertEqual(star.magnitude, UNKNOWN_MAGNITUDE)

    def test_flamsteed_designation(self) -> None:
        star = parse_fk5_line(fk5_line(1, designation="21", constellation="And"))
        self.assertEqual((star.flamsteed, star.bayer_rank, star.constellation), (21, 0, 1))

    def test_bayer_sub_index(self) -> None:
        star = parse_fk5_line(fk5_line(2, designation="pi", sub_index="2", constellation="Ori"))
        self.assertEqual((star.bayer_rank, star.sub_index, star.constellation), (16, 2, 60))

    def test_unknown_constellation_clears_designation(self) -> None:
        star = parse_fk5_line(fk5_line(3, designation="alp", sub_index="1", constellation="Xyz"))
        self.assertEqual((star.flamsteed, star.bayer_rank, star.sub_index, star.constellation), (0, 0, 0, 0))

    def test_name_filtering(self) -> None:
        self.assertIsNone(parse_fk5_line(fk5_line(4, name="12 Persei")).name)
        self.assertIsNone(parse_fk5_line(fk5_line(4, name="b Persei")).name)
        self.assertEqual(parse_fk5_line(fk5_line(4, name="Polaris")).name, "Polaris")
        self.assertEqual(parse_fk5_line(fk5_line(4, name="POLARIS; Cynosura")).name, "Polaris")

    def test_blank_line(self) -> None:
        self.assertIsNone(parse_fk5_line("   "))


class Fk5LoaderTests(unittest.TestCase):
    def test_skipped_numbers_stay_gaps(self) -> None:
        context = CatalogContext()
        text = "\n".join([fk5_line(41), "", fk5_line(43)])

        load_fk5_cross_index(context, text)

        self.assertIn(41, context.registry)
        self.assertNotIn(42, context.registry)
        self.assertIn(43, context.registry)
        self.assertEqual(context.highest_fk5, 43)
        self.assertEqual(context.highest_bsc, 43)
        self.assertEqual(context.stats["fk5_loaded"], 2)

    def test_cross_reference_and_cluster_anchor(self) -> None:
        context = CatalogContext()
        load_fk5_cross_index(context, "\n".join([fk5_line(138, hd=100), fk5_line(139, hd=23630)]))

        self.assertEqual(context.hd_to_fk5.resolve(23630), 139)
        self.assertEqual(context.hd_to_fk5.resolve(100), 138)
        self.assertEqual(context.cluster_anchor, 139)

    def test_repeated_number_keeps_later_row(self) -> None:
        context = CatalogContext()
        messages: list[str] = []
        context.log = lambda level, message: messages.append(message)
        text = "\n".join([fk5_line(7, vmag=4.0), fk5_line(8), fk5_line(7, vmag=2.5)])

        load_fk5_cross_index(context, text)

        self.assertEqual(context.registry[7].magnitude, 2.5)
        self.assertEqual(context.stats["fk5_loaded"], 2)
        self.assertTrue(any("FK5 7 listed again" in message for message in messages))

    def test_no_anchor_without_alcyone(self) -> None:
        context = CatalogContext()
        load_fk5_cross_index(context, fk5_line(1))
        self.assertIsNone(context.cluster_anchor)


if __name__ == "__main__":
    unittest.main()
