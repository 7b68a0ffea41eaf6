import unittest

from catalog_lines import ngc_line, ngc_name_line

from star_catalog.context import CatalogContext
from star_catalog.deep_sky import merge_deep_sky, parse_ngc_line, parse_ngc_names
from star_catalog.model import UNKNOWN_MAGNITUDE, DeepSkyFamily, DeepSkyId


def ngc(number: int) -> DeepSkyId:
    return DeepSkyId(DeepSkyFamily.NGC, number)


class NgcNameTests(unittest.TestCase):
    def test_names_accumulate_without_repeats(self) -> None:
        context = CatalogContext()
        text = "\n".join(
            [
                ngc_name_line("M 31", 224),
                ngc_name_line("Andromeda Galaxy", 224),
                ngc_name_line("Great Nebula in Andromeda", 224),
                ngc_name_line("Andromeda Galaxy", 224),
                ngc_name_line("Horsehead Nebula", 434, ic=True),
            ]
        )

        parse_ngc_names(context, text)

        andromeda = context.deep_sky_names[ngc(224)]
        self.assertEqual(andromeda.messier_number, 31)
        self.assertEqual(andromeda.name, "Andromeda Galaxy/Great Nebula in Andromeda")
        self.assertEqual(context.deep_sky_names[DeepSkyId(DeepSkyFamily.IC, 434)].name, "Horsehead Nebula")

    def test_messier_conflicts_keep_first_claim(self) -> None:
        context = CatalogContext()
        messages: list[str] = []
        context.log = lambda level, message: messages.append(message)
        text = "\n".join(
            [
                ngc_name_line("M 42", 1976),
                ngc_name_line("M 42", 1977),
                ngc_name_line("M 1", 1952),
                ngc_name_line("M 2", 1952),
            ]
        )

        parse_ngc_names(context, text)

        self.assertEqual(context.deep_sky_names[ngc(1976)].messier_number, 42)
        self.assertNotIn(ngc(1977), context.deep_sky_names)
        self.assertEqual(context.deep_sky_names[ngc(1952)].messier_number, 1)
        self.assertEqual(context.stats["deep_sky_messier_conflicts"], 2)
        self.assertTrue(any("M42" in message for message in messages))

    def test_blank_designations_are_ignored(self) -> None:
        context = CatalogContext()
        parse_ngc_names(context, "Coalsack".ljust(36) + "     ")
        self.assertEqual(context.deep_sky_names, {})


class NgcPositionTests(unittest.TestCase):
    def test_parse_position_fields(self) -> None:
        record = parse_ngc_line(ngc_line(224, ra=(0, 42.7), dec=("+", 41, 16), magnitude=3.4))

        self.assertEqual(record.deep_sky_id, ngc(224))
        self.assertAlmostEqual(record.ra, 42.7 / 60)
        self.assertAlmostEqual(record.dec, 41 + 16 / 60)
        self.assertEqual(record.constellation, 1)
        self.assertEqual(record.magnitude, 3.4)

    def test_southern_object_without_magnitude(self) -> None:
        record = parse_ngc_line(ngc_line(434, ic=True, dec=("-", 2, 24), constellation="Ori", magnitude=None))

        self.assertEqual(record.deep_sky_id, DeepSkyId(DeepSkyFamily.IC, 434))
        self.assertAlmostEqual(record.dec, -2.4)
        self.assertEqual(record.magnitude, UNKNOWN_MAGNITUDE)

    def test_merge_keeps_named_or_bright_objects(self) -> None:
        context = CatalogContext()
        names = "\n".join([ngc_name_line("M 31", 224), ngc_name_line("Horsehead Nebula", 434, ic=True)])
        positions = "\n".join(
            [
                ngc_line(224, magnitude=3.4),
                ngc_line(7000, magnitude=None),
                ngc_line(869, magnitude=4.3),
                ngc_line(7009, magnitude=8.0),
                ngc_line(434, ic=True, magnitude=None),
                "",
            ]
        )

        merge_deep_sky(context, names, positions)

        ids = [str(record.deep_sky_id) for _, record in context.registry.items()]
        self.assertEqual(ids, ["NGC 224", "NGC 869", "IC 434"])

        andromeda = context.registry[1]
        self.assertEqual(andromeda.messier_number, 31)
        self.assertIsNone(andromeda.name)
        self.assertEqual(context.registry[3].name, "Horsehead Nebula")
        self.assertEqual(context.deep_sky_names, {})
        self.assertEqual(context.stats["deep_sky_added"], 3)


if __name__ == "__main__":
    unittest.main()
