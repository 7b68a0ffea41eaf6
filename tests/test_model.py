import unittest

from star_catalog.context import CatalogContext
from star_catalog.model import (
    CatalogBlock,
    DeepSkyFamily,
    DeepSkyId,
    IdentifierCrossReference,
    StarRecord,
    StarRegistry,
)


class DeepSkyIdTests(unittest.TestCase):
    def test_parse_designations(self) -> None:
        self.assertEqual(DeepSkyId.parse(" 224"), DeepSkyId(DeepSkyFamily.NGC, 224))
        self.assertEqual(DeepSkyId.parse("I1613"), DeepSkyId(DeepSkyFamily.IC, 1613))
        self.assertEqual(DeepSkyId.parse("I 342"), DeepSkyId(DeepSkyFamily.IC, 342))
        self.assertIsNone(DeepSkyId.parse("     "))
        self.assertIsNone(DeepSkyId.parse("Ixyz"))

    def test_signed_number_encodes_family(self) -> None:
        self.assertEqual(DeepSkyId(DeepSkyFamily.NGC, 7000).signed_number, 7000)
        self.assertEqual(DeepSkyId(DeepSkyFamily.IC, 434).signed_number, -434)
        self.assertEqual(str(DeepSkyId(DeepSkyFamily.IC, 434)), "IC 434")


class RegistryTests(unittest.TestCase):
    def test_gaps_are_absent_keys(self) -> None:
        registry = StarRegistry()
        registry.put(41, StarRecord(fk5_number=41))
        registry.put(43, StarRecord(fk5_number=43))

        self.assertIn(41, registry)
        self.assertNotIn(42, registry)
        self.assertIsNone(registry.get(42))
        self.assertEqual(registry.highest_key, 43)
        self.assertEqual([key for key, _ in registry.items()], [41, 43])

    def test_append_continues_after_highest_key(self) -> None:
        registry = StarRegistry()
        registry.put(5, StarRecord())
        self.assertEqual(registry.append(StarRecord()), 6)
        self.assertEqual(registry.append(StarRecord()), 7)
        self.assertEqual(len(registry), 3)

    def test_rejects_non_positive_keys(self) -> None:
        with self.assertRaises(ValueError):
            StarRegistry().put(0, StarRecord())


class CrossReferenceTests(unittest.TestCase):
    def test_zero_means_seen_but_unmatched(self) -> None:
        xref = IdentifierCrossReference()
        xref.mark_seen(10)
        xref.link(11, 7)

        self.assertIn(10, xref)
        self.assertIsNone(xref.resolve(10))
        self.assertEqual(xref.resolve(11), 7)
        self.assertIsNone(xref.resolve(12))

        self.assertEqual(xref.drop_unmatched(), 1)
        self.assertNotIn(10, xref)
        self.assertEqual(len(xref), 1)


class ContextTests(unittest.TestCase):
    def test_block_boundaries(self) -> None:
        context = CatalogContext(highest_fk5=10, highest_bsc=12, highest_hip=12)
        self.assertIs(context.block_of(1), CatalogBlock.FK5)
        self.assertIs(context.block_of(10), CatalogBlock.FK5)
        self.assertIs(context.block_of(11), CatalogBlock.BRIGHT_STAR)
        self.assertIs(context.block_of(13), CatalogBlock.DEEP_SKY)


if __name__ == "__main__":
    unittest.main()
