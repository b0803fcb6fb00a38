import unittest

from study_seats.layout import (
    DEFAULT_REGISTRY,
    Gap,
    LayoutRegistry,
    SeatRef,
    ZoneLayoutDefinition,
)
from study_seats.models import LayoutInconsistency, Seat, UnknownZone


def _seats(zone, grade, numbers):
    return [Seat(id=f"{zone}-{n}", zone=zone, grade=grade, number=n) for n in numbers]


class TestZoneLayoutDefinition(unittest.TestCase):
    def test_from_rows(self):
        d = ZoneLayoutDefinition.from_rows("X", 2, ["1 2", ". 3"])
        self.assertEqual(d.slots, (SeatRef(1), SeatRef(2), Gap(), SeatRef(3)))
        self.assertEqual(d.columns, 2)
        self.assertEqual(d.rows(), [(SeatRef(1), SeatRef(2)), (Gap(), SeatRef(3))])

    def test_ragged_rows_rejected(self):
        with self.assertRaises(LayoutInconsistency) as ctx:
            ZoneLayoutDefinition.from_rows("X", 2, ["1 2 3", "4 5"])
        self.assertEqual(ctx.exception.zone, "X")

    def test_bad_token_rejected(self):
        with self.assertRaises(LayoutInconsistency):
            ZoneLayoutDefinition.from_rows("X", 2, ["1 a"])
        with self.assertRaises(LayoutInconsistency):
            ZoneLayoutDefinition.from_rows("X", 2, ["0 1"])

    def test_flat_definition_defaults_to_one_row(self):
        d = ZoneLayoutDefinition("X", 2, (SeatRef(1), SeatRef(2), Gap(), SeatRef(3)))
        self.assertEqual(d.columns, 4)
        self.assertEqual(d.seat_numbers(), [1, 2, 3])
        self.assertEqual(d.gap_count(), 1)


class TestDefaultRegistry(unittest.TestCase):
    def test_zone_counts(self):
        expected = {"A": (3, 31, 32), "B": (2, 39, 1), "C": (2, 26, 2), "D": (2, 32, 16)}
        for zone, (grade, seats, gaps) in expected.items():
            d = DEFAULT_REGISTRY.get(zone)
            self.assertEqual(d.grade, grade, zone)
            self.assertEqual(sorted(d.seat_numbers()), list(range(1, seats + 1)), zone)
            self.assertEqual(d.gap_count(), gaps, zone)
            self.assertEqual(len(d.slots) % d.columns, 0, zone)

    def test_zone_c_last_row_has_gaps_at_both_ends(self):
        last = DEFAULT_REGISTRY.get("C").rows()[-1]
        self.assertEqual(last, (Gap(), SeatRef(22), SeatRef(23), SeatRef(24), SeatRef(25), SeatRef(26), Gap()))

    def test_zone_b_ends_with_gap(self):
        d = DEFAULT_REGISTRY.get("B")
        self.assertEqual(d.columns, 10)
        self.assertEqual(d.slots[-1], Gap())
        self.assertEqual(d.slots[-2], SeatRef(39))

    def test_built_catalog_validates(self):
        catalog = DEFAULT_REGISTRY.build_catalog()
        self.assertEqual(len(catalog), 31 + 39 + 26 + 32)
        DEFAULT_REGISTRY.validate(catalog)

    def test_catalog_covers_every_slot_exactly(self):
        catalog = DEFAULT_REGISTRY.build_catalog()
        for d in DEFAULT_REGISTRY.definitions:
            numbers = {s.number for s in catalog if s.zone == d.zone and s.grade == d.grade}
            self.assertEqual(set(d.seat_numbers()), numbers)
            self.assertEqual(len(d.seat_numbers()), len(numbers))

    def test_slots_hidden_for_other_grade(self):
        self.assertEqual(DEFAULT_REGISTRY.slots("A", 2), ())
        self.assertEqual(len(DEFAULT_REGISTRY.slots("A", 3)), 63)

    def test_unknown_zone(self):
        with self.assertRaises(UnknownZone) as ctx:
            DEFAULT_REGISTRY.slots("Z", 2)
        self.assertEqual(ctx.exception.zone, "Z")

    def test_visible_zones(self):
        self.assertEqual([d.zone for d in DEFAULT_REGISTRY.visible_zones(2)], ["B", "C", "D"])
        self.assertEqual([d.zone for d in DEFAULT_REGISTRY.visible_zones(3)], ["A"])
        self.assertEqual(DEFAULT_REGISTRY.visible_zones(1), [])


class TestValidate(unittest.TestCase):
    def setUp(self):
        self.registry = LayoutRegistry(
            (ZoneLayoutDefinition("X", 2, (SeatRef(1), SeatRef(2), Gap(), SeatRef(3))),)
        )

    def test_exact_catalog_passes(self):
        self.registry.validate(_seats("X", 2, [1, 2, 3]))

    def test_missing_seat(self):
        with self.assertRaises(LayoutInconsistency) as ctx:
            self.registry.validate(_seats("X", 2, [1, 2]))
        self.assertEqual(ctx.exception.zone, "X")
        self.assertIn("missing", ctx.exception.detail)
        self.assertIn("3", ctx.exception.detail)

    def test_orphaned_seat(self):
        with self.assertRaises(LayoutInconsistency) as ctx:
            self.registry.validate(_seats("X", 2, [1, 2, 3, 4]))
        self.assertIn("orphaned", ctx.exception.detail)

    def test_seat_with_wrong_grade_is_orphaned(self):
        seats = _seats("X", 2, [1, 2]) + _seats("X", 3, [3])
        with self.assertRaises(LayoutInconsistency) as ctx:
            self.registry.validate(seats)
        self.assertIn("X-3", ctx.exception.detail)

    def test_duplicate_reference(self):
        registry = LayoutRegistry((ZoneLayoutDefinition("X", 2, (SeatRef(1), SeatRef(1))),))
        with self.assertRaises(LayoutInconsistency) as ctx:
            registry.validate(_seats("X", 2, [1]))
        self.assertIn("more than once", ctx.exception.detail)

    def test_duplicate_catalog_number(self):
        seats = _seats("X", 2, [1, 2, 3]) + [Seat(id="X-1b", zone="X", grade=2, number=1)]
        with self.assertRaises(LayoutInconsistency) as ctx:
            self.registry.validate(seats)
        self.assertIn("duplicate", ctx.exception.detail)

    def test_seat_in_unregistered_zone(self):
        with self.assertRaises(UnknownZone):
            self.registry.validate(_seats("X", 2, [1, 2, 3]) + _seats("Y", 2, [1]))

    def test_zone_registered_twice(self):
        d = ZoneLayoutDefinition("X", 2, (SeatRef(1),))
        with self.assertRaises(LayoutInconsistency):
            LayoutRegistry((d, d))


if __name__ == "__main__":
    unittest.main()
