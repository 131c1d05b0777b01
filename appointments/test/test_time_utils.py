from datetime import date, datetime, timezone as dt_timezone

from django.test import SimpleTestCase, override_settings

from appointments.utils.time_utils import (
    at_hour,
    format_hour,
    local_date,
    overlaps,
    parse_date,
    parse_timestamp,
    to_iso,
)


@override_settings(TIME_ZONE="UTC")
class TimeUtilsTests(SimpleTestCase):
    def test_format_hour(self):
        self.assertEqual(format_hour(9), "9:00 AM")
        self.assertEqual(format_hour(18), "6:00 PM")
        self.assertEqual(format_hour(12), "12:00 PM")

    def test_parse_naive_timestamp_uses_scheduling_zone(self):
        dt = parse_timestamp("2030-01-07T10:00:00")
        self.assertEqual(dt, datetime(2030, 1, 7, 10, 0, tzinfo=dt_timezone.utc))

    def test_parse_timestamp_with_offset(self):
        dt = parse_timestamp("2030-01-07T12:00:00+02:00")
        self.assertEqual(dt, datetime(2030, 1, 7, 10, 0, tzinfo=dt_timezone.utc))
        self.assertEqual(dt.hour, 10)

    def test_parse_timestamp_rejects_garbage(self):
        self.assertIsNone(parse_timestamp("next tuesday"))
        self.assertIsNone(parse_timestamp("2030-13-45T10:00:00"))
        self.assertIsNone(parse_timestamp(""))
        self.assertIsNone(parse_timestamp(None))
        self.assertIsNone(parse_timestamp(12345))

    @override_settings(TIME_ZONE="America/New_York")
    def test_aware_value_converted_into_scheduling_zone(self):
        dt = parse_timestamp("2030-01-07T14:00:00Z")
        self.assertEqual(dt.hour, 9)
        self.assertEqual(local_date(dt), date(2030, 1, 7))
        self.assertEqual(to_iso(dt), "2030-01-07T09:00:00-05:00")

    def test_parse_date(self):
        self.assertEqual(parse_date("2030-01-07"), date(2030, 1, 7))
        self.assertEqual(parse_date(date(2030, 1, 7)), date(2030, 1, 7))
        self.assertIsNone(parse_date("07/01/2030"))
        self.assertIsNone(parse_date(""))

    def test_at_hour(self):
        self.assertEqual(
            at_hour(date(2030, 1, 7), 17, 30),
            datetime(2030, 1, 7, 17, 30, tzinfo=dt_timezone.utc),
        )

    def test_overlaps_is_half_open(self):
        nine = at_hour(date(2030, 1, 7), 9)
        ten = at_hour(date(2030, 1, 7), 10)
        half_ten = at_hour(date(2030, 1, 7), 10, 30)
        eleven = at_hour(date(2030, 1, 7), 11)

        self.assertTrue(overlaps(nine, half_ten, ten, eleven))
        self.assertTrue(overlaps(ten, eleven, nine, half_ten))
        self.assertTrue(overlaps(nine, eleven, ten, half_ten))
        # touching endpoints
        self.assertFalse(overlaps(nine, ten, ten, eleven))
        self.assertFalse(overlaps(ten, eleven, nine, ten))
