from __future__ import annotations

import unittest

from dreamydrift.engine import (
    BAD,
    LATE_BUT_RESTED,
    OK,
    PERFECT,
    SleepRecord,
    classify,
    compute_stats,
    duration_minutes,
    format_duration,
    normalize_record,
    to_minutes,
)


def _rec(date: str, sleep: str = "23:00", wake: str = "07:00", reasons=None) -> SleepRecord:
    return SleepRecord(date=date, sleep_time=sleep, wake_time=wake, reasons=list(reasons or []))


class TimeArithmeticTests(unittest.TestCase):
    def test_to_minutes(self):
        self.assertEqual(to_minutes("00:00"), 0)
        self.assertEqual(to_minutes("23:30"), 1410)
        self.assertEqual(to_minutes("07:05"), 425)

    def test_to_minutes_rejects_malformed(self):
        for bad in ("", "7", "24:00", "12:60", "ab:cd", "12:5", "12-30"):
            with self.assertRaises(ValueError, msg=bad):
                to_minutes(bad)

    def test_duration_same_day_and_midnight_crossing(self):
        self.assertEqual(duration_minutes(to_minutes("22:00"), to_minutes("06:00")), 480)
        self.assertEqual(duration_minutes(1410, 450), 480)
        self.assertEqual(duration_minutes(to_minutes("01:00"), to_minutes("09:00")), 480)

    def test_equal_times_is_zero_not_full_day(self):
        self.assertEqual(duration_minutes(600, 600), 0)

    def test_format_duration(self):
        self.assertEqual(format_duration(480), "8h 0m")
        self.assertEqual(format_duration(395), "6h 35m")


class ClassifierTests(unittest.TestCase):
    def test_on_time_and_long_is_perfect(self):
        q = classify("22:00", "06:00")
        self.assertFalse(q.is_late)
        self.assertEqual(q.duration_minutes, 480)
        self.assertEqual(q.bucket, PERFECT)

        q = classify("23:30", "07:30")
        self.assertFalse(q.is_late)
        self.assertEqual(q.duration_minutes, 480)
        self.assertEqual(q.bucket, PERFECT)

    def test_on_time_but_short_is_ok(self):
        q = classify("23:00", "05:00")
        self.assertEqual(q.duration_minutes, 360)
        self.assertEqual(q.bucket, OK)

    def test_late_but_rested(self):
        q = classify("01:00", "09:00")
        self.assertTrue(q.is_late)
        self.assertEqual(q.duration_minutes, 480)
        self.assertEqual(q.bucket, LATE_BUT_RESTED)

    def test_late_and_short_is_bad(self):
        q = classify("03:00", "07:00")
        self.assertTrue(q.is_late)
        self.assertEqual(q.duration_minutes, 240)
        self.assertEqual(q.bucket, BAD)

    def test_lateness_boundaries(self):
        self.assertFalse(classify("12:00", "20:00").is_late)
        self.assertTrue(classify("00:00", "08:00").is_late)
        self.assertTrue(classify("11:59", "19:59").is_late)

    def test_exactly_seven_hours_is_good(self):
        self.assertEqual(classify("23:00", "06:00").bucket, PERFECT)
        self.assertEqual(classify("23:01", "06:00").bucket, OK)

    def test_normalize_drops_reasons_for_on_time_night(self):
        r = normalize_record(_rec("2026-10-01", "22:30", "06:30", ["beh_phone"]))
        self.assertEqual(r.reasons, [])

    def test_normalize_keeps_unique_reasons_for_late_night(self):
        r = normalize_record(_rec("2026-10-01", "01:30", "08:30", ["beh_phone", "psy_stress", "beh_phone"]))
        self.assertEqual(r.reasons, ["beh_phone", "psy_stress"])


class ComputeStatsTests(unittest.TestCase):
    def test_empty_history(self):
        stats = compute_stats([], 7)
        self.assertEqual(stats.total_tracked, 0)
        self.assertEqual(stats.late_count, 0)
        self.assertEqual(stats.insufficient_count, 0)
        self.assertEqual(stats.top_reasons, [])
        self.assertEqual(stats.category_distribution, [])

    def test_window_takes_most_recent_records(self):
        records = [_rec(f"2026-10-{d:02d}") for d in range(1, 10)]
        # the two oldest nights are late and short; they fall outside the window
        records[0] = _rec("2026-10-01", "03:00", "06:00")
        records[1] = _rec("2026-10-02", "03:00", "06:00")
        stats = compute_stats(records, 7)
        self.assertEqual(stats.total_tracked, 7)
        self.assertEqual(stats.late_count, 0)
        self.assertEqual(stats.insufficient_count, 0)

    def test_total_tracked_is_min_of_window_and_history(self):
        records = [_rec(f"2026-10-{d:02d}") for d in range(1, 4)]
        self.assertEqual(compute_stats(records, 7).total_tracked, 3)
        self.assertEqual(compute_stats(records, 30).total_tracked, 3)
        self.assertEqual(compute_stats(records, 2).total_tracked, 2)

    def test_counts_late_and_insufficient(self):
        records = [
            _rec("2026-10-05", "22:00", "06:00"),   # perfect
            _rec("2026-10-04", "23:30", "05:00"),   # ok, short
            _rec("2026-10-03", "01:00", "09:00"),   # late, rested
            _rec("2026-10-02", "03:00", "07:00"),   # late, short
        ]
        stats = compute_stats(records, 7)
        self.assertEqual(stats.late_count, 2)
        self.assertEqual(stats.insufficient_count, 2)

    def test_top_reasons_ranked_and_categorized(self):
        records = [
            _rec("2026-10-05", "01:00", "08:00", ["beh_phone", "psy_stress"]),
            _rec("2026-10-04", "01:00", "08:00", ["beh_phone"]),
            _rec("2026-10-03", "01:00", "08:00", ["beh_phone", "ext_social"]),
            _rec("2026-10-02", "01:00", "08:00", ["psy_stress"]),
        ]
        stats = compute_stats(records, 7)
        self.assertEqual([r.id for r in stats.top_reasons], ["beh_phone", "psy_stress", "ext_social"])
        self.assertEqual([r.count for r in stats.top_reasons], [3, 2, 1])
        self.assertEqual(stats.top_reasons[0].category, "BEHAVIORAL")
        dist = {c.category: c.count for c in stats.category_distribution}
        self.assertEqual(dist, {"PSYCHOLOGICAL": 2, "BEHAVIORAL": 3, "EXTERNAL": 1})

    def test_zero_categories_are_omitted(self):
        records = [_rec("2026-10-05", "01:00", "08:00", ["beh_game"])]
        stats = compute_stats(records, 7)
        self.assertEqual([(c.category, c.count) for c in stats.category_distribution], [("BEHAVIORAL", 1)])

    def test_ties_keep_first_seen_order(self):
        records = [
            _rec("2026-10-02", "01:00", "08:00", ["psy_stress", "beh_phone"]),
            _rec("2026-10-03", "01:00", "08:00", ["beh_phone", "psy_stress"]),
        ]
        stats = compute_stats(records, 7)
        # newest night (10-03) is scanned first
        self.assertEqual([r.id for r in stats.top_reasons], ["beh_phone", "psy_stress"])

    def test_top_reason_limit_depends_on_window(self):
        ids = [
            "psy_revenge", "psy_mood", "psy_escape", "psy_stress", "beh_shower", "beh_phone",
            "beh_binge", "beh_game", "beh_chat", "beh_work", "beh_learn", "beh_explore",
        ]
        records = [_rec(f"2026-10-{i + 1:02d}", "02:00", "09:00", [rid]) for i, rid in enumerate(ids)]
        self.assertEqual(len(compute_stats(records, 7).top_reasons), 5)
        self.assertEqual(len(compute_stats(records, 14).top_reasons), 5)
        self.assertEqual(len(compute_stats(records, 30).top_reasons), 10)

    def test_custom_category_mapping_and_unknown_ids(self):
        records = [_rec("2026-10-05", "01:00", "08:00", ["custom", "mystery"])]
        stats = compute_stats(records, 7, reason_categories={"custom": "EXTERNAL"})
        self.assertEqual({r.id: r.category for r in stats.top_reasons}, {"custom": "EXTERNAL", "mystery": None})
        self.assertEqual([(c.category, c.count) for c in stats.category_distribution], [("EXTERNAL", 1)])

    def test_input_order_does_not_matter(self):
        records = [_rec(f"2026-10-{d:02d}", "02:00", "05:00" if d % 2 else "10:00") for d in range(1, 12)]
        a = compute_stats(records, 7)
        b = compute_stats(list(reversed(records)), 7)
        self.assertEqual(a, b)


if __name__ == "__main__":
    unittest.main()
