from unittest import TestCase

from gestormaterias.services.schedule_conflicts import (
    ConflictError,
    DayOfWeek,
    InternalDuplicateError,
    MalformedSlotError,
    SessionState,
    SessionStateError,
    StagingSession,
    add_slot,
    begin_save,
    check_slot,
    commit,
    compute_weekly_duration,
    has_internal_overlap,
    has_overlap,
    parse_slot,
    reject,
    remove_slot,
    restage,
    session_workload,
)


def slot(day="Lunes", start="09:00", end="10:00", course_id=1, subject_id=None):
    return parse_slot(day, start, end, course_id=course_id, subject_id=subject_id)


class ParseSlotTestCase(TestCase):
    def test_normalizes_times_and_day(self):
        s = parse_slot("lunes", "9:05", "10:30:00", course_id=3)
        self.assertEqual(s.day, DayOfWeek.LUNES)
        self.assertEqual(s.start, "09:05")
        self.assertEqual(s.end, "10:30")
        self.assertEqual(s.course_id, 3)
        self.assertIsNone(s.subject_id)

    def test_accepts_accented_day_name(self):
        self.assertEqual(slot(day="Miércoles").day, DayOfWeek.MIERCOLES)

    def test_missing_fields_are_malformed(self):
        for day, start, end in (("", "09:00", "10:00"), ("Lunes", "", "10:00"), ("Lunes", "09:00", None)):
            with self.assertRaises(MalformedSlotError):
                parse_slot(day, start, end, course_id=1)

    def test_weekend_and_bad_times_are_malformed(self):
        with self.assertRaises(MalformedSlotError):
            parse_slot("Sábado", "09:00", "10:00", course_id=1)
        with self.assertRaises(MalformedSlotError):
            parse_slot("Lunes", "25:00", "26:00", course_id=1)


class OverlapTestCase(TestCase):
    def test_different_days_never_overlap(self):
        a = slot(day="Lunes", start="08:00", end="12:00")
        b = slot(day="Martes", start="08:00", end="12:00")
        self.assertFalse(has_overlap(a, [b]))
        self.assertFalse(has_internal_overlap(a, [b]))

    def test_touching_boundaries_do_not_overlap(self):
        a = slot(start="09:00", end="10:00")
        b = slot(start="10:00", end="11:00")
        self.assertFalse(has_overlap(a, [b]))
        self.assertFalse(has_overlap(b, [a]))

    def test_partial_and_contained_intervals_overlap(self):
        a = slot(start="09:00", end="10:00")
        for start, end in (("09:30", "10:30"), ("08:30", "09:01"), ("09:15", "09:45"), ("08:00", "11:00")):
            self.assertTrue(has_overlap(a, [slot(start=start, end=end, subject_id=7)]), (start, end))

    def test_other_courses_are_ignored(self):
        a = slot(course_id=1)
        b = slot(course_id=2)
        self.assertFalse(has_overlap(a, [b]))

    def test_excluded_subject_never_conflicts_with_itself(self):
        own = slot(start="09:00", end="10:00", subject_id=5)
        candidate = slot(start="09:00", end="10:00")
        self.assertTrue(has_overlap(candidate, [own]))
        self.assertFalse(has_overlap(candidate, [own], exclude_subject_id=5))

    def test_times_compare_as_clock_values(self):
        # "9:30" sorts after "10:00" as text but not as a time of day.
        a = slot(start="9:30", end="11:00")
        b = slot(start="10:00", end="10:30")
        self.assertTrue(has_overlap(a, [b]))

    def test_internal_overlap_ignores_course(self):
        staged = [slot(start="09:00", end="10:00", course_id=1)]
        self.assertTrue(has_internal_overlap(slot(start="09:30", end="10:15", course_id=99), staged))


class WeeklyDurationTestCase(TestCase):
    def test_empty_is_zero_hours(self):
        self.assertEqual(compute_weekly_duration([]), "0 hs")

    def test_hours_and_minutes(self):
        self.assertEqual(compute_weekly_duration([slot(start="09:00", end="10:30")]), "1 hs 30 min")

    def test_touching_slots_both_count(self):
        slots = [slot(start="09:00", end="10:00"), slot(start="10:00", end="11:30")]
        self.assertEqual(compute_weekly_duration(slots), "2 hs 30 min")

    def test_reversed_slot_contributes_zero(self):
        self.assertEqual(compute_weekly_duration([slot(start="10:00", end="09:00")]), "0 hs")

    def test_omits_empty_segments(self):
        self.assertEqual(compute_weekly_duration([slot(start="09:00", end="09:45")]), "45 min")
        self.assertEqual(compute_weekly_duration([slot(start="09:00", end="11:00")]), "2 hs")


class CheckSlotTestCase(TestCase):
    def test_conflict_with_other_subject_in_course(self):
        existing = [slot(start="09:30", end="10:30", subject_id=2)]
        with self.assertRaises(ConflictError):
            check_slot(slot(start="09:00", end="10:00"), existing, [])
        check_slot(slot(start="10:30", end="11:00"), existing, [])

    def test_internal_duplicate(self):
        staged = [slot(start="09:00", end="10:00")]
        with self.assertRaises(InternalDuplicateError):
            check_slot(slot(start="09:30", end="10:15"), [], staged)

    def test_zero_length_slot_is_rejected(self):
        with self.assertRaises(MalformedSlotError):
            check_slot(slot(start="10:00", end="10:00"), [], [])
        with self.assertRaises(MalformedSlotError):
            check_slot(slot(start="11:00", end="10:00"), [], [])


class StagingSessionTestCase(TestCase):
    def setUp(self):
        self.existing = [slot(start="09:30", end="10:30", subject_id=2)]

    def test_add_slot_moves_to_staging(self):
        session = StagingSession(course_id=1)
        self.assertEqual(session.state, SessionState.EMPTY)
        add_slot(session, slot(start="10:30", end="11:30"), self.existing)
        self.assertEqual(session.state, SessionState.STAGING)
        self.assertEqual(len(session.slots), 1)
        self.assertEqual(session_workload(session), "1 hs")

    def test_rejected_add_leaves_session_untouched(self):
        session = StagingSession(course_id=1, slots=[slot(start="08:00", end="09:00")])
        with self.assertRaises(ConflictError):
            add_slot(session, slot(start="09:00", end="10:00"), self.existing)
        with self.assertRaises(InternalDuplicateError):
            add_slot(session, slot(start="08:30", end="09:15"), [])
        self.assertEqual(len(session.slots), 1)
        self.assertEqual(session.state, SessionState.STAGING)

    def test_editing_subject_ignores_its_own_saved_slots(self):
        session = StagingSession(course_id=1, subject_id=2)
        add_slot(session, slot(start="09:30", end="10:30"), self.existing)
        self.assertEqual(len(session.slots), 1)

    def test_remove_slot(self):
        session = StagingSession(course_id=1, slots=[slot(start="08:00", end="09:00"), slot(day="Martes")])
        removed = remove_slot(session, 0)
        self.assertEqual(removed.start, "08:00")
        self.assertEqual([s.day for s in session.slots], [DayOfWeek.MARTES])
        with self.assertRaises(IndexError):
            remove_slot(session, 5)

    def test_save_folds_valid_pending_slot(self):
        session = StagingSession(course_id=1, slots=[slot(start="08:00", end="09:00")])
        to_save = begin_save(session, slot(start="10:30", end="11:00"), self.existing)
        self.assertEqual(session.state, SessionState.SAVING)
        self.assertEqual(len(to_save), 2)
        commit(session)
        self.assertEqual(session.state, SessionState.COMMITTED)

    def test_save_with_invalid_pending_aborts(self):
        session = StagingSession(course_id=1, slots=[slot(start="08:00", end="09:00")])
        with self.assertRaises(ConflictError):
            begin_save(session, slot(start="10:00", end="10:45"), self.existing)
        self.assertEqual(session.state, SessionState.STAGING)
        self.assertEqual(len(session.slots), 1)

    def test_save_without_pending(self):
        session = StagingSession(course_id=1)
        self.assertEqual(begin_save(session, None, self.existing), [])
        reject(session)
        self.assertEqual(session.state, SessionState.REJECTED)

    def test_illegal_transitions(self):
        session = StagingSession(course_id=1)
        with self.assertRaises(SessionStateError):
            commit(session)
        begin_save(session, None, [])
        with self.assertRaises(SessionStateError):
            add_slot(session, slot(), [])

    def test_restage_rechecks_every_carried_slot(self):
        carried = [slot(start="08:00", end="09:00"), slot(day="Martes")]
        session = restage(1, None, carried, self.existing)
        self.assertEqual(session.state, SessionState.STAGING)
        self.assertEqual(session.slots, carried)

        with self.assertRaises(ConflictError):
            restage(1, None, [slot(start="10:00", end="10:30")], self.existing)
        with self.assertRaises(InternalDuplicateError):
            restage(1, None, [slot(day="Martes"), slot(day="Martes", start="09:30", end="10:30")], [])
        with self.assertRaises(MalformedSlotError):
            restage(1, None, [slot(day="Jueves", start="11:00", end="10:00")], [])

    def test_restage_ignores_subject_own_saved_slots(self):
        own = [slot(start="10:00", end="11:00", subject_id=7)]
        session = restage(1, 7, [slot(start="10:00", end="11:00", subject_id=7)], own)
        self.assertEqual(len(session.slots), 1)
