from datetime import datetime

from clinic.scheduling.admission import Booking, can_admit, evaluate, find_conflicts
from clinic.scheduling.intervals import TimeInterval

DOC_A, DOC_B = 1, 2
PAT_X, PAT_Y = 10, 20


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2022, 1, 1, hour, minute)


def _booking(doctor_id, patient_id, room_name, start, end, id=None) -> Booking:
    return Booking(
        id=id,
        patient_id=patient_id,
        doctor_id=doctor_id,
        room_name=room_name,
        interval=TimeInterval(start=start, end=end),
    )


EXISTING = _booking(DOC_A, PAT_X, 'Room101', _at(10), _at(11), id=1)


def test_same_doctor_with_overlapping_time_is_rejected() -> None:
    candidate = _booking(DOC_A, PAT_Y, 'Room102', _at(10, 30), _at(10, 45))

    assert not can_admit(candidate, existing_for_doctor=[EXISTING], existing_for_room=[])
    assert find_conflicts(candidate, [EXISTING], []) == [EXISTING]


def test_same_room_with_overlapping_time_is_rejected() -> None:
    candidate = _booking(DOC_B, PAT_Y, 'Room101', _at(10, 30), _at(10, 45))

    assert not can_admit(candidate, existing_for_doctor=[], existing_for_room=[EXISTING])


def test_no_shared_resource_is_admitted() -> None:
    candidate = _booking(DOC_B, PAT_Y, 'Room102', _at(10, 30), _at(10, 45))

    assert can_admit(candidate, existing_for_doctor=[], existing_for_room=[])


def test_unrelated_entries_are_ignored_even_if_passed_in() -> None:
    candidate = _booking(DOC_B, PAT_Y, 'Room102', _at(10, 30), _at(10, 45))

    assert can_admit(candidate, existing_for_doctor=[EXISTING], existing_for_room=[EXISTING])


def test_back_to_back_booking_for_the_same_doctor_is_rejected() -> None:
    candidate = _booking(DOC_A, PAT_Y, 'Room102', _at(11), _at(12))

    assert find_conflicts(candidate, [EXISTING], []) == [EXISTING]


def test_same_doctor_at_a_different_time_is_admitted() -> None:
    candidate = _booking(DOC_A, PAT_Y, 'Room101', _at(12), _at(13))

    assert can_admit(candidate, [EXISTING], [EXISTING])


def test_booking_listed_for_doctor_and_room_is_reported_once() -> None:
    candidate = _booking(DOC_A, PAT_Y, 'Room101', _at(10, 30), _at(10, 45))

    assert find_conflicts(candidate, [EXISTING], [EXISTING]) == [EXISTING]


def test_all_conflicts_are_reported_in_first_seen_order() -> None:
    doctor_conflict = _booking(DOC_A, PAT_X, 'Room103', _at(9), _at(10, 15), id=2)
    room_conflict = _booking(DOC_B, PAT_X, 'Room101', _at(10, 40), _at(12), id=3)
    not_overlapping = _booking(DOC_A, PAT_X, 'Room104', _at(14), _at(15), id=4)
    candidate = _booking(DOC_A, PAT_Y, 'Room101', _at(10), _at(10, 45))

    conflicts = find_conflicts(candidate, [doctor_conflict, not_overlapping], [room_conflict])

    assert conflicts == [doctor_conflict, room_conflict]


def test_candidate_is_not_compared_with_itself() -> None:
    candidate = _booking(DOC_A, PAT_X, 'Room101', _at(10), _at(11), id=1)

    assert can_admit(candidate, [EXISTING], [EXISTING])


def test_patient_overlap_is_only_checked_when_supplied() -> None:
    candidate = _booking(DOC_B, PAT_X, 'Room102', _at(10, 30), _at(10, 45))

    assert can_admit(candidate, [], [])
    assert find_conflicts(candidate, [], [], existing_for_patient=[EXISTING]) == [EXISTING]


def test_evaluate_returns_rejection_with_conflicts() -> None:
    candidate = _booking(DOC_A, PAT_Y, 'Room101', _at(10, 30), _at(10, 45))

    decision = evaluate(candidate, [EXISTING], [EXISTING])

    assert decision.admitted is False
    assert decision.conflicts == (EXISTING,)
    assert decision.booking is None


def test_evaluate_returns_admission_with_candidate() -> None:
    candidate = _booking(DOC_B, PAT_Y, 'Room102', _at(10, 30), _at(10, 45))

    decision = evaluate(candidate, [], [])

    assert decision.admitted is True
    assert decision.conflicts == ()
    assert decision.booking == candidate
