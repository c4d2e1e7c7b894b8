from datetime import datetime
from threading import Event, Thread

from clinic.scheduling.admission import Booking
from clinic.scheduling.intervals import TimeInterval
from clinic.scheduling.locks import ResourceLocks, resource_keys


def _booking() -> Booking:
    return Booking(
        patient_id=7,
        doctor_id=3,
        room_name='Room101',
        interval=TimeInterval(start=datetime(2022, 1, 1, 10), end=datetime(2022, 1, 1, 11)),
    )


def test_resource_keys_cover_doctor_and_room() -> None:
    assert resource_keys(_booking()) == [('doctor', '3'), ('room', 'Room101')]


def test_resource_keys_include_patient_on_request() -> None:
    assert ('patient', '7') in resource_keys(_booking(), include_patient=True)


def test_hold_releases_locks_after_an_error() -> None:
    locks = ResourceLocks()

    try:
        with locks.hold([('room', 'Room101')]):
            raise RuntimeError('boom')
    except RuntimeError:
        pass

    with locks.hold([('room', 'Room101')]):
        pass


def test_hold_blocks_other_holders_of_a_shared_key() -> None:
    locks = ResourceLocks()
    entered = Event()

    def contender() -> None:
        with locks.hold([('room', 'Room101'), ('doctor', '9')]):
            entered.set()

    with locks.hold([('doctor', '3'), ('room', 'Room101')]):
        thread = Thread(target=contender)
        thread.start()
        assert not entered.wait(timeout=0.1)

    thread.join(timeout=1)
    assert entered.is_set()


def test_hold_does_not_block_disjoint_keys() -> None:
    locks = ResourceLocks()
    entered = Event()

    def other() -> None:
        with locks.hold([('room', 'Room102')]):
            entered.set()

    with locks.hold([('room', 'Room101')]):
        thread = Thread(target=other)
        thread.start()
        assert entered.wait(timeout=1)

    thread.join(timeout=1)


def test_released_locks_are_dropped_from_the_registry() -> None:
    locks = ResourceLocks()

    with locks.hold([('doctor', '3'), ('room', 'Room101')]):
        assert len(locks._locks) == 2

    assert len(locks._locks) == 0
