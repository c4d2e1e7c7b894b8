from contextlib import contextmanager
from threading import Lock
from typing import Iterable, Iterator
from weakref import WeakValueDictionary

from clinic.scheduling.admission import Booking

ResourceKey = tuple[str, str]


def resource_keys(booking: Booking, include_patient: bool = False) -> list[ResourceKey]:
    keys = [('doctor', str(booking.doctor_id)), ('room', booking.room_name)]
    if include_patient:
        keys.append(('patient', str(booking.patient_id)))
    return keys


class ResourceLocks:
    """One lock per doctor, room or patient, shared by every booking in the process.

    Locks are always taken in sorted key order so two bookings that share
    resources cannot deadlock each other. A key's lock is dropped from the
    registry once no booking holds or waits on it.
    """

    def __init__(self) -> None:
        self._registry_lock = Lock()
        self._locks: WeakValueDictionary[ResourceKey, Lock] = WeakValueDictionary()

    def _get(self, key: ResourceKey) -> Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, keys: Iterable[ResourceKey]) -> Iterator[None]:
        locks = [self._get(key) for key in sorted(set(keys))]
        acquired: list[Lock] = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
