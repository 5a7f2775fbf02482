"""Per-user serialisation of cart read-then-write sequences.

Draft creation, item changes, abandonment and checkout all read the user's
current DRAFT and then write it back. Running two of those at once for the
same user could create a second draft or confirm a cart that is being edited.
``UserLocks`` hands out one re-entrant lock per user, drawn from a fixed pool
of stripes so memory stays bounded however many users pass through.

The lock only covers a single process. Deployments running several workers
against a shared database rely on the repository's draft-uniqueness check.
"""

import threading
import zlib
from contextlib import contextmanager

DEFAULT_STRIPES = 64


class UserLocks:
    def __init__(self, stripes: int = DEFAULT_STRIPES):
        self._locks = [threading.RLock() for _ in range(stripes)]

    def _lock_for(self, user_id) -> threading.RLock:
        return self._locks[zlib.crc32(str(user_id).encode("utf-8")) % len(self._locks)]

    @contextmanager
    def hold(self, user_id):
        with self._lock_for(user_id):
            yield


user_locks = UserLocks()
