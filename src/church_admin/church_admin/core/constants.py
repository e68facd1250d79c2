"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import RegistrationStatus, Role

DEFAULT_LIST_LIMIT = 500
MIN_REJECTION_REASON_LENGTH = 10

# A registrant holding one of these statuses counts as already registered.
ACTIVE_REGISTRATION_STATUSES = frozenset(
    {
        RegistrationStatus.REGISTERED,
        RegistrationStatus.ATTENDED,
        RegistrationStatus.CONFIRMED,
    }
)

# Statuses swept into the lock by finalize.
FINALIZABLE_STATUSES = frozenset({RegistrationStatus.ATTENDED, RegistrationStatus.NO_SHOW})

DELETABLE_STATUSES = frozenset({RegistrationStatus.REGISTERED, RegistrationStatus.CANCELLED})

FINALIZER_ROLES = frozenset({Role.SUPERADMIN, Role.COORDINATOR})
