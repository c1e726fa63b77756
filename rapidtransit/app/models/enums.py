"""
User roles enumeration.

Defines the role types for the parcel booking system.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Supreme user with system-level access (cannot self-register)
        OPERATOR: Depot staff who move parcels through their lifecycle
        CUSTOMER: Books and tracks their own parcels (default role)
    """
    ADMIN = "ADMIN"
    OPERATOR = "OPERATOR"
    CUSTOMER = "CUSTOMER"
