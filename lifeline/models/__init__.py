from .base import Base
from .hospital import Hospital, TimeWindow
from .profile import DonorProfile, Role, RoleAssignment
from .appointment import Appointment, AppointmentStatus
from .donation import Donation
from .inventory import InventoryCounter
from .assignment import HospitalAssignment

__all__ = [
    "Base",
    "Hospital",
    "TimeWindow",
    "DonorProfile",
    "Role",
    "RoleAssignment",
    "Appointment",
    "AppointmentStatus",
    "Donation",
    "InventoryCounter",
    "HospitalAssignment",
]
