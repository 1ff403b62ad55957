# course_enrollment/core/enums.py
from enum import Enum

class UserRole(str, Enum):
    admin = "admin"
    student = "student"

class SessionSlot(str, Enum):
    morning = "morning"
    evening = "evening"
    night = "night"

class EnrollmentStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
