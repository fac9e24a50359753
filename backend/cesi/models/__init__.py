from .base import RoleEnum, PickupStatus, TimestampMixin
from .User import User, Administrator, TokenBlocklist
from .School import School, SchoolBranding, Classroom
from .Teacher import Teacher
from .Tutor import Tutor, Guardian
from .Student import Student
from .Pickup import Pickup, TrackingEvent, Report
from .AttendancePass import ClassSession, AttendancePass
from .Notification import Notification
from .AuditLog import AuditLog
