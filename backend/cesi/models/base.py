from datetime import datetime
from cesi.extensions import db
import enum


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class RoleEnum(enum.Enum):
    admin = "admin"
    tutor = "tutor"
    teacher = "teacher"
    guardian = "guardian"


class PickupStatus(enum.Enum):
    pending = "pending"
    complete = "complete"
    cancelled = "cancelled"
