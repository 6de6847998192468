"""Database models"""

from hostmate.models.table import DiningTable
from hostmate.models.reservation import Reservation
from hostmate.models.email_queue import EmailQueueEntry
from hostmate.models.audit import AuditLog
from hostmate.models.user import User

__all__ = [
    "DiningTable",
    "Reservation",
    "EmailQueueEntry",
    "AuditLog",
    "User",
]
