"""Browse, submit and moderate useless but interesting facts."""

from .admin import DEFAULT_ADMIN_PASSWORD, AdminGate, AdminSession
from .errors import FactsError, NotAuthorized, NotFound, OperationFailed, ValidationError
from .models import CATEGORIES, FACTS, SUBMISSIONS, Fact, SubmittedFact
from .moderation import ModerationWorkflow
from .repository import FactRepository

__all__ = [
    "AdminGate",
    "AdminSession",
    "CATEGORIES",
    "DEFAULT_ADMIN_PASSWORD",
    "FACTS",
    "Fact",
    "FactRepository",
    "FactsError",
    "ModerationWorkflow",
    "NotAuthorized",
    "NotFound",
    "OperationFailed",
    "SUBMISSIONS",
    "SubmittedFact",
    "ValidationError",
]
