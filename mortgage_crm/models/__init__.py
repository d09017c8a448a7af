# Models package — import all models here so Alembic can discover them.

from mortgage_crm.models.user import User  # noqa: F401
from mortgage_crm.models.audit import AuditEvent  # noqa: F401
from mortgage_crm.models.referrer import Referrer  # noqa: F401
from mortgage_crm.models.lead import Lead  # noqa: F401
from mortgage_crm.models.note import Note  # noqa: F401
from mortgage_crm.models.task import Task  # noqa: F401
from mortgage_crm.models.email_message import EmailMessage  # noqa: F401
from mortgage_crm.models.checklist import (  # noqa: F401
    Checklist,
    ChecklistItem,
    ChecklistItemTemplate,
    ChecklistTemplate,
)
