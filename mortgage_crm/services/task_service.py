"""Task service — follow-ups attached to a lead.

Display order: OPEN, DONE, CANCELED (declared order, not alphabetical),
then soonest due first with undated tasks last, then newest created first.

The data layer allows any status change, DONE -> OPEN included.

Functions flush but do NOT commit — the caller commits.
"""

import logging

from sqlalchemy import case

from mortgage_crm.errors import NotFoundError
from mortgage_crm.extensions import db
from mortgage_crm.models.lead import Lead
from mortgage_crm.models.task import Task
from mortgage_crm.services.validation import check_choice, parse_datetime, require_text

logger = logging.getLogger(__name__)

_STATUS_RANK = case(
    {status: rank for rank, status in enumerate(Task.STATUSES)},
    value=Task.status,
    else_=len(Task.STATUSES),
)


def display_order():
    """ORDER BY clauses for the task listing rule."""
    return (
        _STATUS_RANK.asc(),
        Task.due_at.is_(None).asc(),
        Task.due_at.asc(),
        Task.created_at.desc(),
    )


def get_task(task_id):
    task = db.session.get(Task, task_id)
    if task is None:
        raise NotFoundError("Task not found.")
    return task


def create_task(lead_id, title, type="OTHER", due_at=None):
    """Create an OPEN task on a lead.

    Raises:
        ValidationError: empty title, unknown type, malformed due_at.
        NotFoundError: lead does not exist.
    """
    title = require_text("title", title, max_length=500, clean=True)
    check_choice("type", type or "OTHER", Task.TYPES)
    due = parse_datetime("due_at", due_at)

    if db.session.get(Lead, lead_id) is None:
        raise NotFoundError("Lead not found.")

    task = Task(
        lead_id=lead_id,
        title=title,
        type=type or "OTHER",
        due_at=due,
        status="OPEN",
    )
    db.session.add(task)
    db.session.flush()

    logger.info(f"Created task {task.id} on lead {lead_id}")
    return task


def list_tasks(lead_id):
    return Task.query.filter_by(lead_id=lead_id).order_by(*display_order()).all()


def nearest_open_tasks(lead_id, limit=3):
    """Open tasks with the closest due dates — the lead list summary."""
    return (
        Task.query
        .filter_by(lead_id=lead_id, status="OPEN")
        .order_by(Task.due_at.is_(None).asc(), Task.due_at.asc(), Task.created_at.desc())
        .limit(limit)
        .all()
    )


def set_task_status(task_id, status):
    """Set a task's status. No transition rules; repeating a status is a no-op."""
    check_choice("status", status, Task.STATUSES)
    task = get_task(task_id)

    if task.status != status:
        old_status = task.status
        task.status = status
        db.session.flush()
        logger.info(f"Task {task_id} status {old_status} -> {status}")
    return task


def delete_task(task_id):
    task = get_task(task_id)
    db.session.delete(task)
    db.session.flush()
