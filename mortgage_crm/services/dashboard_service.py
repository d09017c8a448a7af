"""Dashboard service — read-only counts across leads, tasks and checklists.

Never writes. If the database cannot be queried the dashboard still
renders: every count comes back as 0 and the error is only logged.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from mortgage_crm.extensions import db
from mortgage_crm.models.checklist import Checklist
from mortgage_crm.models.lead import Lead
from mortgage_crm.models.task import Task
from mortgage_crm.services import audit_service

logger = logging.getLogger(__name__)

INCOMPLETE_CHECKLIST_STATUSES = ["OPEN", "IN_PROGRESS"]


def _empty_stats():
    return {
        "total_leads": 0,
        "status_counts": {status: 0 for status in Lead.APPLICATION_STATUSES},
        "stage_counts": {stage: 0 for stage in Lead.STAGES},
        "open_tasks": 0,
        "incomplete_checklists": 0,
    }


def _grouped_counts(column):
    rows = db.session.query(column, func.count()).group_by(column).all()
    return {value: count for value, count in rows}


def _gather_counts():
    stats = _empty_stats()

    by_status = _grouped_counts(Lead.application_status)
    for status in stats["status_counts"]:
        stats["status_counts"][status] = by_status.get(status, 0)

    by_stage = _grouped_counts(Lead.stage)
    for stage in stats["stage_counts"]:
        stats["stage_counts"][stage] = by_stage.get(stage, 0)

    # Total comes from the same grouping so the buckets always add up.
    stats["total_leads"] = sum(by_status.values())
    unknown = set(by_status) - set(Lead.APPLICATION_STATUSES)
    if unknown:
        logger.warning(f"Leads with unknown application status: {sorted(unknown)}")

    stats["open_tasks"] = Task.query.filter_by(status="OPEN").count()
    stats["incomplete_checklists"] = Checklist.query.filter(
        Checklist.status.in_(INCOMPLETE_CHECKLIST_STATUSES)
    ).count()
    return stats


def get_dashboard_stats():
    """Counts for the dashboard; all zeros if the query layer fails."""
    try:
        return _gather_counts()
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch dashboard stats: {e}")
        db.session.rollback()
        return _empty_stats()


def get_recent_activity(limit=10):
    """Newest audit events for the activity feed; empty if the query fails."""
    try:
        return audit_service.recent_events(limit=limit)
    except SQLAlchemyError as e:
        logger.error(f"Failed to fetch recent activity: {e}")
        db.session.rollback()
        return []
