# -*- coding: utf-8 -*-
"""
app/shared/scheduler/__init__.py

Jobs programados con APScheduler.
"""

from .scheduler_service import SchedulerService, get_scheduler

__all__ = [
    "SchedulerService",
    "get_scheduler",
]
