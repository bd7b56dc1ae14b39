"""
Jobs package - background tasks and scheduling
"""
from .scheduler import JobScheduler

__all__ = ['JobScheduler']
