"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .meeting_summary import MeetingSummaryService, SelectionSourceProtocol

__all__ = ["MeetingSummaryService", "SelectionSourceProtocol"]
