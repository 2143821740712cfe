"""
Adapters layer - Meeting selection storage.
"""

from .file_selection_store import FileSelectionStore, load_meeting_file, parse_meeting

__all__ = ["FileSelectionStore", "load_meeting_file", "parse_meeting"]
