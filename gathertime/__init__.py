"""
gathertime - find the meeting window most participants can attend.
"""

__version__ = "0.1.0"
