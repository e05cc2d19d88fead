# OrganiJob - Job Search Tracker
"""
OrganiJob - A personal job search tracking tool.

Record networking calls with organisations, keep them synchronized across
devices, and prepare follow-up messages.
"""

__version__ = "1.0.0"
__author__ = "OrganiJob"
__description__ = "Job search contact tracking with cross-device sync"
