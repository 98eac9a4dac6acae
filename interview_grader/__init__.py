"""
Interview Grader Package.

This package scores timed Java technical-interview sessions: it grades
free-text and code answers against rubrics, rolls them up by part and
category, and applies the session-integrity penalties.
"""

__version__ = "0.1.0"
