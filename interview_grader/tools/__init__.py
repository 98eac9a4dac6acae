"""Report tools for stored interview results."""
from interview_grader.tools.report_tools import generate_interview_report
