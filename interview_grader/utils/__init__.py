"""
Utility modules for the Interview Grader.

This package contains utility modules used across the Interview Grader application.
"""
from interview_grader.utils.config import (
    get_interview_config,
    get_logging_config,
    get_server_config,
    get_storage_config,
    log_config
)
from interview_grader.utils.math_utils import percentage, round_half_up
