"""
Lab Grader: Automated grading for the JS Advance lab

Locates a student's JavaScript submission, times it against the deadline
from git history, and scores it against a fixed seven-task rubric using
pattern detectors corroborated by a sandboxed node run.
"""

__version__ = "0.1.0"
