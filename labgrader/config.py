"""
Configuration constants for the lab grader.
"""

from pathlib import Path


LAB_NAME: str = "4.2 JS Advance"

# Due date: 09/17/2025 11:59 PM Riyadh time (UTC+03:00)
DUE_ISO: str = "2025-09-17T23:59:00+03:00"

# Marks
SUBMISSION_MARKS_ON_TIME: int = 20
SUBMISSION_MARKS_LATE: int = 10
SUBMISSION_MARKS_MAX: int = SUBMISSION_MARKS_ON_TIME
MAX_TOTAL: int = 100

# Comment-free, whitespace-collapsed source shorter than this counts as empty
EMPTY_CODE_THRESHOLD: int = 10

# Sandbox configuration
SANDBOX_TIMEOUT_MS: int = 800
# Extra wall-clock allowance for node start-up on top of the vm timeout
SANDBOX_GRACE_SECONDS: float = 5.0
NODE_EXECUTABLE: str = "node"
# Console output kept from one run; further calls are counted, not stored
SANDBOX_MAX_LOG_LINES: int = 1000
SANDBOX_MAX_LOG_LINE_CHARS: int = 1000

# Commits whose author, email or subject contain any of these are automation
BOT_SIGNALS: list[str] = [
    "[bot]",
    "github-actions",
    "actions@github.com",
    "github classroom",
    "classroom[bot]",
    "dependabot",
    "autograding",
    "workflow",
]
GIT_LOG_LIMIT: int = 500
GIT_LOG_FORMAT: str = "%H|%ct|%an|%ae|%s"

# File discovery
INDEX_FILENAME: str = "index.html"
CANDIDATE_FILENAMES: list[str] = ["script.js", "app.js", "main.js", "index.js"]
GRADER_FILENAMES: list[str] = ["grade.cjs", "grade.js"]

# Outputs
DEFAULT_ARTIFACTS_DIR: Path = Path("artifacts")
FEEDBACK_DIRNAME: str = "feedback"
FEEDBACK_FILENAME: str = "README.md"
GRADE_CSV_FILENAME: str = "grade.csv"
GRADE_JSON_FILENAME: str = "grade.json"
CSV_HEADER: list[str] = ["student_username", "obtained_marks", "total_marks", "status"]

DEFAULT_STUDENT_ID: str = "student"
