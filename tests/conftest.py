import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from labgrader.config import DUE_ISO
from labgrader.models import CommitInfo, ExecutionOutcome, ExecutionResult, SourceFile
from labgrader.normalizer import is_empty_code

requires_node = pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")

DEADLINE = datetime.fromisoformat(DUE_ISO)

FULL_SOLUTION = """\
// Lab 4.2 JS Advance
class Student {
  constructor(firstName, lastName, gpa) {
    this.firstName = firstName;
    this.lastName = lastName;
    this._gpa = gpa;
  }

  get fullName() {
    return `${this.firstName} ${this.lastName}`;
  }

  get gpa() {
    return this._gpa;
  }

  set gpa(value) {
    if (value >= 0 && value <= 4) {
      this._gpa = value;
    } else {
      console.log("Invalid GPA");
    }
  }
}

const student = new Student("Sara", "Ali", 3.5);
console.log("Full name: " + student.fullName);
student.gpa = 3.9;
console.log("GPA: " + student.gpa);

/* TODO 2 */
const capitals = { Saudi: "Riyadh", Egypt: "Cairo" };
for (const country in capitals) {
  console.log(country + ": " + capitals[country]);
}

const text = new String("JavaScript");
console.log("First char: " + text.charAt(0));
console.log("Length: " + text.length);

const today = new Date();
console.log("Day: " + today.getDate());
console.log("Month: " + (today.getMonth() + 1));
console.log("Year: " + today.getFullYear());

const numbers = [12, 5, 8, 130, 44, 3, 19, 27, 61, 7];
console.log("Min: " + Math.min(...numbers));
console.log("Max: " + Math.max(...numbers));

function findMax(arr) {
  if (arr.length === 0) {
    throw new Error("Array is empty");
  }
  return Math.max(...arr);
}

try {
  console.log("try: finding max");
  findMax([]);
} catch (err) {
  console.log("catch: " + err.message);
} finally {
  console.log("finally: done");
}

const words = ["ban", "babble", "make", "flab"];
const pattern = /ab/;
words.forEach((word) => {
  if (pattern.test(word)) {
    console.log(word + " matches!");
  }
});
"""

# Satisfies every TODO 1 requirement and nothing else, even when executed.
TASK1_ONLY = """\
class Student {
  constructor(firstName, lastName, gpa) {
    this.firstName = firstName;
    this.lastName = lastName;
    this.gpa = gpa;
  }

  get fullName() {
    return this.firstName.concat(String.fromCharCode(32), this.lastName);
  }

  get gpa() {
    return this._value;
  }

  set gpa(value) {
    if (value < 0 || value > 4) {
      throw new RangeError(value);
    }
    this._value = value;
  }
}

const ada = new Student(String.fromCharCode(65, 100, 97), String.fromCharCode(76, 111, 118, 101), 3.5);
console.log(ada.fullName);
"""

SYNTAX_ERROR = FULL_SOLUTION + "\nfunction broken( {\n"

RUNTIME_ERROR = """\
console.log("before the fault");
const result = notDefinedAnywhere(42);
console.log("never printed");
"""


class FakeExecutor:
    """Stands in for SafeExecutor and records every call."""

    def __init__(self, result: ExecutionResult | None = None) -> None:
        self.result = result or ExecutionResult(outcome=ExecutionOutcome.COMPLETED)
        self.calls: list[str] = []

    def execute(self, code: str) -> ExecutionResult:
        self.calls.append(code)
        return self.result


def make_source(content: str, path: str = "script.js") -> SourceFile:
    return SourceFile(path=path, found=True, content=content, empty=is_empty_code(content))


def on_time_commit() -> CommitInfo:
    return CommitInfo(
        sha="abc123",
        timestamp=DEADLINE - timedelta(days=1),
        author="Sara Ali",
        email="sara@example.com",
        subject="Finish lab",
        used_fallback=False,
        note="selected latest non-bot commit",
    )


def late_commit() -> CommitInfo:
    return on_time_commit().model_copy(update={"timestamp": DEADLINE + timedelta(minutes=1)})


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def graded_at() -> datetime:
    return datetime(2025, 9, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def student_repo(tmp_path: Path) -> Path:
    repo = tmp_path / "repo"
    repo.mkdir()
    return repo
