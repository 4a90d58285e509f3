"""
The fixed lab rubric: seven tasks, each a list of requirement checks.

Adding an accepted surface form means extending a pattern family in
`detectors`; adding a requirement means adding a RequirementCheck here.
Scoring lives in `engine` and depends on neither.
"""

from . import detectors as d
from .models import RequirementCheck, Task

TASKS: tuple[Task, ...] = (
    Task(
        id="TODO 1",
        name="Object with Getters & Setters (Student: fullName + GPA validation)",
        max_marks=11,
        checks=(
            RequirementCheck(
                label="Defines a Student-like object/class with firstName, lastName, gpa",
                detector=d.has_student_fields,
                hint="Include firstName, lastName, and gpa fields.",
            ),
            RequirementCheck(
                label='Implements fullName getter/method returning "firstName lastName"',
                detector=d.has_full_name_getter,
                hint="Add a getter (get fullName()) or method fullName() that combines names.",
            ),
            RequirementCheck(
                label="Has a GPA updater (setter or updateGpa method)",
                detector=d.has_gpa_updater,
                hint="Add a setter for gpa or a method like updateGpa(newGpa).",
            ),
            RequirementCheck(
                label="Validates GPA range 0.0–4.0",
                detector=d.has_gpa_range_validation,
                hint="Add checks for 0..4 (clamp or throw or conditional).",
            ),
            RequirementCheck(
                label="Creates an instance and outputs attributes (including via fullName)",
                detector=d.outputs_student,
                hint="Create an instance and console.log fields (use fullName).",
            ),
        ),
    ),
    Task(
        id="TODO 2",
        name="Object as Map + for...in loop",
        max_marks=11,
        checks=(
            RequirementCheck(
                label="Creates an object used as a key→value map",
                detector=d.has_map_object,
                hint="Declare an object literal with key: value pairs.",
            ),
            RequirementCheck(
                label="Iterates over the map using for...in",
                detector=d.has_for_in_loop,
                hint="Loop with for (const key in obj).",
            ),
            RequirementCheck(
                label="Displays key and value during iteration",
                detector=d.outputs_key_and_value,
                hint="Log both the key and its value (e.g., key + value).",
            ),
        ),
    ),
    Task(
        id="TODO 3",
        name="String — charAt() & length",
        max_marks=11,
        checks=(
            RequirementCheck(
                label="Creates a string (plain or new String)",
                detector=d.has_string_value,
            ),
            RequirementCheck(label="Uses .charAt(index)", detector=d.uses_char_at),
            RequirementCheck(label="Uses .length", detector=d.uses_length),
            RequirementCheck(
                label="Outputs char(s) and length",
                detector=d.outputs_char_and_length,
                hint="console.log the character(s) and the length.",
            ),
        ),
    ),
    Task(
        id="TODO 4",
        name="Date — day, month, year",
        max_marks=11,
        checks=(
            RequirementCheck(
                label="Creates a Date for current moment (new Date())",
                detector=d.creates_current_date,
            ),
            RequirementCheck(label="Uses getDate()", detector=d.uses_get_date),
            RequirementCheck(
                label="Uses getMonth()",
                detector=d.uses_get_month,
                hint="Remember getMonth() is zero-based.",
            ),
            RequirementCheck(label="Uses getFullYear()", detector=d.uses_get_full_year),
            RequirementCheck(
                label="Displays the day/month/year values",
                detector=d.outputs_date_parts,
            ),
        ),
    ),
    Task(
        id="TODO 5",
        name="Array + Spread — min and max from 10 numbers",
        max_marks=11,
        checks=(
            RequirementCheck(
                label="Declares an array with (about) 10 numbers",
                detector=d.has_ten_numbers,
                hint="Use an array with 10 numeric values (any values).",
            ),
            RequirementCheck(label="Uses spread with Math.min(...)", detector=d.uses_min_spread),
            RequirementCheck(label="Uses spread with Math.max(...)", detector=d.uses_max_spread),
            RequirementCheck(label="Displays min and max", detector=d.outputs_min_max),
        ),
    ),
    Task(
        id="TODO 6",
        name="Exceptions — try/catch/finally with empty array edge case",
        max_marks=11,
        checks=(
            RequirementCheck(label="Uses try/catch/finally blocks", detector=d.has_try_catch_finally),
            RequirementCheck(
                label="Implements a function to return max element",
                detector=d.has_max_function,
            ),
            RequirementCheck(
                label="Handles empty array case by throwing/triggering an error",
                detector=d.guards_empty_input,
                hint="Check arr.length === 0 and throw new Error(...).",
            ),
            RequirementCheck(
                label="Intentionally passes an empty array to trigger error",
                detector=d.passes_empty_array,
            ),
            RequirementCheck(
                label="Logs messages in try, catch, and finally",
                detector=d.outputs_in_all_clauses,
            ),
        ),
    ),
    Task(
        id="TODO 7",
        name="Regex + forEach — find words containing 'ab'",
        max_marks=14,
        checks=(
            RequirementCheck(label="Defines the words list (or equivalent)", detector=d.has_word_list),
            RequirementCheck(label="Creates a RegExp to detect 'ab' substring", detector=d.has_ab_pattern),
            RequirementCheck(label="Loops with forEach()", detector=d.uses_for_each),
            RequirementCheck(
                label="Uses pattern.test(word) (or equivalent) to check matches",
                detector=d.uses_pattern_test,
            ),
            RequirementCheck(label='Logs "<word> matches!" for matches', detector=d.outputs_matches),
        ),
    ),
)

