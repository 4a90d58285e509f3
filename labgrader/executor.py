"""
Sandboxed execution of student JavaScript.

Runs the submission with Node's `vm` module inside a throwaway temporary
directory, capturing console output. This is best-effort isolation, not a
security boundary: the vm context only exposes a capturing `console`, and
the node process gets a stripped environment and a scratch working
directory.
"""

import json
import logging
import os
import subprocess
import tempfile
import time
from pathlib import Path

from .config import (
    NODE_EXECUTABLE,
    SANDBOX_GRACE_SECONDS,
    SANDBOX_MAX_LOG_LINE_CHARS,
    SANDBOX_MAX_LOG_LINES,
    SANDBOX_TIMEOUT_MS,
)
from .models import ExecutionOutcome, ExecutionResult

logger = logging.getLogger(__name__)

SOURCE_FILENAME = "submission.js"
HARNESS_FILENAME = "harness.cjs"

# Modes: "check" compiles only; "run" compiles, then executes.
HARNESS_SOURCE = r"""
"use strict";
const fs = require("fs");
const vm = require("vm");

const [mode, sourcePath, timeoutArg, maxLinesArg, maxCharsArg] = process.argv.slice(2);
const source = fs.readFileSync(sourcePath, "utf8");
const maxLines = Number(maxLinesArg);
const maxChars = Number(maxCharsArg);
const reply = { stage: "compile", logs: [], dropped: 0, fault: null, timedOut: false };

function describe(e) {
  return String(e && e.stack ? e.stack : e);
}

let compiled = true;
try {
  new vm.Script(`(function(){ ${source}\n})();`, { filename: "submission.js" });
} catch (e) {
  compiled = false;
  reply.fault = describe(e);
}

if (compiled && mode === "run") {
  reply.stage = "run";
  const capture = (...args) => {
    if (reply.logs.length >= maxLines) {
      reply.dropped += 1;
      return;
    }
    reply.logs.push(args.map((a) => String(a)).join(" ").slice(0, maxChars));
  };
  const context = vm.createContext({
    console: { log: capture, info: capture, warn: capture, error: capture },
  });
  const wrapped = `(function(){ "use strict";\n${source}\n})();`;
  try {
    new vm.Script(wrapped, { filename: "submission.js" }).runInContext(context, {
      timeout: Number(timeoutArg),
    });
  } catch (e) {
    if (e && e.code === "ERR_SCRIPT_EXECUTION_TIMEOUT") reply.timedOut = true;
    reply.fault = describe(e);
  }
}

process.stdout.write(JSON.stringify(reply));
"""


class SafeExecutor:
    """
    Compiles and runs student code in a time-bounded node sandbox.

    Never raises: every failure is folded into an ExecutionResult. Failures
    of the sandbox itself are reported as UNAVAILABLE.
    """

    def __init__(
        self,
        timeout_ms: int = SANDBOX_TIMEOUT_MS,
        node_executable: str = NODE_EXECUTABLE,
        grace_seconds: float = SANDBOX_GRACE_SECONDS,
        max_log_lines: int = SANDBOX_MAX_LOG_LINES,
        max_log_line_chars: int = SANDBOX_MAX_LOG_LINE_CHARS,
    ) -> None:
        """
        Initialize the executor.

        Args:
            timeout_ms: Execution budget enforced inside the vm.
            node_executable: Name or path of the node binary.
            grace_seconds: Extra wall-clock allowance for node start-up before
                the process itself is killed.
            max_log_lines: Console calls kept per run; later calls are only
                counted.
            max_log_line_chars: Characters kept from each console call.
        """
        self.timeout_ms = timeout_ms
        self.node_executable = node_executable
        self.grace_seconds = grace_seconds
        self.max_log_lines = max_log_lines
        self.max_log_line_chars = max_log_line_chars

    def check_syntax(self, code: str) -> ExecutionResult:
        """
        Compile the code without running it.

        Returns:
            COMPLETED with no logs when the code compiles, COMPILE_FAULT with
            the error text otherwise.
        """
        return self._invoke("check", code)

    def execute(self, code: str) -> ExecutionResult:
        """
        Compile the code and, if that succeeds, run it once.

        Args:
            code: Raw student source.

        Returns:
            COMPILE_FAULT (nothing executed), COMPLETED, FAULTED or TIMED_OUT.
            Console output captured before a fault or timeout is kept.
            UNAVAILABLE when node could not be started or gave no usable
            reply; the code did not run.
        """
        return self._invoke("run", code)

    def _invoke(self, mode: str, code: str) -> ExecutionResult:
        started = time.monotonic()
        with tempfile.TemporaryDirectory(prefix="labgrader-") as workdir:
            work_path = Path(workdir)
            source_path = work_path / SOURCE_FILENAME
            harness_path = work_path / HARNESS_FILENAME
            source_path.write_text(code, encoding="utf-8")
            harness_path.write_text(HARNESS_SOURCE, encoding="utf-8")

            cmd = [
                self.node_executable,
                str(harness_path),
                mode,
                str(source_path),
                str(self.timeout_ms),
                str(self.max_log_lines),
                str(self.max_log_line_chars),
            ]
            logger.debug("Executing: %s", " ".join(cmd))

            try:
                process = subprocess.run(
                    cmd,
                    cwd=workdir,
                    env={"PATH": os.environ.get("PATH", "")},
                    stdin=subprocess.DEVNULL,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout_ms / 1000 + self.grace_seconds,
                )
            except subprocess.TimeoutExpired:
                return ExecutionResult(
                    outcome=ExecutionOutcome.TIMED_OUT,
                    fault=f"Execution exceeded {self.timeout_ms} ms and was terminated",
                    duration_seconds=time.monotonic() - started,
                )
            except OSError as e:
                logger.warning("Sandbox could not start: %s", e)
                return ExecutionResult(
                    outcome=ExecutionOutcome.UNAVAILABLE,
                    fault=f"Sandbox could not start ({self.node_executable}): {e}",
                    duration_seconds=time.monotonic() - started,
                )

        elapsed = time.monotonic() - started
        return self._parse_reply(process, elapsed)

    def _parse_reply(self, process: subprocess.CompletedProcess, elapsed: float) -> ExecutionResult:
        """
        Turn the harness JSON reply into an ExecutionResult.
        """
        try:
            reply = json.loads(process.stdout)
        except json.JSONDecodeError:
            detail = (process.stderr or process.stdout).strip() or f"exit code {process.returncode}"
            logger.warning("Sandbox produced no result: %s", detail)
            return ExecutionResult(
                outcome=ExecutionOutcome.UNAVAILABLE,
                fault=f"Sandbox produced no result: {detail}",
                duration_seconds=elapsed,
            )

        logs = tuple(str(line) for line in reply.get("logs") or [])
        fault = reply.get("fault")

        if fault is None:
            outcome = ExecutionOutcome.COMPLETED
        elif reply.get("stage") == "compile":
            outcome = ExecutionOutcome.COMPILE_FAULT
        elif reply.get("timedOut"):
            outcome = ExecutionOutcome.TIMED_OUT
        else:
            outcome = ExecutionOutcome.FAULTED

        logger.debug("Sandbox %s after %.3fs with %d log lines", outcome.value, elapsed, len(logs))
        return ExecutionResult(
            outcome=outcome,
            logs=logs,
            fault=str(fault) if fault is not None else None,
            dropped_logs=int(reply.get("dropped") or 0),
            duration_seconds=elapsed,
        )
