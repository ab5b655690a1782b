"""Run the linter as a subprocess and decode its violations."""

from __future__ import annotations

import asyncio
import contextlib
import time

import structlog

from lutels.core.errors import InvocationError
from lutels.lint.models import Violation
from lutels.lint.parsers import parse_violations

log = structlog.get_logger()

LINT_SUBCOMMAND = "lint"
SOURCE_FLAG = "-s"
JSON_FLAG = "-j"
RULES_FLAG = "-r"

BASE_RULE_ARGS: tuple[str, ...] = (JSON_FLAG,)


def rule_args_for(rules_path: str | None = None) -> list[str]:
    """Rule arguments for one pass: JSON output, plus an optional rule file."""
    args = list(BASE_RULE_ARGS)
    if rules_path:
        args.extend([RULES_FLAG, rules_path])
    return args


def build_command(executable: str, rule_args: list[str], text: str) -> list[str]:
    """``<executable> lint <rule_args...> -s <text>``."""
    return [executable, LINT_SUBCOMMAND, *rule_args, SOURCE_FLAG, text]


async def _run(
    cmd: list[str], cwd: str | None, timeout_sec: float | None
) -> tuple[int | None, str, str]:
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        raise InvocationError.spawn_failed(cmd[0], str(e)) from e

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout_sec)
    except TimeoutError as e:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
            await proc.wait()
        raise InvocationError.timed_out(cmd[0], timeout_sec or 0.0) from e

    return (
        proc.returncode,
        stdout_bytes.decode(errors="replace"),
        stderr_bytes.decode(errors="replace"),
    )


async def invoke_linter(
    executable: str,
    rule_args: list[str],
    text: str,
    cwd: str | None = None,
    *,
    timeout_sec: float | None = None,
) -> list[Violation]:
    """Lint ``text`` once. Never raises; failures yield an empty list.

    Args:
        executable: Linter executable path
        rule_args: Arguments placed between ``lint`` and ``-s``
        text: Full document text, passed as a single argument
        cwd: Rule-config directory, so relative paths in rule files resolve
        timeout_sec: Kill the process after this long (None waits forever)
    """
    start_time = time.time()
    cmd = build_command(executable, rule_args, text)
    # The document text is omitted from logs.
    log.debug("lint_invoke", executable=executable, rule_args=rule_args, cwd=cwd)

    try:
        returncode, stdout, stderr = await _run(cmd, cwd, timeout_sec)
        if stderr:
            log.warning("lint_stderr", executable=executable, stderr=stderr.strip())
        if returncode != 0:
            raise InvocationError.exit_status(returncode or -1, stderr.strip())
        violations = parse_violations(stdout)
    except InvocationError as e:
        log.error(
            "lint_invocation_failed",
            **e.to_dict(),
            rule_args=rule_args,
            duration_seconds=round(time.time() - start_time, 3),
        )
        return []

    log.info(
        "lint_parsed",
        violations=len(violations),
        rule_args=rule_args,
        duration_seconds=round(time.time() - start_time, 3),
    )
    return violations
