#!/usr/bin/env python3

from __future__ import annotations

import os
import subprocess
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _norm(s: str) -> str:
    return s.replace('\r\n', '\n')


def _run_example(path: str, *, input_data: str | None, timeout_s: float = 10.0) -> dict:
    cmd = [sys.executable, path]
    try:
        p = subprocess.run(
            cmd,
            input=input_data,
            text=True,
            capture_output=True,
            cwd=ROOT,
            timeout=timeout_s,
        )
        return {
            "ok": p.returncode == 0,
            "returncode": p.returncode,
            "stdout": p.stdout,
            "stderr": p.stderr,
            "timeout": False,
        }
    except subprocess.TimeoutExpired as e:
        return {
            "ok": False,
            "returncode": None,
            "stdout": e.stdout or "",
            "stderr": (e.stderr or "") + "\n[TIMEOUT]",
            "timeout": True,
        }


def main() -> int:
    examples = [
        {
            "file": "examples/01_hello_world.py",
            "input": None,
            "check": lambda out: out == "Hello World!\n",
            "expect": "exactly equals 'Hello World!\\n'",
        },
        {
            "file": "examples/02_input_echo.py",
            "input": "abc\n\n",
            "check": lambda out: out == "abc",
            "expect": "exactly equals 'abc'",
        },
        {
            "file": "examples/03_pause_resume.py",
            "input": None,
            "check": lambda out: out.count("Paused") == 2,
            "expect": "two pause reports",
        },
    ]

    print("=== bftape Examples Verification ===")

    any_fail = False
    for ex in examples:
        r = _run_example(ex["file"], input_data=ex["input"], timeout_s=10.0)
        out = _norm(r["stdout"])

        passed = r["ok"] and ex["check"](out)
        status = "PASS" if passed else "FAIL"
        print(f"\n[{status}] {ex['file']}")

        if passed:
            continue

        any_fail = True
        print(f"Expected: {ex['expect']}")
        print(f"Return code: {r['returncode']}  Timeout: {r['timeout']}")
        print("--- stdout ---")
        print(out[:2000])
        print("--- stderr ---")
        print(r["stderr"][:2000])

    if any_fail:
        print("\nSome examples FAILED.")
        return 1

    print("\nAll examples passed (output checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
