#!/usr/bin/env python3
# ruff: noqa: T201
"""Architectural boundary validation for Activity Tracker.

Run standalone: python utils/check_boundaries.py
Exit code 0 = all checks pass, 1 = violations found

Checks:
1. Purity Boundary - No I/O in engines/ and utils/
2. Clock Access - Only utils/dt_utils.py may read the system clock
3. Code Quality - Lazy logging, type syntax, exception handling, error keys
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
import re
import sys
from typing import NamedTuple

# Base paths
REPO_ROOT = Path(__file__).parent.parent
COMPONENT_PATH = REPO_ROOT / "custom_components" / "activity_tracker"

# Pure modules that must not perform I/O
PURE_MODULE_DIRS = ["engines", "utils"]

# The single module allowed to read the clock
CLOCK_OWNER = Path("utils") / "dt_utils.py"


class Violation(NamedTuple):
    """A boundary violation with context."""

    category: str
    file_path: Path
    line_number: int
    line_content: str
    message: str


def _iter_files(paths: list[Path]) -> Iterator[Path]:
    """Yield every Python file under the given files/directories."""
    for path in paths:
        if path.is_file():
            yield path
        elif path.is_dir():
            yield from sorted(path.rglob("*.py"))


def _iter_lines(paths: list[Path]) -> Iterator[tuple[Path, int, str]]:
    """Yield (file, line number, line) for every line in the given paths."""
    for file_path in _iter_files(paths):
        try:
            with open(file_path, encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    yield file_path, line_num, line
        except OSError as err:
            print(f"Warning: Could not read {file_path}: {err}", file=sys.stderr)


def find_io_in_pure_modules(component_path: Path = COMPONENT_PATH) -> list[Violation]:
    """Check: No file, network, database or console I/O in pure modules."""
    patterns = [
        (re.compile(r"^\s*(import|from)\s+(sqlite3|requests|aiohttp|socket|shutil)\b"),
            "I/O library import in pure module"),
        (re.compile(r"^\s*(import|from)\s+(os|pathlib)\b"),
            "Filesystem import in pure module"),
        (re.compile(r"(?<![\w.])open\("), "File access in pure module"),
        (re.compile(r"(?<![\w.])print\("), "Console output in pure module"),
    ]
    pure_paths = [component_path / name for name in PURE_MODULE_DIRS]

    violations = []
    for file_path, line_num, line in _iter_lines(pure_paths):
        for pattern, message in patterns:
            if pattern.search(line):
                violations.append(
                    Violation("PURITY", file_path, line_num, line.strip(), message)
                )
    return violations


def find_direct_clock_access(component_path: Path = COMPONENT_PATH) -> list[Violation]:
    """Check: The clock is read only through dt_utils.dt_now_utc()."""
    pattern = re.compile(
        r"\b(datetime\.now|datetime\.utcnow|date\.today|time\.time|time\.monotonic)\("
    )
    clock_owner = component_path / CLOCK_OWNER

    violations = []
    for file_path, line_num, line in _iter_lines([component_path]):
        if file_path == clock_owner:
            continue
        if pattern.search(line):
            violations.append(
                Violation(
                    "CLOCK",
                    file_path,
                    line_num,
                    line.strip(),
                    "Direct clock read - inject `now` or use dt_utils.dt_now_utc()",
                )
            )
    return violations


def find_fstrings_in_logging(component_path: Path = COMPONENT_PATH) -> list[Violation]:
    """Check: No f-strings in logging statements."""
    pattern = re.compile(
        r'(LOGGER|const\.LOGGER)\.(debug|info|warning|error|exception)\s*\(\s*f["\']'
    )

    violations = []
    for file_path, line_num, line in _iter_lines([component_path]):
        if pattern.search(line):
            violations.append(
                Violation(
                    "LOGGING",
                    file_path,
                    line_num,
                    line.strip(),
                    'Use lazy logging: logger.debug("msg: %s", var) not f"msg: {var}"',
                )
            )
    return violations


def find_old_typing_syntax(component_path: Path = COMPONENT_PATH) -> list[Violation]:
    """Check: Modern type syntax (str | None, not Optional[str])."""
    pattern = re.compile(r"\b(Optional|Union)\[")

    violations = []
    for file_path, line_num, line in _iter_lines([component_path]):
        if pattern.search(line):
            violations.append(
                Violation(
                    "TYPE_SYNTAX",
                    file_path,
                    line_num,
                    line.strip(),
                    'Use modern syntax: "str | None" instead of "Optional[str]"',
                )
            )
    return violations


def find_bare_exceptions(component_path: Path = COMPONENT_PATH) -> list[Violation]:
    """Check: No bare or catch-all exception handlers."""
    pattern = re.compile(r"^\s*except\s*(\(?\s*(Exception|BaseException)\s*\)?)?\s*:")

    violations = []
    for file_path, line_num, line in _iter_lines([component_path]):
        if pattern.search(line):
            violations.append(
                Violation(
                    "EXCEPTION",
                    file_path,
                    line_num,
                    line.strip(),
                    "Use specific exception types, not bare except/Exception",
                )
            )
    return violations


def find_hardcoded_translation_keys(
    component_path: Path = COMPONENT_PATH,
) -> list[Violation]:
    """Check: translation_key must use const.TRANS_KEY_* constants."""
    pattern = re.compile(r'translation_key\s*=\s*["\']([^"\']+)["\']')

    violations = []
    for file_path, line_num, line in _iter_lines([component_path]):
        if pattern.search(line) and "const.TRANS_KEY_" not in line:
            violations.append(
                Violation(
                    "TRANSLATION",
                    file_path,
                    line_num,
                    line.strip(),
                    "Use const.TRANS_KEY_* for translation_key",
                )
            )
    return violations


CHECKS = [
    ("Purity Boundary", find_io_in_pure_modules),
    ("Clock Access", find_direct_clock_access),
    ("Logging Quality", find_fstrings_in_logging),
    ("Type Syntax", find_old_typing_syntax),
    ("Exception Handling", find_bare_exceptions),
    ("Translation Constants", find_hardcoded_translation_keys),
]


def run_checks(component_path: Path = COMPONENT_PATH) -> list[Violation]:
    """Run every check and return all violations."""
    violations: list[Violation] = []
    for _check_name, check_func in CHECKS:
        violations.extend(check_func(component_path))
    return violations


def format_violations(violations: list[Violation], root: Path = REPO_ROOT) -> str:
    """Format violations for display, grouped by category."""
    if not violations:
        return ""

    by_category: dict[str, list[Violation]] = {}
    for v in violations:
        by_category.setdefault(v.category, []).append(v)

    output = []
    for category, items in sorted(by_category.items()):
        output.append(f"\n{'=' * 80}")
        output.append(f"❌ {category} VIOLATIONS ({len(items)} found)")
        output.append(f"{'=' * 80}")
        for v in items:
            try:
                rel_path = v.file_path.relative_to(root)
            except ValueError:
                rel_path = v.file_path
            output.append(f"\n📁 {rel_path}:{v.line_number}")
            output.append(f"   {v.line_content}")
            output.append(f"   ⚠️  {v.message}")

    return "\n".join(output)


def main() -> int:
    """Run all boundary checks."""
    print("🔍 Running architectural boundary checks...")
    print(f"   Checking: {COMPONENT_PATH.relative_to(REPO_ROOT)}\n")

    all_violations = []
    for check_name, check_func in CHECKS:
        print(f"   ⏳ Checking {check_name}...", end=" ")
        violations = check_func(COMPONENT_PATH)
        if violations:
            print(f"❌ {len(violations)} violation(s)")
            all_violations.extend(violations)
        else:
            print("✅")

    if all_violations:
        print(format_violations(all_violations))
        print(f"\n{'=' * 80}")
        print(f"❌ FAILED: {len(all_violations)} boundary violation(s) found")
        print(f"{'=' * 80}\n")
        return 1

    print("\n" + "=" * 80)
    print("✅ SUCCESS: All architectural boundaries validated")
    print("=" * 80 + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
