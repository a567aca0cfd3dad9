"""Architectural boundary tests.

Runs utils/check_boundaries.py against the component so purity and code
quality rules are enforced by the normal test run.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path
import sys

import pytest

CHECKER_PATH = Path(__file__).parent.parent / "utils" / "check_boundaries.py"


def _load_checker():
    """Import the standalone checker script as a module."""
    spec = importlib.util.spec_from_file_location("check_boundaries", CHECKER_PATH)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


checker = _load_checker()


@pytest.mark.parametrize(
    "check_func",
    [func for _name, func in checker.CHECKS],
    ids=[name for name, _func in checker.CHECKS],
)
def test_component_has_no_violations(check_func) -> None:
    """Each boundary check passes for the shipped component."""
    violations = check_func(checker.COMPONENT_PATH)
    assert not violations, checker.format_violations(violations)


class TestCheckerDetectsViolations:
    """The checks catch what they claim to catch."""

    def test_detects_clock_read_and_io(self, tmp_path: Path) -> None:
        """Clock reads outside dt_utils and prints in engines are flagged."""
        engines = tmp_path / "engines"
        engines.mkdir()
        (engines / "bad.py").write_text(
            "from datetime import datetime\n"
            "def f():\n"
            "    print('x')\n"
            "    return datetime.now()\n",
            encoding="utf-8",
        )

        categories = {v.category for v in checker.run_checks(tmp_path)}

        assert categories == {"PURITY", "CLOCK"}

    def test_clock_owner_is_exempt(self, tmp_path: Path) -> None:
        """utils/dt_utils.py may read the clock."""
        utils_dir = tmp_path / "utils"
        utils_dir.mkdir()
        (utils_dir / "dt_utils.py").write_text(
            "def now():\n    return datetime.now(UTC)\n", encoding="utf-8"
        )

        assert checker.find_direct_clock_access(tmp_path) == []

    def test_detects_quality_issues(self, tmp_path: Path) -> None:
        """f-string logging, Optional[...] and catch-all handlers are flagged."""
        (tmp_path / "helpers.py").write_text(
            "def f(x: Optional[int]):\n"
            "    try:\n"
            '        LOGGER.debug(f"value {x}")\n'
            "    except Exception:\n"
            "        pass\n",
            encoding="utf-8",
        )

        categories = {v.category for v in checker.run_checks(tmp_path)}

        assert categories == {"LOGGING", "TYPE_SYNTAX", "EXCEPTION"}
