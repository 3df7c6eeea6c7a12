import shutil
import subprocess
import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest import mock

from infrastructure.repo import updaters


class RunUpdateCommandTests(unittest.TestCase):
    def _run(self, completed=None, side_effect=None):
        with mock.patch.object(updaters, "run_capture", return_value=completed, side_effect=side_effect):
            return updaters.run_update_command(
                updaters.DEPENDENCY_UPDATE_STEP,
                Path("."),
                command=("npm", "update"),
            )

    def test_success(self) -> None:
        outcome = self._run(subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr=""))

        self.assertEqual(outcome.status, "success")
        self.assertEqual(outcome.step, "update_dependencies")

    def test_non_zero_exit_is_warning_with_last_output_line(self) -> None:
        outcome = self._run(
            subprocess.CompletedProcess(
                args=[],
                returncode=1,
                stdout="",
                stderr="npm ERR! code ERESOLVE\nnpm ERR! unable to resolve dependency tree",
            )
        )

        self.assertEqual(outcome.status, "warning")
        self.assertEqual(outcome.detail, "exit code 1: npm ERR! unable to resolve dependency tree")

    def test_missing_tool_is_warning(self) -> None:
        outcome = self._run(side_effect=FileNotFoundError("npm"))

        self.assertEqual(outcome.status, "warning")
        self.assertEqual(outcome.detail, "tool unavailable: npm")

    @unittest.skipUnless(shutil.which("sh"), "sh is not available")
    def test_non_utf8_tool_output_is_a_warning(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_directory:
            outcome = updaters.run_update_command(
                updaters.FORMAT_STEP,
                Path(tmp_directory),
                command=("sh", "-c", r"printf 'cannot format caf\351.js\n' >&2; exit 2"),
            )

        self.assertEqual(outcome.status, "warning")
        self.assertEqual(outcome.detail, "exit code 2: cannot format caf\ufffd.js")


class AppendChangelogTests(unittest.TestCase):
    def test_appends_entry_to_existing_changelog(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_directory:
            repo_dir = Path(tmp_directory)
            changelog = repo_dir / "CHANGELOG.md"
            changelog.write_text("# Changelog", encoding="utf-8")

            outcome = updaters.append_changelog(
                repo_dir,
                changelog_file="CHANGELOG.md",
                today=lambda: date(2026, 10, 17),
            )

            content = changelog.read_text(encoding="utf-8")

        self.assertEqual(outcome.status, "success")
        self.assertTrue(content.startswith("# Changelog\n"))
        self.assertIn("## Automated maintenance - 2026-10-17", content)
        self.assertEqual(sum(1 for line in content.splitlines() if line.startswith("- ")), 3)

    def test_appends_to_changelog_that_is_not_utf8(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_directory:
            repo_dir = Path(tmp_directory)
            changelog = repo_dir / "CHANGELOG.md"
            changelog.write_bytes(b"# Changelog\n\n- caf\xe9")

            outcome = updaters.append_changelog(
                repo_dir,
                changelog_file="CHANGELOG.md",
                today=lambda: date(2026, 10, 17),
            )

            content = changelog.read_bytes()

        self.assertEqual(outcome.status, "success")
        self.assertTrue(content.startswith(b"# Changelog\n\n- caf\xe9\n\n## Automated maintenance - 2026-10-17"))

    def test_creates_changelog_when_missing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_directory:
            repo_dir = Path(tmp_directory)

            outcome = updaters.append_changelog(
                repo_dir,
                changelog_file="docs/CHANGELOG.md",
                today=lambda: date(2026, 1, 2),
            )

            self.assertTrue((repo_dir / "docs" / "CHANGELOG.md").is_file())

        self.assertEqual(outcome.status, "success")


if __name__ == "__main__":
    unittest.main()
