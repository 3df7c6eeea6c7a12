import unittest
from pathlib import Path

from infrastructure.secrets import EnvSecretProvider, MissingSecretError, resolve_git_credentials
from infrastructure.settings import (
    MaintenanceSettings,
    SettingsError,
    parse_build_number,
    required_env,
)


class MaintenanceSettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = MaintenanceSettings.from_env({})

        self.assertEqual(settings.base_branch, "main")
        self.assertEqual(settings.git_remote, "origin")
        self.assertEqual(settings.repository_directory, Path("."))
        self.assertFalse(settings.dry_run)
        self.assertEqual(settings.branch_conflict_policy, "fail")
        self.assertEqual(settings.changelog_file, "CHANGELOG.md")
        self.assertEqual(settings.commands.outdated, ("npm", "outdated", "--json"))
        self.assertIsNone(settings.summary_file)

    def test_overrides_are_parsed(self) -> None:
        settings = MaintenanceSettings.from_env(
            {
                "GH_BASE_BRANCH": "develop",
                "DRY_RUN": "yes",
                "BRANCH_CONFLICT_POLICY": "Suffix",
                "DOCS_SOURCE_DIRS": "src, lib ,",
                "FORMAT_CHECK_COMMAND": "black --check 'my project'",
                "COMMAND_TIMEOUT_SECONDS": "30",
                "MAINTENANCE_SUMMARY_FILE": "out/summary.json",
            }
        )

        self.assertEqual(settings.base_branch, "develop")
        self.assertTrue(settings.dry_run)
        self.assertEqual(settings.branch_conflict_policy, "suffix")
        self.assertEqual(settings.docs_source_dirs, ("src", "lib"))
        self.assertEqual(settings.commands.format_check, ("black", "--check", "my project"))
        self.assertEqual(settings.command_timeout, 30.0)
        self.assertEqual(settings.summary_file, Path("out/summary.json"))

    def test_invalid_values_raise_settings_error(self) -> None:
        invalid_environments = (
            {"DRY_RUN": "maybe"},
            {"BRANCH_CONFLICT_POLICY": "merge"},
            {"COMMAND_TIMEOUT_SECONDS": "-1"},
            {"OUTDATED_COMMAND": "   "},
            {"DOCS_COMMAND": "npm run 'docs"},
        )
        for environment in invalid_environments:
            with self.subTest(environment=environment):
                with self.assertRaises(SettingsError):
                    MaintenanceSettings.from_env(environment)

    def test_build_number_must_be_positive_integer(self) -> None:
        self.assertEqual(parse_build_number(" 42 "), 42)
        for raw_value in ("abc", "0", "-3"):
            with self.subTest(raw_value=raw_value):
                with self.assertRaises(SettingsError):
                    parse_build_number(raw_value)

    def test_required_env(self) -> None:
        self.assertEqual(required_env("GH_OWNER", {"GH_OWNER": "octo"}), "octo")
        with self.assertRaises(SettingsError):
            required_env("GH_OWNER", {"GH_OWNER": ""})


class SecretProviderTests(unittest.TestCase):
    def test_missing_secret_raises(self) -> None:
        with self.assertRaises(MissingSecretError):
            EnvSecretProvider({}).get_secret("GITHUB_TOKEN")

    def test_git_password_falls_back_to_github_token(self) -> None:
        provider = EnvSecretProvider({"GIT_USERNAME": "bot", "GITHUB_TOKEN": "token-value"})

        credentials = resolve_git_credentials(provider)

        self.assertEqual(credentials.username, "bot")
        self.assertEqual(credentials.password, "token-value")
        self.assertNotIn("token-value", repr(credentials))


if __name__ == "__main__":
    unittest.main()
