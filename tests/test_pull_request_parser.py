import json
import unittest

from domain.pull_request import (
    RESPONSE_ERROR_PREFIX,
    PullRequestResponseError,
    parse_pull_request_response,
)


class PullRequestParserTests(unittest.TestCase):
    def test_parse_extracts_number_and_url(self) -> None:
        pull_request = parse_pull_request_response(
            json.dumps({"number": 12, "html_url": "https://github.com/o/r/pull/12", "state": "open"})
        )

        self.assertEqual(pull_request.number, 12)
        self.assertEqual(pull_request.html_url, "https://github.com/o/r/pull/12")

    def test_parse_accepts_missing_url(self) -> None:
        pull_request = parse_pull_request_response(json.dumps({"number": 3}))

        self.assertEqual(pull_request.number, 3)
        self.assertIsNone(pull_request.html_url)

    def test_parse_rejects_non_json_with_clear_error(self) -> None:
        with self.assertRaises(PullRequestResponseError) as raised_error:
            parse_pull_request_response("<html>502 Bad Gateway</html>")

        self.assertIn(RESPONSE_ERROR_PREFIX, str(raised_error.exception))
        self.assertIn("not valid JSON", str(raised_error.exception))

    def test_parse_rejects_json_array(self) -> None:
        with self.assertRaises(PullRequestResponseError) as raised_error:
            parse_pull_request_response("[1, 2]")

        self.assertIn("JSON object", str(raised_error.exception))

    def test_parse_rejects_missing_number(self) -> None:
        with self.assertRaises(PullRequestResponseError) as raised_error:
            parse_pull_request_response(json.dumps({"html_url": "https://example.com"}))

        self.assertIn("number", str(raised_error.exception))

    def test_parse_rejects_non_integer_number(self) -> None:
        for bad_number in ("12", True, 0, 1.5):
            with self.subTest(number=bad_number):
                with self.assertRaises(PullRequestResponseError):
                    parse_pull_request_response(json.dumps({"number": bad_number}))


if __name__ == "__main__":
    unittest.main()
