import unittest

from domain.models import DetectionResult, ProbeResult
from domain.pull_request import RESPONSE_ERROR_PREFIX
from infrastructure.observability.workflow_observer import (
    is_pull_request_response_error,
    summarize_signals,
)


class WorkflowObserverTests(unittest.TestCase):
    def test_summarize_signals_lists_signalling_probes(self) -> None:
        detection = DetectionResult(
            probes=(
                ProbeResult(name="dependencies", signal=True),
                ProbeResult(name="formatting", signal=False),
                ProbeResult(name="documentation", signal=True),
            )
        )

        self.assertTrue(detection.changes_detected)
        self.assertEqual(summarize_signals(detection), "dependencies,documentation")

    def test_summarize_signals_without_signal(self) -> None:
        detection = DetectionResult(probes=(ProbeResult(name="formatting", signal=False),))

        self.assertFalse(detection.changes_detected)
        self.assertEqual(summarize_signals(detection), "none")

    def test_pull_request_response_error_detection(self) -> None:
        self.assertTrue(is_pull_request_response_error(f"{RESPONSE_ERROR_PREFIX}: number missing"))
        self.assertFalse(is_pull_request_response_error("GitHub PR creation failed (401)"))


if __name__ == "__main__":
    unittest.main()
