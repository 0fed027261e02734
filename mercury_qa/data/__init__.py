from .test_structures import (
    Attachment,
    TestResult,
    TestRunSession,
    TestStatus,
    TestStep,
)

__all__ = ["TestStatus", "TestStep", "Attachment", "TestResult", "TestRunSession"]
