import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class TestStatus(str, Enum):
    __test__ = False

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class Attachment(BaseModel):
    name: str
    mime_type: str
    extension: str
    content: bytes = Field(repr=False)
    # path relative to the report directory, set once written to disk
    source: Optional[str] = None


class TestStep(BaseModel):
    __test__ = False

    name: str
    status: TestStatus = TestStatus.PASSED
    timestamp: datetime = Field(default_factory=datetime.now)


class TestResult(BaseModel):
    """Report record of one test case: outcome plus everything attached to it."""

    __test__ = False

    test_id: str
    test_name: str
    status: TestStatus = TestStatus.PENDING
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[float] = None
    error_message: Optional[str] = None
    skip_reason: Optional[str] = None
    description: Optional[str] = None
    parameters: Dict[str, str] = Field(default_factory=dict)
    steps: List[TestStep] = Field(default_factory=list)
    links: List[Dict[str, str]] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)

    def add_step(self, name: str, status: TestStatus = TestStatus.PASSED):
        self.steps.append(TestStep(name=name, status=status))

    def add_parameter(self, name: str, value: Any):
        self.parameters[name] = "" if value is None else str(value)

    def add_description(self, description: str):
        self.description = description

    def add_link(self, name: str, url: str):
        self.links.append({"name": name, "url": url})

    def attach_text(self, name: str, content: str):
        self.attachments.append(
            Attachment(name=name, mime_type="text/plain", extension="txt", content=content.encode("utf-8"))
        )

    def attach_json(self, name: str, content: Any):
        """Attach a JSON document. Strings are assumed to be JSON already."""
        text = content if isinstance(content, str) else json.dumps(content, indent=2, ensure_ascii=False, default=str)
        self.attachments.append(
            Attachment(name=name, mime_type="application/json", extension="json", content=text.encode("utf-8"))
        )

    def attach_png(self, name: str, content: bytes):
        self.attachments.append(Attachment(name=name, mime_type="image/png", extension="png", content=content))

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude={"attachments": {"__all__": {"content"}}})


class TestRunSession(BaseModel):
    __test__ = False

    session_id: str
    start_time: datetime = Field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    test_results: Dict[str, TestResult] = Field(default_factory=dict)

    def add_result(self, result: TestResult) -> TestResult:
        self.test_results[result.test_id] = result
        return result

    def complete_session(self):
        self.end_time = datetime.now()

    def get_summary_stats(self) -> Dict[str, Any]:
        results = list(self.test_results.values())
        counts = {status: sum(1 for r in results if r.status == status) for status in TestStatus}
        end = self.end_time or datetime.now()
        return {
            "total_tests": len(results),
            "passed": counts[TestStatus.PASSED],
            "failed": counts[TestStatus.FAILED],
            "skipped": counts[TestStatus.SKIPPED],
            "success_rate": counts[TestStatus.PASSED] / len(results) if results else 0,
            "total_duration": (end - self.start_time).total_seconds(),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "summary": self.get_summary_stats(),
            "test_results": [result.to_dict() for result in self.test_results.values()],
        }
