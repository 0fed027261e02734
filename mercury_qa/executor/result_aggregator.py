import json
import logging
import os
import re
from datetime import datetime
from typing import Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from mercury_qa.data import TestRunSession


def default_report_dir(base_dir: str = "./reports") -> str:
    timestamp = os.getenv("MERCURY_TIMESTAMP") or datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    return os.path.join(base_dir, f"test_{timestamp}")


def _safe_name(text: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", text).strip("_")[:80] or "attachment"


class ResultAggregator:
    """Writes a finished test run to disk as JSON and HTML."""

    def __init__(self):
        self.env = Environment(
            loader=PackageLoader("mercury_qa", "templates"),
            autoescape=select_autoescape(["html", "j2"]),
        )

    def write_attachments(self, test_session: TestRunSession, report_dir: str):
        """Write attachment payloads under ``report_dir/attachments`` and record their paths."""
        attachments_dir = os.path.join(report_dir, "attachments")
        for result in test_session.test_results.values():
            for index, attachment in enumerate(result.attachments, start=1):
                if attachment.source:
                    continue
                os.makedirs(attachments_dir, exist_ok=True)
                file_name = f"{_safe_name(result.test_name)}_{index}_{_safe_name(attachment.name)}.{attachment.extension}"
                with open(os.path.join(attachments_dir, file_name), "wb") as f:
                    f.write(attachment.content)
                attachment.source = f"attachments/{file_name}"

    def generate_json_report(self, test_session: TestRunSession, report_dir: Optional[str] = None) -> str:
        """Generate the JSON report.

        Returns:
            Absolute path of the written file
        """
        report_dir = report_dir or default_report_dir()
        os.makedirs(report_dir, exist_ok=True)
        self.write_attachments(test_session, report_dir)

        json_path = os.path.join(report_dir, "test_results.json")
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(test_session.to_dict(), f, indent=2, ensure_ascii=False, default=str)

        absolute_path = os.path.abspath(json_path)
        logging.info(f"JSON report generated: {absolute_path}")
        return absolute_path

    def generate_html_report(self, test_session: TestRunSession, report_dir: Optional[str] = None) -> str:
        report_dir = report_dir or default_report_dir()
        os.makedirs(report_dir, exist_ok=True)
        self.write_attachments(test_session, report_dir)

        template = self.env.get_template("report.html.j2")
        html_out = template.render(
            session=test_session,
            summary=test_session.get_summary_stats(),
            results=list(test_session.test_results.values()),
        )
        html_path = os.path.join(report_dir, "test_report.html")
        with open(html_path, "w", encoding="utf-8") as f:
            f.write(html_out)

        absolute_path = os.path.abspath(html_path)
        logging.info(f"HTML report generated: {absolute_path}")
        return absolute_path
