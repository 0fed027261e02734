import logging

from mercury_qa.browser.locator import By
from mercury_qa.inspector import ELEMENT_GROUPS, ElementInspector, describe_element
from tests.fakes import FakeElement


def test_describe_element_keeps_non_empty_attributes() -> None:
    element = FakeElement("input", attributes={"id": "user-name", "type": "text", "class": "", "value": "su"})
    assert describe_element(element) == {"id": "user-name", "type": "text", "value": "su"}


def test_long_text_is_left_out() -> None:
    assert "text" not in describe_element(FakeElement("div", text="x" * 60))


def test_inspect_counts_and_limits(fake_page) -> None:
    links = [FakeElement("a", text=f"Link {i}") for i in range(4)]
    fake_page.add(By.tag("a"), *links)
    fake_page.add(By.tag("select"), FakeElement("select", attributes={"name": "policyType"}))

    groups = ElementInspector(fake_page, limit=2).inspect()

    assert list(groups) == [title for title, _ in ELEMENT_GROUPS]
    assert groups["Links"]["count"] == 4
    assert groups["Links"]["elements"] == [{"text": "Link 0"}, {"text": "Link 1"}]
    assert groups["Select Dropdowns"]["elements"] == [{"name": "policyType"}]
    assert groups["Buttons"] == {"count": 0, "elements": []}


def test_log_report(fake_page, caplog) -> None:
    fake_page.add(By.tag("a"), *[FakeElement("a", text=str(i)) for i in range(3)])
    fake_page.set_title("ClaimCenter")
    with caplog.at_level(logging.INFO):
        ElementInspector(fake_page, limit=1).log_report()
    assert "Current Page Title: ClaimCenter" in caplog.text
    assert "... and 2 more" in caplog.text
    assert "fake" in caplog.text
