import logging
from typing import List, Tuple

from playwright.sync_api import Locator as PlaywrightLocator
from playwright.sync_api import Page

from mercury_qa.actions.waits import wait_for_element_clickable
from mercury_qa.browser.locator import By, Locator, xpath_literal
from mercury_qa.exceptions import NoSuchElementError, WaitTimeoutError

OPTION_TIMEOUT = 5

# Guidewire renders the same dropdown in different ways depending on widget
# and version. Tried in this order; the first clickable match wins.
OPTION_PATTERNS = (
    "//select[contains(@id,{widget_id})]//option[text()={label}]",
    "//*[@id={widget_id}]//following-sibling::div//div[text()={label}]",
    "//*[@id={widget_id}]//option[text()={label}]",
    "//div[contains(@class,'gw-popup')]//div[normalize-space(text())={label}]",
)


def candidate_locators(widget_id: str, label: str) -> List[Locator]:
    quoted_id = xpath_literal(widget_id)
    quoted_label = xpath_literal(label)
    return [By.xpath(p.format(widget_id=quoted_id, label=quoted_label)) for p in OPTION_PATTERNS]


def resolve_first_clickable(
    page: Page, candidates: List[Locator], label: str = "", timeout: float = OPTION_TIMEOUT
) -> Tuple[Locator, PlaywrightLocator]:
    """Wait on each candidate in turn, each with its own short timeout.

    Returns:
        Tuple of the winning locator and its Playwright locator

    Raises:
        NoSuchElementError: when no candidate becomes clickable
    """
    for index, candidate in enumerate(candidates, start=1):
        try:
            element = wait_for_element_clickable(page, candidate, timeout)
            logging.info(f"Dropdown option '{label}' found with pattern {index}")
            return candidate, element
        except WaitTimeoutError:
            logging.debug(f"Pattern {index} did not match option '{label}': {candidate}")
    raise NoSuchElementError(
        candidates[0] if candidates else None,
        f"Could not find option '{label}' with any of {len(candidates)} patterns",
    )
