import logging
from typing import Any, Dict, List

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator as PlaywrightLocator
from playwright.sync_api import Page

from mercury_qa.actions.conditions import find_elements
from mercury_qa.browser.locator import By

ELEMENT_GROUPS = [
    ("Links", By.tag("a")),
    ("Buttons", By.tag("button")),
    ("Input Buttons", By.xpath("//input[@type='button' or @type='submit']")),
    ("Input Fields", By.tag("input")),
    ("Select Dropdowns", By.tag("select")),
    ("Claim Elements", By.xpath("//*[contains(translate(text(), 'CLAIM', 'claim'), 'claim')]")),
    ("Navigation", By.xpath("//*[contains(@class, 'menu') or contains(@class, 'tab') or contains(@class, 'nav')]")),
]

DEFAULT_LIMIT = 10
SOURCE_PREVIEW_CHARS = 1000
MAX_TEXT_LENGTH = 50


def describe_element(element: PlaywrightLocator) -> Dict[str, str]:
    """Non-empty identifying attributes of an element, for writing locators."""
    info = {}
    for attribute in ("id", "name", "type", "class"):
        value = element.get_attribute(attribute)
        if value:
            info[attribute] = value
    text = (element.inner_text() or "").strip()
    if text and len(text) < MAX_TEXT_LENGTH:
        info["text"] = text
    value = element.get_attribute("value")
    if value:
        info["value"] = value
    return info


class ElementInspector:
    """Dumps the elements of the current page that are useful for writing locators."""

    def __init__(self, page: Page, limit: int = DEFAULT_LIMIT):
        self.page = page
        self.limit = limit

    def inspect(self) -> Dict[str, Dict[str, Any]]:
        groups = {}
        for title, locator in ELEMENT_GROUPS:
            elements = find_elements(self.page, locator)
            described: List[Dict[str, str]] = []
            for element in elements[: self.limit]:
                try:
                    described.append(describe_element(element))
                except PlaywrightError as e:
                    logging.debug(f"Could not describe element in {title}: {e}")
            groups[title] = {"count": len(elements), "elements": described}
        return groups

    def page_source_preview(self) -> str:
        source = self.page.content()
        if len(source) > SOURCE_PREVIEW_CHARS:
            return source[:SOURCE_PREVIEW_CHARS] + "..."
        return source

    def log_report(self) -> Dict[str, Dict[str, Any]]:
        logging.info(f"Current Page URL: {self.page.url}")
        logging.info(f"Current Page Title: {self.page.title()}")
        groups = self.inspect()
        for title, group in groups.items():
            logging.info(f"--- {title} (Found: {group['count']}) ---")
            for info in group["elements"]:
                logging.info("  " + " ".join(f"{key}='{value}'" for key, value in info.items()))
            hidden = group["count"] - len(group["elements"])
            if hidden > 0:
                logging.info(f"... and {hidden} more")
        logging.info("========== PAGE SOURCE (First 1000 chars) ==========")
        logging.info(self.page_source_preview())
        return groups
