"""Wait conditions.

Element, text, attribute, URL and title conditions wait through Playwright's
own primitives (``Locator.wait_for``, ``page.wait_for_url`` and ``expect``)
in ``wait_for``. Calling a condition on a page is a single non-blocking
check, used when polling a negated or composed condition. ``Predicate`` and
``FindElement`` have no Playwright counterpart and are only ever polled.
"""
import re
import time
from typing import Callable, List

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator as PlaywrightLocator
from playwright.sync_api import Page, expect

from mercury_qa.browser.locator import Locator
from mercury_qa.exceptions import NoSuchElementError, StaleElementError

STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "has been detached",
)


def is_stale_error(exc: BaseException) -> bool:
    if isinstance(exc, StaleElementError):
        return True
    return isinstance(exc, PlaywrightError) and any(m in str(exc).lower() for m in STALE_MARKERS)


def to_ms(seconds: float) -> float:
    # Playwright reads a timeout of 0 as "wait forever"
    return max(seconds * 1000, 1)


def remaining(deadline: float) -> float:
    return to_ms(deadline - time.monotonic())


def find_elements(page: Page, locator: Locator) -> List[PlaywrightLocator]:
    return page.locator(locator.selector).all()


def find_element(page: Page, locator: Locator) -> PlaywrightLocator:
    elements = page.locator(locator.selector)
    if elements.count() == 0:
        raise NoSuchElementError(locator)
    return elements.first


def contains(fragment: str) -> re.Pattern:
    return re.compile(re.escape(fragment))


class Condition:
    description = "condition"
    locator = None

    def __call__(self, page: Page):
        try:
            return self.evaluate(page)
        except PlaywrightError as e:
            if is_stale_error(e):
                return False
            raise

    def evaluate(self, page: Page):
        raise NotImplementedError

    def __str__(self):
        if self.locator is None:
            return self.description
        return f"{self.description} of {self.locator}"


class ElementPresent(Condition):
    description = "presence"

    def __init__(self, locator: Locator):
        self.locator = locator

    def evaluate(self, page):
        elements = page.locator(self.locator.selector)
        return elements.first if elements.count() else False

    def wait_for(self, page, timeout: float):
        element = page.locator(self.locator.selector).first
        element.wait_for(state="attached", timeout=to_ms(timeout))
        return element


class ElementVisible(Condition):
    description = "visibility"

    def __init__(self, locator: Locator):
        self.locator = locator

    def evaluate(self, page):
        element = page.locator(self.locator.selector).first
        return element if element.is_visible() else False

    def wait_for(self, page, timeout: float):
        element = page.locator(self.locator.selector).first
        element.wait_for(state="visible", timeout=to_ms(timeout))
        return element


class ElementClickable(Condition):
    description = "clickability"

    def __init__(self, locator: Locator):
        self.locator = locator

    def evaluate(self, page):
        element = page.locator(self.locator.selector).first
        if element.is_visible() and element.is_enabled():
            return element
        return False

    def wait_for(self, page, timeout: float):
        deadline = time.monotonic() + timeout
        element = page.locator(self.locator.selector).first
        element.wait_for(state="visible", timeout=to_ms(timeout))
        expect(element).to_be_enabled(timeout=remaining(deadline))
        return element


class AllElementsVisible(Condition):
    description = "visibility of all elements"

    def __init__(self, locator: Locator):
        self.locator = locator

    def evaluate(self, page):
        elements = page.locator(self.locator.selector).all()
        if elements and all(element.is_visible() for element in elements):
            return elements
        return False

    def wait_for(self, page, timeout: float):
        deadline = time.monotonic() + timeout
        matches = page.locator(self.locator.selector)
        matches.first.wait_for(state="visible", timeout=to_ms(timeout))
        elements = matches.all()
        for element in elements:
            element.wait_for(state="visible", timeout=remaining(deadline))
        return elements


class ElementInvisible(Condition):
    description = "invisibility"

    def __init__(self, locator: Locator):
        self.locator = locator

    def __call__(self, page):
        try:
            return self.evaluate(page)
        except PlaywrightError as e:
            # a detached element is gone, which is what we wait for
            if is_stale_error(e):
                return True
            raise

    def evaluate(self, page):
        return not any(element.is_visible() for element in page.locator(self.locator.selector).all())

    def wait_for(self, page, timeout: float):
        # "hidden" is also satisfied when nothing matches
        page.locator(self.locator.selector).first.wait_for(state="hidden", timeout=to_ms(timeout))
        return True


class TextInElement(Condition):
    def __init__(self, locator: Locator, text: str):
        self.locator = locator
        self.text = text
        self.description = f"text '{text}'"

    def evaluate(self, page):
        elements = page.locator(self.locator.selector)
        return elements.count() > 0 and self.text in (elements.first.inner_text() or "")

    def wait_for(self, page, timeout: float):
        expect(page.locator(self.locator.selector).first).to_contain_text(self.text, timeout=to_ms(timeout))
        return True


class AttributeContains(Condition):
    def __init__(self, locator: Locator, attribute: str, value: str):
        self.locator = locator
        self.attribute = attribute
        self.value = value
        self.description = f"attribute '{attribute}' containing '{value}'"

    def evaluate(self, page):
        elements = page.locator(self.locator.selector)
        if elements.count() == 0:
            return False
        actual = elements.first.get_attribute(self.attribute)
        return actual is not None and self.value in actual

    def wait_for(self, page, timeout: float):
        element = page.locator(self.locator.selector).first
        expect(element).to_have_attribute(self.attribute, contains(self.value), timeout=to_ms(timeout))
        return True


class UrlContains(Condition):
    def __init__(self, fragment: str):
        self.fragment = fragment
        self.description = f"url containing '{fragment}'"

    def evaluate(self, page):
        return self.fragment in page.url

    def wait_for(self, page, timeout: float):
        page.wait_for_url(lambda url: self.fragment in url, wait_until="commit", timeout=to_ms(timeout))
        return True


class TitleContains(Condition):
    def __init__(self, fragment: str):
        self.fragment = fragment
        self.description = f"title containing '{fragment}'"

    def evaluate(self, page):
        return self.fragment in page.title()

    def wait_for(self, page, timeout: float):
        expect(page).to_have_title(contains(self.fragment), timeout=to_ms(timeout))
        return True


class FindElement(Condition):
    """Returns the element or raises NoSuchElementError; used by fluent waits."""

    description = "element"

    def __init__(self, locator: Locator):
        self.locator = locator

    def evaluate(self, page):
        return find_element(page, self.locator)


class Predicate(Condition):
    def __init__(self, predicate: Callable[[Page], object], description: str = None):
        self.predicate = predicate
        self.description = description or getattr(predicate, "__name__", "custom condition")

    def evaluate(self, page):
        return self.predicate(page)
