import logging
import time
from typing import Callable, Iterable, Optional, Tuple, Type

from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from mercury_qa.actions.conditions import (
    AllElementsVisible,
    AttributeContains,
    ElementClickable,
    ElementInvisible,
    ElementPresent,
    ElementVisible,
    FindElement,
    Predicate,
    TextInElement,
    TitleContains,
    UrlContains,
)
from mercury_qa.browser.locator import Locator
from mercury_qa.exceptions import NoSuchElementError, WaitTimeoutError

DEFAULT_TIMEOUT = 20
DEFAULT_POLLING = 0.5


class Wait:
    """Waits for a condition against a page until it holds or the timeout elapses.

    Conditions that provide ``wait_for`` are handed to Playwright with the
    whole timeout. Anything else is polled every ``poll_frequency`` seconds.

    Args:
        page: Page the condition is evaluated against
        timeout: Seconds before giving up
        poll_frequency: Seconds between evaluations
        ignored_exceptions: Exception types treated as "not yet" while polling
        clock: Monotonic time source, injectable for tests
        sleep: Sleep function, injectable for tests
    """

    def __init__(
        self,
        page: Page,
        timeout: float = DEFAULT_TIMEOUT,
        poll_frequency: float = DEFAULT_POLLING,
        ignored_exceptions: Iterable[Type[BaseException]] = (),
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.page = page
        self.timeout = timeout
        self.poll_frequency = poll_frequency
        self.ignored_exceptions: Tuple[Type[BaseException], ...] = tuple(ignored_exceptions)
        self._clock = clock
        self._sleep = sleep

    def until(self, condition: Callable[[Page], object], message: str = ""):
        wait_for = getattr(condition, "wait_for", None)
        if wait_for is not None:
            try:
                return wait_for(self.page, self.timeout)
            except (PlaywrightTimeoutError, AssertionError) as e:
                logging.debug(f"Playwright gave up waiting for {condition}: {e}")
                raise WaitTimeoutError(str(condition), getattr(condition, "locator", None), self.timeout, message) from e
        return self.poll(condition, message)

    def poll(self, condition: Callable[[Page], object], message: str = ""):
        end_time = self._clock() + self.timeout
        while True:
            try:
                value = condition(self.page)
                if value:
                    return value
            except self.ignored_exceptions as e:
                logging.debug(f"Ignored while waiting for {condition}: {e}")
            if self._clock() >= end_time:
                break
            self._sleep(self.poll_frequency)
        raise WaitTimeoutError(str(condition), getattr(condition, "locator", None), self.timeout, message)

    def until_not(self, condition: Callable[[Page], object], message: str = ""):
        def negated(page):
            return not condition(page)

        negated_condition = Predicate(negated, f"not {condition}")
        negated_condition.locator = getattr(condition, "locator", None)
        return self.until(negated_condition, message)


def wait_for_element_visible(page: Page, locator: Locator, timeout: float = DEFAULT_TIMEOUT):
    return Wait(page, timeout).until(ElementVisible(locator))


def wait_for_element_clickable(page: Page, locator: Locator, timeout: float = DEFAULT_TIMEOUT):
    return Wait(page, timeout).until(ElementClickable(locator))


def wait_for_element_present(page: Page, locator: Locator, timeout: float = DEFAULT_TIMEOUT):
    return Wait(page, timeout).until(ElementPresent(locator))


def wait_for_all_elements_visible(page: Page, locator: Locator, timeout: float = DEFAULT_TIMEOUT):
    return Wait(page, timeout).until(AllElementsVisible(locator))


def wait_for_element_invisible(page: Page, locator: Locator, timeout: float = DEFAULT_TIMEOUT) -> bool:
    return Wait(page, timeout).until(ElementInvisible(locator))


def wait_for_text_in_element(page: Page, locator: Locator, text: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    return Wait(page, timeout).until(TextInElement(locator, text))


def wait_for_attribute_contains(
    page: Page, locator: Locator, attribute: str, value: str, timeout: float = DEFAULT_TIMEOUT
) -> bool:
    return Wait(page, timeout).until(AttributeContains(locator, attribute, value))


def wait_for_url_contains(page: Page, fragment: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    return Wait(page, timeout).until(UrlContains(fragment))


def wait_for_title_contains(page: Page, fragment: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    return Wait(page, timeout).until(TitleContains(fragment))


def wait_for_condition(
    page: Page, predicate: Callable[[Page], object], timeout: float = DEFAULT_TIMEOUT, description: Optional[str] = None
):
    return Wait(page, timeout).until(Predicate(predicate, description))


def fluent_wait_for_element(
    page: Page, locator: Locator, timeout: float = DEFAULT_TIMEOUT, polling_ms: int = int(DEFAULT_POLLING * 1000)
):
    """Wait for an element with a custom poll interval, ignoring misses while polling."""
    wait = Wait(page, timeout, poll_frequency=polling_ms / 1000, ignored_exceptions=(NoSuchElementError,))
    return wait.until(FindElement(locator))


def hard_wait(milliseconds: int):
    logging.debug(f"Hard wait {milliseconds}ms")
    time.sleep(milliseconds / 1000)
