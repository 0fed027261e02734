import logging
import time
from typing import Callable, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator as PlaywrightLocator
from playwright.sync_api import Page

from mercury_qa.actions.conditions import (
    ElementClickable,
    ElementPresent,
    ElementVisible,
    find_elements,
    is_stale_error,
)
from mercury_qa.actions.dropdown import OPTION_TIMEOUT, candidate_locators, resolve_first_clickable
from mercury_qa.actions.waits import DEFAULT_TIMEOUT, Wait
from mercury_qa.browser.locator import Locator
from mercury_qa.exceptions import ElementActionError, MercuryError

CLICK_ATTEMPTS = 3
CLICK_RETRY_DELAY = 0.5
DROPDOWN_EXPAND_DELAY = 0.5

SET_VALUE_SCRIPT = """(el, value) => {
    el.value = value;
    el.dispatchEvent(new Event('change', { bubbles: true }));
}"""


class ActionHandler:
    """Element interactions on one page.

    Every action resolves its locator fresh, logs what it did and wraps any
    failure in ElementActionError naming the locator.
    """

    def __init__(
        self,
        page: Page,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.page = page
        self.timeout = timeout
        self._clock = clock
        self._sleep = sleep

    def _wait(self, timeout: Optional[float] = None) -> Wait:
        return Wait(self.page, self.timeout if timeout is None else timeout, clock=self._clock, sleep=self._sleep)

    def wait_for_visible(self, locator: Locator, timeout: Optional[float] = None) -> PlaywrightLocator:
        return self._wait(timeout).until(ElementVisible(locator))

    def wait_for_clickable(self, locator: Locator, timeout: Optional[float] = None) -> PlaywrightLocator:
        return self._wait(timeout).until(ElementClickable(locator))

    def wait_for_present(self, locator: Locator, timeout: Optional[float] = None) -> PlaywrightLocator:
        return self._wait(timeout).until(ElementPresent(locator))

    def wait_until(self, condition, timeout: Optional[float] = None, message: str = ""):
        return self._wait(timeout).until(condition, message)

    def find_elements(self, locator: Locator) -> List[PlaywrightLocator]:
        return find_elements(self.page, locator)

    def go_to_page(self, url: str):
        logging.info(f"Navigating to: {url}")
        self.page.goto(url, wait_until="domcontentloaded")

    def click(self, locator: Locator):
        """Click an element, retrying when it goes stale between lookup and click.

        Up to CLICK_ATTEMPTS attempts are made on stale elements. Any other
        failure is raised at once.
        """
        last_error = None
        for attempt in range(1, CLICK_ATTEMPTS + 1):
            try:
                self.wait_for_clickable(locator).click()
                logging.info(f"Clicked on element: {locator}")
                return
            except Exception as e:
                if not is_stale_error(e):
                    logging.error(f"Click failed on {locator}: {e}")
                    raise ElementActionError(f"Click failed: {locator}", locator) from e
                last_error = e
                logging.warning(f"Stale element on click attempt {attempt}/{CLICK_ATTEMPTS}: {locator}")
                if attempt < CLICK_ATTEMPTS:
                    self._sleep(CLICK_RETRY_DELAY)
        logging.error(f"Click failed on {locator} after {CLICK_ATTEMPTS} attempts")
        raise ElementActionError(f"Click failed: {locator}", locator) from last_error

    def type(self, locator: Locator, text: str):
        """Clear the field, then type into it."""
        try:
            element = self.wait_for_visible(locator)
            element.fill("")
            element.press_sequentially(text)
            logging.info(f"Typed '{text}' into element: {locator}")
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Type failed on {locator}: {e}")
            raise ElementActionError(f"Type failed: {locator}", locator) from e

    def type_without_clear(self, locator: Locator, text: str):
        try:
            self.wait_for_visible(locator).press_sequentially(text)
            logging.info(f"Appended '{text}' to element: {locator}")
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Type failed on {locator}: {e}")
            raise ElementActionError(f"Type failed: {locator}", locator) from e

    def get_text(self, locator: Locator) -> str:
        try:
            text = self.wait_for_visible(locator).inner_text()
            logging.info(f"Got text '{text}' from element: {locator}")
            return text
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Get text failed on {locator}: {e}")
            raise ElementActionError(f"Get text failed: {locator}", locator) from e

    def get_attribute(self, locator: Locator, attribute: str) -> Optional[str]:
        try:
            value = self.wait_for_present(locator).get_attribute(attribute)
            logging.info(f"Got attribute '{attribute}' = '{value}' from element: {locator}")
            return value
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Get attribute failed on {locator}: {e}")
            raise ElementActionError(f"Get attribute failed: {locator}", locator) from e

    def is_displayed(self, locator: Locator) -> bool:
        try:
            return self.page.locator(locator.selector).first.is_visible()
        except PlaywrightError as e:
            logging.debug(f"Element not displayed: {locator}: {e}")
            return False

    def is_enabled(self, locator: Locator) -> bool:
        try:
            elements = self.page.locator(locator.selector)
            return elements.count() > 0 and elements.first.is_enabled()
        except PlaywrightError as e:
            logging.debug(f"Element not enabled: {locator}: {e}")
            return False

    def select_by_visible_text(self, locator: Locator, text: str):
        """Select a native <select> option by label.

        Tries an exact label first, then any option whose label contains the
        text or is contained in it.
        """
        try:
            select = self.wait_for_visible(locator)
            options = [option.strip() for option in select.locator("option").all_inner_texts()]
            logging.info(f"Available options for {locator}: {options}")

            if text in options:
                select.select_option(label=text)
                logging.info(f"Selected '{text}' from dropdown: {locator}")
                return

            for option in options:
                if option and (text in option or option in text):
                    select.select_option(label=option)
                    logging.info(f"Selected '{option}' (partial match for '{text}') from dropdown: {locator}")
                    return
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Select failed on {locator}: {e}")
            raise ElementActionError(f"Select failed: {locator}", locator) from e

        logging.error(f"Option '{text}' not found in dropdown {locator}")
        raise ElementActionError(f"Option '{text}' not found in dropdown: {locator}", locator)

    def select_by_value(self, locator: Locator, value: str):
        try:
            self.wait_for_visible(locator).select_option(value=value)
            logging.info(f"Selected value '{value}' from dropdown: {locator}")
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Select by value failed on {locator}: {e}")
            raise ElementActionError(f"Select by value failed: {locator}", locator) from e

    def select_by_index(self, locator: Locator, index: int):
        try:
            self.wait_for_visible(locator).select_option(index=index)
            logging.info(f"Selected index {index} from dropdown: {locator}")
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Select by index failed on {locator}: {e}")
            raise ElementActionError(f"Select by index failed: {locator}", locator) from e

    def select_from_dropdown(self, locator: Locator, label: str):
        """Pick an option from a Guidewire div-based dropdown.

        The dropdown is expanded, then the option is searched with each of the
        known rendering patterns in turn.
        """
        try:
            self.wait_for_clickable(locator).click()
            self._sleep(DROPDOWN_EXPAND_DELAY)
            candidates = candidate_locators(locator.element_id, label)
            _, option = resolve_first_clickable(self.page, candidates, label, OPTION_TIMEOUT)
            option.click()
            logging.info(f"Selected '{label}' from Guidewire dropdown: {locator}")
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Could not select '{label}' from dropdown {locator}: {e}")
            raise ElementActionError(f"Could not find option '{label}' in dropdown: {locator}", locator) from e

    def scroll_to(self, locator: Locator):
        try:
            self.wait_for_present(locator).scroll_into_view_if_needed()
            logging.info(f"Scrolled to element: {locator}")
        except (PlaywrightError, MercuryError) as e:
            raise ElementActionError(f"Scroll failed: {locator}", locator) from e

    def js_click(self, locator: Locator):
        try:
            self.wait_for_present(locator).evaluate("el => el.click()")
            logging.info(f"JavaScript clicked on element: {locator}")
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"JavaScript click failed on {locator}: {e}")
            raise ElementActionError(f"JavaScript click failed: {locator}", locator) from e

    def hover(self, locator: Locator):
        try:
            self.wait_for_visible(locator).hover()
            logging.info(f"Hovered over element: {locator}")
        except (PlaywrightError, MercuryError) as e:
            raise ElementActionError(f"Hover failed: {locator}", locator) from e

    def set_value_with_change_event(self, locator: Locator, value: str):
        """Set an input's value through JavaScript and fire a bubbling change event."""
        try:
            self.wait_for_present(locator).evaluate(SET_VALUE_SCRIPT, value)
            logging.info(f"Set value '{value}' on element: {locator}")
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Set value failed on {locator}: {e}")
            raise ElementActionError(f"Set value failed: {locator}", locator) from e

    def pause(self, seconds: float):
        """Fixed settle delay for screens that re-render after an action."""
        self._sleep(seconds)
