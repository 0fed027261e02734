import logging

from playwright.sync_api import Error as PlaywrightError

from mercury_qa.actions.conditions import ElementInvisible, Predicate
from mercury_qa.browser.locator import By
from mercury_qa.data.fixtures import PolicySearchData
from mercury_qa.exceptions import ElementActionError, MercuryError, WaitTimeoutError
from mercury_qa.pages.base_page import BasePage

FIND_POLICY = "FNOLWizard-FNOLWizard_FindPolicyScreen-FNOLWizardFindPolicyPanelSet"

NEXT_ENABLED_ATTEMPTS = 10
NEXT_POLL_INTERVAL = 1
OVERLAY_TIMEOUT = 10
SETTLE_DELAY = 0.5


class NewClaimPage(BasePage):
    """FNOL wizard: claim tab navigation and the find-policy screen."""

    CLAIM_TAB_EXPAND = By.xpath("//*[@id='TabBar-ClaimTab']/div[3]/div")
    NEW_CLAIM_MENU_ITEM = By.xpath("//*[@id='TabBar-ClaimTab-ClaimTab_FNOLWizard']/div")

    POLICY_TYPE_SELECT = By.xpath(f"//*[@id='{FIND_POLICY}-ClaimLossType']//select")
    POLICY_TYPE_WIDGET = By.id(f"{FIND_POLICY}-ClaimLossType")
    TYPE_SELECT = By.xpath(f"//*[@id='{FIND_POLICY}-Type']//select")
    TYPE_WIDGET = By.id(f"{FIND_POLICY}-Type")
    POLICY_NUMBER_INPUT = By.name(f"{FIND_POLICY}-policyNumber")
    FIRST_NAME_INPUT = By.xpath("//input[contains(@name,'FirstName') or contains(@name,'first')]")
    LAST_NAME_INPUT = By.xpath("//input[contains(@name,'LastName') or contains(@name,'last')]")
    LOSS_DATE_INPUT = By.name(f"{FIND_POLICY}-date")
    LOSS_TIME_INPUT = By.name(f"{FIND_POLICY}-LossTime_time")
    LOSS_TIME_MASKED_INPUT = By.xpath("//input[@type='text' and (@placeholder='hh:mm' or contains(@aria-label,'hh:mm'))]")
    TIME_AM_PM_BUTTON = By.name(f"{FIND_POLICY}-LossTime_ampm-button")

    SEARCH_BUTTON = By.xpath("//div[contains(@id,'FNOLWizardFindPolicyPanelSet-Search') and contains(@class,'gw-action')]")
    NEXT_BUTTON = By.xpath("//div[contains(@id,'FNOLWizard') and contains(@id,'Next') and contains(@class,'gw-action')]")
    CLICK_OVERLAY = By.id("gw-click-overlay")

    SEARCH_RESULTS = By.xpath("//div[contains(@class,'gw-ListView') or contains(@id,'SearchResults')]")
    ERROR_MESSAGE = By.xpath("//div[contains(@class,'gw-error') or contains(@class,'gw-warning')]")
    NEW_CLAIM_SCREEN = By.xpath("//div[contains(@class,'FNOLWizard') or contains(text(),'First Notice of Loss')]")

    # Navigation

    def click_claim_tab_expand(self):
        logging.info("Clicking Claim tab expand button")
        self.actions.click(self.CLAIM_TAB_EXPAND)

    def click_new_claim_menu_item(self):
        logging.info("Clicking New Claim menu item")
        self.actions.click(self.NEW_CLAIM_MENU_ITEM)

    def open_new_claim(self):
        self.click_claim_tab_expand()
        self.click_new_claim_menu_item()
        self.wait_for_overlay()

    # Find-policy screen

    def _select(self, select_locator, widget_locator, label: str):
        """Select from the native <select>, falling back to the div-rendered widget."""
        try:
            self.actions.select_by_visible_text(select_locator, label)
        except ElementActionError as e:
            logging.warning(f"Native select failed for '{label}', trying Guidewire dropdown: {e}")
            self.actions.select_from_dropdown(widget_locator, label)

    def select_policy_type(self, policy_type: str):
        logging.info(f"Selecting Policy Type: {policy_type}")
        self._select(self.POLICY_TYPE_SELECT, self.POLICY_TYPE_WIDGET, policy_type)

    def select_type(self, claim_type: str):
        logging.info(f"Selecting Type: {claim_type}")
        self._select(self.TYPE_SELECT, self.TYPE_WIDGET, claim_type)

    def enter_policy_number(self, policy_number: str):
        logging.info(f"Entering Policy Number: {policy_number}")
        self.actions.type(self.POLICY_NUMBER_INPUT, policy_number)

    def enter_first_name(self, first_name: str):
        self.actions.type(self.FIRST_NAME_INPUT, first_name)

    def enter_last_name(self, last_name: str):
        self.actions.type(self.LAST_NAME_INPUT, last_name)

    def enter_loss_date(self, loss_date: str):
        logging.info(f"Entering Loss Date: {loss_date}")
        self.actions.type(self.LOSS_DATE_INPUT, loss_date)

    def enter_loss_time(self, loss_time: str):
        logging.info(f"Entering Loss Time: {loss_time}")
        self.actions.click(self.LOSS_TIME_INPUT)
        self.actions.type(self.LOSS_TIME_INPUT, loss_time)

    def click_time_am_pm(self):
        self.actions.click(self.TIME_AM_PM_BUTTON)

    def enter_loss_time_with_am_pm(self, loss_time: str, am_pm: str):
        """Set the masked time input to e.g. "10:30 PM" in one go.

        Typing into the masked input triggers its validation on every key, so
        the full value is written through JavaScript with a change event.
        """
        complete_time = f"{loss_time} {am_pm}"
        logging.info(f"Entering Loss Time with AM/PM: {complete_time}")
        try:
            self.actions.wait_for_present(self.LOSS_TIME_MASKED_INPUT).fill("")
            self.actions.set_value_with_change_event(self.LOSS_TIME_MASKED_INPUT, complete_time)
        except (PlaywrightError, MercuryError) as e:
            logging.error(f"Failed to enter loss time with AM/PM: {e}")
            raise ElementActionError(f"Failed to enter loss time: {complete_time}", self.LOSS_TIME_MASKED_INPUT) from e
        self.actions.pause(SETTLE_DELAY)

    def fill_policy_search(self, data: PolicySearchData):
        """Fill the fields present in ``data``, in screen order."""
        logging.info(f"Filling policy search for policy {data.policy_number}")
        if data.policy_type:
            self.select_policy_type(data.policy_type)
        if data.claim_type:
            self.select_type(data.claim_type)
        self.enter_policy_number(data.policy_number)
        if data.first_name:
            self.enter_first_name(data.first_name)
        if data.last_name:
            self.enter_last_name(data.last_name)
        if data.loss_date:
            self.enter_loss_date(data.loss_date)
        if data.loss_time:
            if data.time_am_pm:
                self.enter_loss_time_with_am_pm(data.loss_time, data.time_am_pm)
            else:
                self.enter_loss_time(data.loss_time)
                self.click_time_am_pm()

    def click_search_button(self):
        """Run the policy search and wait for results or a validation message."""
        logging.info("Clicking Search button")
        self.actions.click(self.SEARCH_BUTTON)
        settled = Predicate(
            lambda page: self.is_search_results_displayed() or self.is_error_message_displayed(),
            "policy search results or error",
        )
        try:
            self.actions.wait_until(settled)
        except WaitTimeoutError as e:
            logging.warning(f"Policy search did not show results: {e}")

    def wait_for_overlay(self, timeout: float = OVERLAY_TIMEOUT):
        if not self.actions.find_elements(self.CLICK_OVERLAY):
            return
        logging.info("Waiting for click overlay to disappear...")
        try:
            self.actions.wait_until(ElementInvisible(self.CLICK_OVERLAY), timeout)
        except WaitTimeoutError as e:
            logging.warning(f"Click overlay still present: {e}")

    def click_next_button(self):
        """Advance the wizard once the Next button is no longer aria-disabled.

        The button is polled up to NEXT_ENABLED_ATTEMPTS times; if it is still
        disabled the click is attempted anyway.
        """
        logging.info("Clicking Next button")
        self.wait_for_overlay()
        try:
            for attempt in range(1, NEXT_ENABLED_ATTEMPTS + 1):
                if self.actions.get_attribute(self.NEXT_BUTTON, "aria-disabled") != "true":
                    break
                logging.info(f"Next button is disabled, waiting... (attempt {attempt})")
                self.actions.pause(NEXT_POLL_INTERVAL)
            else:
                logging.warning("Next button is still disabled after waiting, trying to click anyway")
        except ElementActionError as e:
            logging.warning(f"Error while waiting for Next button: {e}")

        self.actions.click(self.NEXT_BUTTON)
        self.wait_for_overlay()

    # Verification

    def is_new_claim_page_displayed(self) -> bool:
        return self.actions.is_displayed(self.NEW_CLAIM_SCREEN)

    def is_search_results_displayed(self) -> bool:
        return self.actions.is_displayed(self.SEARCH_RESULTS)

    def get_search_results_text(self) -> str:
        return self.actions.get_text(self.SEARCH_RESULTS)

    def is_error_message_displayed(self) -> bool:
        return self.actions.is_displayed(self.ERROR_MESSAGE)

    def get_error_message(self) -> str:
        return self.actions.get_text(self.ERROR_MESSAGE)
