import logging
from typing import Optional

from playwright.sync_api import Error as PlaywrightError

from mercury_qa.browser.locator import By, Locator
from mercury_qa.data.fixtures import ClaimantDetailsData
from mercury_qa.exceptions import ElementActionError, MercuryError
from mercury_qa.pages.base_page import BasePage

BASIC_INFO = "FNOLWizard-FullWizardStepSet-FNOLWizard_BasicInfoScreen-PanelRow-BasicInfoDetailViewPanelDV"

CLAIMANT_SETTLE_DELAY = 2


class BasicInfoPage(BasePage):
    """FNOL wizard basic-info screen where the claimant is chosen.

    Relation to insured, email agreement and the requested flag only appear
    for some policies. When absent they are skipped with a warning.
    """

    CLAIMANT_NAME_SELECT = By.xpath("//select[contains(@name,'Name') or contains(@id,'Name')]")
    RELATION_TO_INSURED_SELECT = By.xpath("//select[contains(@name,'Relation') or contains(@id,'Relation')]")
    PREFERRED_CONTACT_SELECT = By.name(f"{BASIC_INFO}-PersonContactInfoInputSet-preferred_method_of_contact")
    AGREE_TO_EMAIL_NO = By.xpath(
        "//div[contains(@id,'AgreeToEmail') or contains(@id,'EmailCommunication')]"
        "//input[@type='radio' and @value='false']"
    )
    REQUESTED_NO = By.xpath("//div[contains(@id,'Requested')]//input[@type='radio' and @value='false']")
    ALL_SELECTS = By.tag("select")

    def select_claimant_name(self, claimant_name: str):
        logging.info(f"Selecting Claimant Name: {claimant_name}")
        try:
            self.actions.select_by_visible_text(self.CLAIMANT_NAME_SELECT, claimant_name)
        except ElementActionError as e:
            raise ElementActionError(
                f"Unable to select claimant name '{claimant_name}' from dropdown. "
                "Please verify the claimant exists in the dropdown options.",
                self.CLAIMANT_NAME_SELECT,
            ) from e
        # the screen re-renders the contact section after a claimant change
        self.actions.pause(CLAIMANT_SETTLE_DELAY)

    def _relation_field_present(self) -> bool:
        selects = self.actions.find_elements(self.ALL_SELECTS)
        logging.info(f"Found {len(selects)} select elements on page")
        found = False
        for select in selects:
            name = select.get_attribute("name") or ""
            element_id = select.get_attribute("id") or ""
            logging.info(f"  Select - name: '{name}', id: '{element_id}', visible: {select.is_visible()}")
            if "relation" in name.lower() or "relation" in element_id.lower():
                found = True
        return found

    def select_relation_to_insured(self, relation: Optional[str]):
        if not relation:
            return
        logging.info(f"Attempting to select Relation to Insured: {relation}")
        try:
            if not self._relation_field_present():
                logging.warning("Relation to Insured field not found on Basic Info screen - skipping")
                return
            self.actions.select_by_visible_text(self.RELATION_TO_INSURED_SELECT, relation)
        except (PlaywrightError, MercuryError) as e:
            logging.warning(f"Relation to Insured could not be set, skipping: {e}")

    def _click_optional(self, locator: Locator, field_name: str):
        if not self.actions.is_displayed(locator):
            logging.warning(f"{field_name} field not found on Basic Info screen - skipping")
            return
        try:
            self.actions.click(locator)
        except ElementActionError as e:
            logging.warning(f"{field_name} could not be set, skipping: {e}")

    def select_agree_to_email_communication_no(self):
        self._click_optional(self.AGREE_TO_EMAIL_NO, "Agree to Email Communication")

    def select_requested_no(self):
        self._click_optional(self.REQUESTED_NO, "Requested")

    def select_preferred_method_of_contact(self, method: Optional[str]):
        if method is None or not method.strip() or method.strip().lower() == "none":
            logging.info("Skipping preferred method selection - value is 'none' or empty")
            return
        logging.info(f"Selecting Preferred Method of Contact: {method}")
        self.actions.select_by_visible_text(self.PREFERRED_CONTACT_SELECT, method)

    def fill_claimant_details(self, data: ClaimantDetailsData):
        logging.info("Filling Claimant Details")
        if data.claimant_name:
            self.select_claimant_name(data.claimant_name)
        self.select_relation_to_insured(data.relation_to_insured)
        self.select_agree_to_email_communication_no()
        self.select_preferred_method_of_contact(data.preferred_method_of_contact)
        self.select_requested_no()
