"""First-notice-of-loss wizard flows.

All claim-creation scenarios walk the same screens and differ only in how far
they go and which claimant fields they fill, so one workflow takes a variant
descriptor instead of each page carrying its own composite method.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from mercury_qa.data.fixtures import ClaimantDetailsData, PolicySearchData
from mercury_qa.pages.basic_info_page import BasicInfoPage
from mercury_qa.pages.new_claim_page import NewClaimPage


@dataclass(frozen=True)
class FnolVariant:
    name: str
    # stop after the policy search instead of moving to the claimant screen
    stop_after_search: bool = False
    fill_claimant_details: bool = False
    advance_after_claimant: bool = False
    # AM/PM used when the search data carries none
    default_am_pm: Optional[str] = None


POLICY_SEARCH_ONLY = FnolVariant("policy-search-only", stop_after_search=True)
CLAIMANT_NAME_ONLY = FnolVariant("claimant-name-only")
FULL_CLAIMANT_DETAILS = FnolVariant(
    "full-claimant-details",
    fill_claimant_details=True,
    advance_after_claimant=True,
    default_am_pm="PM",
)


def run_fnol_workflow(
    new_claim: NewClaimPage,
    basic_info: BasicInfoPage,
    search: PolicySearchData,
    claimant: Optional[ClaimantDetailsData],
    variant: FnolVariant,
):
    """Drive the FNOL wizard from the claim tab up to where ``variant`` stops.

    Args:
        new_claim: Page object for navigation and the find-policy screen
        basic_info: Page object for the claimant screen
        search: Find-policy screen data
        claimant: Claimant screen data, unused for search-only variants
        variant: How far to go and what to fill
    """
    logging.info(f"Running FNOL workflow '{variant.name}' for policy {search.policy_number}")

    if variant.default_am_pm and search.loss_time and not search.time_am_pm:
        search = search.model_copy(update={"time_am_pm": variant.default_am_pm})

    new_claim.open_new_claim()
    new_claim.fill_policy_search(search)
    new_claim.click_search_button()
    if variant.stop_after_search:
        return

    new_claim.click_next_button()
    claimant = claimant or ClaimantDetailsData()

    if variant.fill_claimant_details:
        basic_info.fill_claimant_details(claimant)
    elif claimant.claimant_name:
        basic_info.select_claimant_name(claimant.claimant_name)

    if variant.advance_after_claimant:
        new_claim.click_next_button()

    logging.info(f"FNOL workflow '{variant.name}' completed")
