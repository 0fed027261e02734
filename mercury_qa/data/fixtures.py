from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FixtureModel(BaseModel):
    """Base for JSON test-data records. Fixture files use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class LoginCredentials(FixtureModel):
    username: str = ""
    password: str = ""
    expected_page_title: Optional[str] = None
    expected_error: Optional[str] = None


class PolicySearchData(FixtureModel):
    """Fields of the FNOL find-policy screen.

    Only the fields present are filled; the insured-name variant of the screen
    uses policy type, type and names, the loss-time variant uses an AM/PM value.
    """

    policy_number: str
    policy_type: Optional[str] = None
    claim_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("type", "claimType"))
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    loss_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("lossDate", "date"))
    loss_time: Optional[str] = Field(default=None, validation_alias=AliasChoices("lossTime", "time"))
    time_am_pm: Optional[str] = None
    expected_result: Optional[str] = None
    expected_error: Optional[str] = None


class ClaimantDetailsData(FixtureModel):
    claimant_name: Optional[str] = None
    relation_to_insured: Optional[str] = None
    preferred_method_of_contact: Optional[str] = None
