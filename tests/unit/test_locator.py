import pytest

from mercury_qa.browser.locator import By, Locator, xpath_literal


@pytest.mark.parametrize(
    "locator,selector",
    [
        (By.id("user-name"), 'css=[id="user-name"]'),
        (By.name("policy-number"), 'css=[name="policy-number"]'),
        (By.xpath("//div[@id='x']"), "xpath=//div[@id='x']"),
        (By.css(".login_logo"), "css=.login_logo"),
        (By.tag("select"), "css=select"),
        (By.link_text("Forgot Password?"), "xpath=//a[normalize-space(.)='Forgot Password?']"),
    ],
)
def test_selector_rendering(locator, selector) -> None:
    assert locator.selector == selector


def test_unknown_strategy_rejected() -> None:
    with pytest.raises(ValueError):
        Locator("partial_link_text", "x")


def test_element_id_only_for_id_locators() -> None:
    assert By.id("widget").element_id == "widget"
    assert By.xpath("//*[@id='widget']").element_id == ""


def test_locators_are_values() -> None:
    assert By.id("a") == By.id("a")
    assert len({By.id("a"), By.id("a"), By.name("a")}) == 2


class TestXpathLiteral:
    def test_plain(self) -> None:
        assert xpath_literal("Homeowners") == "'Homeowners'"

    def test_single_quote(self) -> None:
        assert xpath_literal("O'Brien") == '"O\'Brien"'

    def test_both_quotes(self) -> None:
        assert xpath_literal("it's \"x\"") == "concat('it', \"'\", 's \"x\"')"
