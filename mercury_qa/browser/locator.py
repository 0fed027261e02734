import json
from dataclasses import dataclass

STRATEGIES = ("id", "name", "xpath", "css", "link_text", "tag")


def xpath_literal(text: str) -> str:
    """Quote ``text`` as an XPath string literal.

    XPath 1.0 has no escape sequences, so text holding both quote kinds is
    assembled with concat().
    """
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


@dataclass(frozen=True)
class Locator:
    """Strategy plus value identifying elements on a page.

    A locator is only a description. It is resolved against the page on every
    lookup, never cached as a live element.
    """

    strategy: str
    value: str

    def __post_init__(self):
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown locator strategy '{self.strategy}', expected one of {STRATEGIES}")

    @property
    def selector(self) -> str:
        """Playwright selector string for this locator."""
        if self.strategy == "id":
            return f"css=[id={json.dumps(self.value, ensure_ascii=False)}]"
        if self.strategy == "name":
            return f"css=[name={json.dumps(self.value, ensure_ascii=False)}]"
        if self.strategy == "xpath":
            return f"xpath={self.value}"
        if self.strategy == "link_text":
            return f"xpath=//a[normalize-space(.)={xpath_literal(self.value)}]"
        # css and tag
        return f"css={self.value}"

    @property
    def element_id(self) -> str:
        """The id value for id locators, empty for every other strategy."""
        return self.value if self.strategy == "id" else ""

    def __str__(self):
        return f"By.{self.strategy}: {self.value}"


class By:
    @staticmethod
    def id(value: str) -> Locator:
        return Locator("id", value)

    @staticmethod
    def name(value: str) -> Locator:
        return Locator("name", value)

    @staticmethod
    def xpath(value: str) -> Locator:
        return Locator("xpath", value)

    @staticmethod
    def css(value: str) -> Locator:
        return Locator("css", value)

    @staticmethod
    def link_text(value: str) -> Locator:
        return Locator("link_text", value)

    @staticmethod
    def tag(value: str) -> Locator:
        return Locator("tag", value)
