import logging
from typing import Optional

from mercury_qa.actions.action_handler import ActionHandler
from mercury_qa.actions.waits import DEFAULT_TIMEOUT
from mercury_qa.browser.session import DriverManager


class BasePage:
    """Common base for page objects.

    The page binds to the worker's current browser session when it is
    constructed, so a page object must be created after ``initialize()``.
    """

    def __init__(self, driver_manager: DriverManager, timeout: Optional[float] = None, **action_kwargs):
        self.driver_manager = driver_manager
        self.session = driver_manager.get()
        self.page = self.session.page
        self.actions = ActionHandler(self.page, DEFAULT_TIMEOUT if timeout is None else timeout, **action_kwargs)
        logging.debug(f"{type(self).__name__} bound to session {self.session.session_id}")

    def navigate_to(self, url: str):
        self.actions.go_to_page(url)

    def page_title(self) -> str:
        title = self.page.title()
        logging.info(f"Page title: {title}")
        return title

    def current_url(self) -> str:
        url = self.page.url
        logging.info(f"Current URL: {url}")
        return url
