import logging
import threading
import uuid
from typing import Callable, Optional

from playwright.sync_api import BrowserContext, Page

from mercury_qa.browser.driver import DEFAULT_BROWSER, Driver
from mercury_qa.exceptions import SessionContractError


class BrowserSession:
    """One live browser, identified by an opaque session id for log correlation."""

    def __init__(self, kind: str = DEFAULT_BROWSER, headless: bool = False, session_id: str = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.kind = kind
        self.headless = headless
        self.driver: Optional[Driver] = None
        self._is_closed = False

    def initialize(self):
        """Launch the browser through Driver."""
        if self._is_closed:
            raise SessionContractError("Browser session is closed")
        logging.debug(f"Initializing browser session {self.session_id} ({self.kind}, headless={self.headless})")
        driver = Driver()
        driver.create_browser(kind=self.kind, headless=self.headless)
        self.driver = driver
        # Driver may have fallen back to another kind
        self.kind = driver.kind
        return self

    def apply_policy(self, implicit_wait: int, page_load_timeout: int):
        """Apply the timeouts and clean cookie jar every new session starts with.

        Args:
            implicit_wait: Seconds Playwright auto-waits on element actions
            page_load_timeout: Seconds a navigation may take
        """
        context = self.context
        context.set_default_timeout(implicit_wait * 1000)
        context.set_default_navigation_timeout(page_load_timeout * 1000)
        context.clear_cookies()

    @property
    def page(self) -> Page:
        if self._is_closed or not self.driver:
            raise SessionContractError("Browser session not initialized or closed")
        return self.driver.page

    @property
    def context(self) -> BrowserContext:
        if self._is_closed or not self.driver:
            raise SessionContractError("Browser session not initialized or closed")
        return self.driver.context

    def navigate_to(self, url: str, **kwargs):
        logging.info(f"Session {self.session_id} navigating to: {url}")
        kwargs.setdefault("wait_until", "domcontentloaded")
        self.page.goto(url, **kwargs)

    def screenshot(self) -> bytes:
        return self.page.screenshot(full_page=True)

    def is_closed(self) -> bool:
        return self._is_closed

    def close(self):
        """Close the browser. Errors propagate to the caller."""
        if self._is_closed:
            return
        self._is_closed = True
        try:
            if self.driver and not self.driver.is_closed():
                self.driver.close_browser()
        finally:
            self.driver = None


def launch_session(kind: str, headless: bool) -> BrowserSession:
    return BrowserSession(kind=kind, headless=headless).initialize()


class DriverManager:
    """Holds the browser session of one test worker.

    Each worker owns its own manager. The session is bound to the thread that
    initialized it and may only be fetched from that thread.
    """

    def __init__(
        self,
        implicit_wait: int = 10,
        page_load_timeout: int = 30,
        session_factory: Callable[[str, bool], BrowserSession] = launch_session,
    ):
        self.implicit_wait = implicit_wait
        self.page_load_timeout = page_load_timeout
        self._session_factory = session_factory
        self._session: Optional[BrowserSession] = None
        self._owner: Optional[int] = None

    def initialize(self, kind: str = DEFAULT_BROWSER, headless: bool = False, force: bool = False) -> BrowserSession:
        """Create the worker's browser session.

        Args:
            kind: chrome, firefox or edge
            headless: Run without a visible window
            force: Tear down an already bound session first instead of failing

        Returns:
            BrowserSession: the bound session
        """
        if self._session is not None:
            if not force:
                raise SessionContractError(
                    f"Browser session {self._session.session_id} is already initialized; "
                    "call teardown() first or pass force=True"
                )
            logging.warning(f"Replacing browser session {self._session.session_id}")
            self.teardown()

        session = self._session_factory(kind, headless)
        try:
            session.apply_policy(self.implicit_wait, self.page_load_timeout)
        except Exception:
            logging.error(f"Failed to configure browser session {session.session_id}", exc_info=True)
            session.close()
            raise

        self._session = session
        self._owner = threading.get_ident()
        logging.info(f"Browser session {session.session_id} initialized: {session.kind}")
        return session

    def get(self) -> BrowserSession:
        if self._session is None:
            raise SessionContractError("Browser session not initialized. Call initialize() first.")
        if self._owner != threading.get_ident():
            raise SessionContractError(
                f"Browser session {self._session.session_id} belongs to another thread"
            )
        return self._session

    @property
    def page(self) -> Page:
        return self.get().page

    def is_initialized(self) -> bool:
        return self._session is not None

    def teardown(self):
        """Close the bound session, if any. Close failures are logged, never raised."""
        session = self._session
        if session is None:
            return
        try:
            session.close()
            logging.info(f"Browser session {session.session_id} closed")
        except Exception as e:
            logging.error(f"Error closing browser session {session.session_id}: {e}")
        finally:
            self._session = None
            self._owner = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.teardown()
