import logging
from typing import Any, Dict

from playwright.sync_api import sync_playwright

DEFAULT_BROWSER = "chrome"

# Per-kind launch options. "maximized" kinds get the OS window size instead of
# a fixed viewport.
BROWSER_OPTIONS: Dict[str, Dict[str, Any]] = {
    "chrome": {
        "engine": "chromium",
        "channel": None,
        "args": [
            "--disable-dev-shm-usage",
            "--no-sandbox",
            "--disable-gpu",
            "--disable-extensions",
            "--disable-popup-blocking",
            "--start-maximized",
            "--remote-allow-origins=*",
        ],
        "ignore_default_args": ["--enable-automation"],
        "maximized": True,
    },
    "firefox": {
        "engine": "firefox",
        "channel": None,
        "args": [],
        "ignore_default_args": [],
        "maximized": False,
        "viewport": {"width": 1920, "height": 1080},
    },
    "edge": {
        "engine": "chromium",
        "channel": "msedge",
        "args": [
            "--disable-dev-shm-usage",
            "--no-sandbox",
            "--start-maximized",
        ],
        "ignore_default_args": [],
        "maximized": True,
    },
}


def resolve_browser_kind(kind: str) -> str:
    """Normalize a browser kind, falling back to chrome for unknown names."""
    normalized = (kind or "").strip().lower()
    if normalized not in BROWSER_OPTIONS:
        logging.warning(f"Browser '{kind}' not supported. Defaulting to {DEFAULT_BROWSER}.")
        return DEFAULT_BROWSER
    return normalized


class Driver:
    """Owns one Playwright instance with its browser, context and page."""

    def __init__(self):
        self._is_closed = False
        self.kind = None
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

    def is_closed(self):
        return self._is_closed

    def create_browser(self, kind: str = DEFAULT_BROWSER, headless: bool = False):
        """Launch a browser of the given kind and open a page.

        Args:
            kind (str): chrome, firefox or edge. Unknown kinds fall back to chrome.
            headless (bool): Whether to run without a visible window

        Returns:
            Page: the newly opened page
        """
        self.kind = resolve_browser_kind(kind)
        options = BROWSER_OPTIONS[self.kind]
        try:
            self.playwright = sync_playwright().start()
            browser_type = getattr(self.playwright, options["engine"])

            launch_kwargs = {"headless": headless, "args": list(options["args"])}
            if options["channel"]:
                launch_kwargs["channel"] = options["channel"]
            if options["ignore_default_args"]:
                launch_kwargs["ignore_default_args"] = list(options["ignore_default_args"])
            self.browser = browser_type.launch(**launch_kwargs)

            if options["maximized"]:
                self.context = self.browser.new_context(no_viewport=True)
            else:
                self.context = self.browser.new_context(viewport=dict(options["viewport"]))
            self.page = self.context.new_page()

            logging.debug(f"Browser {self.kind} created with options: {launch_kwargs}")
            return self.page

        except Exception:
            logging.error(f"Failed to create {self.kind} browser instance.", exc_info=True)
            try:
                self.close_browser()
            except Exception as close_error:
                logging.error(f"Cleanup after failed launch also failed: {close_error}")
            raise

    def close_browser(self):
        """Close the browser and stop Playwright."""
        if self._is_closed:
            return
        self._is_closed = True
        try:
            if self.context is not None:
                self.context.close()
            if self.browser is not None:
                self.browser.close()
        finally:
            if self.playwright is not None:
                self.playwright.stop()
            logging.info(f"Browser {self.kind} closed.")
