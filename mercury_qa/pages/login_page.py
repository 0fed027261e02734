import logging

from mercury_qa.browser.locator import By
from mercury_qa.pages.base_page import BasePage


class LoginPage(BasePage):
    USERNAME_FIELD = By.id("user-name")
    PASSWORD_FIELD = By.id("password")
    LOGIN_BUTTON = By.id("login-button")
    ERROR_MESSAGE = By.css("[data-test='error']")
    LOGIN_LOGO = By.css(".login_logo")
    LOGIN_CONTAINER = By.css(".login_container")
    REMEMBER_ME_CHECKBOX = By.id("remember-me")
    FORGOT_PASSWORD_LINK = By.link_text("Forgot Password?")

    def enter_username(self, username: str):
        self.actions.type(self.USERNAME_FIELD, username)

    def enter_password(self, password: str):
        self.actions.type(self.PASSWORD_FIELD, password)

    def click_login_button(self):
        self.actions.click(self.LOGIN_BUTTON)

    def check_remember_me(self):
        self.actions.click(self.REMEMBER_ME_CHECKBOX)

    def click_forgot_password(self):
        self.actions.click(self.FORGOT_PASSWORD_LINK)

    def login(self, username: str, password: str):
        logging.info(f"Logging in as: {username}")
        self.enter_username(username)
        self.enter_password(password)
        self.click_login_button()

    def login_with_remember_me(self, username: str, password: str):
        logging.info(f"Logging in with remember me as: {username}")
        self.enter_username(username)
        self.enter_password(password)
        self.check_remember_me()
        self.click_login_button()

    def get_error_message(self) -> str:
        return self.actions.get_text(self.ERROR_MESSAGE)

    def is_error_message_displayed(self) -> bool:
        return self.actions.is_displayed(self.ERROR_MESSAGE)

    def is_login_page_displayed(self) -> bool:
        return self.actions.is_displayed(self.LOGIN_CONTAINER)

    def get_login_title(self) -> str:
        return self.actions.get_text(self.LOGIN_LOGO)
