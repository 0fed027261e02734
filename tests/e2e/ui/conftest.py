import pytest

from mercury_qa.pages.basic_info_page import BasicInfoPage
from mercury_qa.pages.login_page import LoginPage
from mercury_qa.pages.new_claim_page import NewClaimPage


@pytest.fixture
def login_page(driver_manager, mercury_config):
    return LoginPage(driver_manager, mercury_config.explicit_wait)


@pytest.fixture
def new_claim_page(driver_manager, mercury_config):
    return NewClaimPage(driver_manager, mercury_config.explicit_wait)


@pytest.fixture
def basic_info_page(driver_manager, mercury_config):
    return BasicInfoPage(driver_manager, mercury_config.explicit_wait)
