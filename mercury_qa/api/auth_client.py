import logging
from typing import Any, Union

import requests

from mercury_qa.api.client import ApiClient
from mercury_qa.api.models import ErrorResponse, LoginRequest, LoginResponse

LOGIN_ENDPOINT = "/api/v1/auth/login"


class AuthClient:
    """Login API operations on top of ApiClient."""

    def __init__(self, api_client: ApiClient):
        self.api_client = api_client

    def login(self, payload: Union[LoginRequest, dict, str, Any]) -> requests.Response:
        logging.info("Sending login request")
        return self.api_client.post(LOGIN_ENDPOINT, payload)

    def login_and_authorize(self, payload) -> LoginResponse:
        """Log in and use the returned token for subsequent requests."""
        response = self.login(payload)
        response.raise_for_status()
        result = self.parse_success(response)
        self.api_client.set_auth_token(result.token)
        return result

    @staticmethod
    def parse_success(response: requests.Response) -> LoginResponse:
        return LoginResponse.model_validate(response.json())

    @staticmethod
    def parse_error(response: requests.Response) -> ErrorResponse:
        return ErrorResponse.model_validate(response.json())
