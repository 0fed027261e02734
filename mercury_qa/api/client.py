import json
import logging
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel

from mercury_qa.data.test_structures import TestResult
from mercury_qa.utils.data_reader import resolve_path

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def json_path(response: requests.Response, key_path: str) -> Any:
    """Value at a dotted path of a JSON response body, or None when absent or not JSON."""
    try:
        body = response.json()
    except ValueError:
        return None
    return resolve_path(body, key_path, default=None)


class ApiClient:
    """JSON HTTP client bound to one base URL.

    Every request and response is logged. When a report record is attached,
    both are also attached to it.
    """

    def __init__(self, base_url: str, timeout: float = 30, report: Optional[TestResult] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.report = report
        self.session = requests.Session()
        self.reset_request_spec()
        logging.info(f"API client initialized with base URL: {self.base_url}")

    def reset_request_spec(self):
        """Drop custom and auth headers, back to the JSON defaults."""
        self.session.headers = requests.utils.default_headers()
        self.session.headers.update(DEFAULT_HEADERS)

    def set_auth_token(self, token: str):
        self.session.headers["Authorization"] = f"Bearer {token}"
        logging.info("Authorization token set")

    def set_header(self, name: str, value: str):
        self.session.headers[name] = value
        logging.info(f"Header set: {name}")

    def set_headers(self, headers: Dict[str, str]):
        self.session.headers.update(headers)
        logging.info(f"Headers set: {list(headers)}")

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _request(self, method: str, endpoint: str, body: Any = None, params: Optional[Dict[str, Any]] = None):
        url = self._url(endpoint)
        kwargs: Dict[str, Any] = {"params": params, "timeout": self.timeout}
        if isinstance(body, BaseModel):
            kwargs["data"] = body.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
        elif isinstance(body, (str, bytes)):
            kwargs["data"] = body.encode("utf-8") if isinstance(body, str) else body
        elif body is not None:
            kwargs["json"] = body

        logging.info(f"{method} request to: {url}")
        logging.debug(f"Request headers: {dict(self.session.headers)} params: {params} body: {body}")

        response = self.session.request(method, url, **kwargs)

        elapsed_ms = int(response.elapsed.total_seconds() * 1000)
        logging.info(f"Response: {response.status_code} in {elapsed_ms}ms")
        logging.debug(f"Response body: {response.text}")
        self._attach(method, url, params, body, response)
        return response

    def _attach(self, method, url, params, body, response):
        if self.report is None:
            return
        if isinstance(body, BaseModel):
            body = body.model_dump(by_alias=True, exclude_none=True)
        self.report.attach_json(
            f"Request {method} {url}",
            {"method": method, "url": url, "headers": dict(self.session.headers), "params": params, "body": body},
        )
        try:
            response_body = response.json()
        except ValueError:
            response_body = response.text
        self.report.attach_json(
            f"Response {response.status_code}",
            {"status_code": response.status_code, "headers": dict(response.headers), "body": response_body},
        )

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: Any = None) -> requests.Response:
        return self._request("POST", endpoint, body)

    def put(self, endpoint: str, body: Any = None) -> requests.Response:
        return self._request("PUT", endpoint, body)

    def patch(self, endpoint: str, body: Any = None) -> requests.Response:
        return self._request("PATCH", endpoint, body)

    def delete(self, endpoint: str) -> requests.Response:
        return self._request("DELETE", endpoint)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def pretty_body(response: requests.Response) -> str:
    try:
        return json.dumps(response.json(), indent=2, ensure_ascii=False)
    except ValueError:
        return response.text
