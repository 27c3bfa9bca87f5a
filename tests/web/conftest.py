"""Fixtures for HTTP-level tests of the login protocol."""

import pytest


class LoginFlow:
    """Drives the login protocol with explicit cookies and tokens.

    The test client's cookie jar is cleared after every request so each
    request carries exactly what the test hands it.
    """

    def __init__(self, client, config):
        self.client = client
        self.config = config

    def request(
        self,
        method,
        url,
        session_id=None,
        header_token=None,
        param_token=None,
        params=None,
        data=None,
        json=None,
    ):
        headers = {}
        if session_id is not None:
            headers["Cookie"] = f"{self.config.session_cookie_name}={session_id}"
        if header_token is not None:
            headers[self.config.csrf_header_name] = header_token
        params = dict(params or {})
        if param_token is not None:
            params[self.config.csrf_parameter_name] = param_token
        response = self.client.request(method, url, headers=headers, params=params, data=data, json=json)
        self.client.cookies.clear()
        return response

    def fetch_csrf(self, session_id=None):
        """Return the session id set by the token endpoint and the token body."""
        response = self.request("GET", "/rest/user/csrf", session_id=session_id)
        assert response.status_code == 200, response.text
        return response.cookies[self.config.session_cookie_name], response.json()

    def login(self, session_id=None, header_token=None, param_token=None, username="admin", password="admin"):
        return self.request(
            "POST",
            "/rest/user/authenticate",
            session_id=session_id,
            header_token=header_token,
            param_token=param_token,
            data={"username": username, "password": password},
        )

    def login_as(self, username="admin", password="admin"):
        """Full login, returns the pre-login and post-login (session id, token) pairs."""
        session_id, csrf = self.fetch_csrf()
        response = self.login(session_id, header_token=csrf["token"], username=username, password=password)
        assert response.status_code == 200, response.text
        new_session_id = response.cookies[self.config.session_cookie_name]
        new_token = response.cookies[self.config.csrf_cookie_name]
        return (session_id, csrf["token"]), (new_session_id, new_token)

    def echo(self, method, message, session_id=None, header_token=None, param_token=None):
        return self.request(
            method,
            "/rest/test/post",
            session_id=session_id,
            header_token=header_token,
            param_token=param_token,
            params={"message": message},
        )


@pytest.fixture
def flow(client, config):
    return LoginFlow(client, config)
