"""End-to-end tests of token issuance, login and admission over HTTP."""

from uuid import uuid4


class TestTokenEndpoint:
    def test_issues_token_and_session_cookie(self, flow):
        response = flow.request("GET", "/rest/user/csrf")

        assert response.status_code == 200
        body = response.json()
        assert body["headerName"] == "X-XSRF-TOKEN"
        assert body["parameterName"] == "_csrf"
        assert body["token"]
        set_cookies = response.headers.get_list("set-cookie")
        assert len(set_cookies) == 1
        assert set_cookies[0].startswith("JSESSIONID=")
        assert "httponly" in set_cookies[0].lower()

    def test_keeps_live_session_and_rotates_token(self, flow):
        session_id, first = flow.fetch_csrf()
        same_session_id, second = flow.fetch_csrf(session_id)

        assert same_session_id == session_id
        assert second["token"] != first["token"]

    def test_most_recent_token_is_the_valid_one(self, flow):
        session_id, first = flow.fetch_csrf()
        _, second = flow.fetch_csrf(session_id)

        stale = flow.login(session_id, header_token=first["token"])
        assert stale.status_code == 403
        assert stale.json()["type"] == "csrf_invalid"

        current = flow.login(session_id, header_token=second["token"])
        assert current.status_code == 200


class TestLogin:
    def test_missing_token_and_session_forbidden(self, flow):
        response = flow.login()
        assert response.status_code == 403
        assert response.json()["type"] == "no_session"

    def test_token_without_session_forbidden(self, flow):
        _, csrf = flow.fetch_csrf()
        response = flow.login(header_token=csrf["token"], param_token=csrf["token"])
        assert response.status_code == 403
        assert response.json()["type"] == "no_session"

    def test_token_replayed_on_other_session_forbidden(self, flow):
        _, csrf = flow.fetch_csrf()
        other_session_id, _ = flow.fetch_csrf()
        response = flow.login(other_session_id, header_token=csrf["token"])
        assert response.status_code == 403
        assert response.json()["type"] == "csrf_invalid"

    def test_missing_token_forbidden(self, flow):
        session_id, _ = flow.fetch_csrf()
        response = flow.login(session_id)
        assert response.status_code == 403
        assert response.json()["type"] == "csrf_invalid"

    def test_header_token_accepted(self, flow):
        session_id, csrf = flow.fetch_csrf()
        response = flow.login(session_id, header_token=csrf["token"])

        assert response.status_code == 200
        assert '"loginname":"admin"' in response.text

    def test_query_parameter_token_accepted(self, flow):
        session_id, csrf = flow.fetch_csrf()
        response = flow.login(session_id, param_token=csrf["token"])

        assert response.status_code == 200
        assert '"loginname":"admin"' in response.text

    def test_form_field_token_accepted(self, flow):
        session_id, csrf = flow.fetch_csrf()
        response = flow.request(
            "POST",
            "/rest/user/authenticate",
            session_id=session_id,
            data={"username": "admin", "password": "admin", "_csrf": csrf["token"]},
        )
        assert response.status_code == 200
        assert response.json()["loginname"] == "admin"

    def test_conflicting_tokens_forbidden(self, flow):
        session_id, csrf = flow.fetch_csrf()
        response = flow.login(session_id, header_token=csrf["token"], param_token="something-else")
        assert response.status_code == 403
        assert response.json()["type"] == "csrf_invalid"

    def test_conflicting_tokens_without_session_is_no_session(self, flow):
        _, csrf = flow.fetch_csrf()
        response = flow.login(header_token=csrf["token"], param_token="something-else")
        assert response.status_code == 403
        assert response.json()["type"] == "no_session"

    def test_overlong_password_is_bad_credentials(self, flow):
        session_id, csrf = flow.fetch_csrf()
        response = flow.login(session_id, header_token=csrf["token"], password="x" * 100)

        assert response.status_code == 403
        assert response.json()["type"] == "bad_credentials"
        assert response.cookies["XSRF-TOKEN"] != csrf["token"]

    def test_success_rotates_both_cookies(self, flow):
        (old_session_id, old_token), (new_session_id, new_token) = flow.login_as()
        assert new_session_id != old_session_id
        assert new_token != old_token

    def test_bad_credentials_rotate_token_cookie(self, flow):
        session_id, csrf = flow.fetch_csrf()
        response = flow.login(session_id, header_token=csrf["token"], password="wrong")

        assert response.status_code == 403
        assert response.json()["type"] == "bad_credentials"
        rotated = response.cookies["XSRF-TOKEN"]
        assert rotated != csrf["token"]
        assert flow.login(session_id, header_token=rotated).status_code == 200

    def test_unknown_login_looks_like_wrong_password(self, flow):
        session_id, csrf = flow.fetch_csrf()
        unknown = flow.login(session_id, header_token=csrf["token"], username="ghost")
        session_id, csrf = flow.fetch_csrf()
        wrong = flow.login(session_id, header_token=csrf["token"], password="wrong")

        assert unknown.status_code == wrong.status_code == 403
        assert unknown.json() == wrong.json()

    def test_missing_form_fields_are_bad_credentials(self, flow):
        session_id, csrf = flow.fetch_csrf()
        response = flow.request("POST", "/rest/user/authenticate", session_id=session_id, header_token=csrf["token"])
        assert response.status_code == 403
        assert response.json()["type"] == "bad_credentials"


class TestProtectedResource:
    def test_post_without_session_and_token_forbidden(self, flow):
        response = flow.echo("POST", "hello")
        assert response.status_code == 403
        assert response.json()["type"] == "no_session"

    def test_post_with_new_session_and_token_echoes(self, flow):
        _, (session_id, token) = flow.login_as()
        message = str(uuid4())

        response = flow.echo("POST", message, session_id=session_id, param_token=token)

        assert response.status_code == 200
        assert response.text == message

    def test_post_with_token_from_token_endpoint_after_login(self, flow):
        _, (session_id, _) = flow.login_as()
        same_session_id, csrf = flow.fetch_csrf(session_id)
        assert same_session_id == session_id

        response = flow.echo("POST", "hello", session_id=session_id, header_token=csrf["token"])
        assert response.status_code == 200

    def test_pre_login_session_is_dead(self, flow):
        (old_session_id, _), (_, new_token) = flow.login_as()
        response = flow.echo("POST", "hello", session_id=old_session_id, header_token=new_token)
        assert response.status_code == 403
        assert response.json()["type"] == "no_session"

    def test_pre_login_token_rejected_on_new_session(self, flow):
        (_, old_token), (new_session_id, _) = flow.login_as()
        response = flow.echo("POST", "hello", session_id=new_session_id, param_token=old_token)
        assert response.status_code == 403
        assert response.json()["type"] == "csrf_invalid"

    def test_post_without_token_redirects(self, flow):
        _, (session_id, _) = flow.login_as()
        response = flow.echo("POST", "hello", session_id=session_id)

        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    def test_get_with_session_only_echoes(self, flow):
        _, (session_id, _) = flow.login_as()
        message = str(uuid4())
        response = flow.echo("GET", message, session_id=session_id)
        assert response.status_code == 200
        assert response.text == message

    def test_conflicting_tokens_only_matter_for_state_changes(self, flow):
        _, (session_id, token) = flow.login_as()

        get = flow.echo("GET", "hello", session_id=session_id, header_token=token, param_token="something-else")
        assert get.status_code == 200
        post = flow.echo("POST", "hello", session_id=session_id, header_token=token, param_token="something-else")
        assert post.status_code == 403
        assert post.json()["type"] == "csrf_invalid"

    def test_anonymous_session_redirects(self, flow):
        session_id, csrf = flow.fetch_csrf()
        assert flow.echo("GET", "hello", session_id=session_id).status_code == 302
        assert flow.echo("POST", "hello", session_id=session_id, header_token=csrf["token"]).status_code == 302

    def test_forbid_policy_answers_missing_challenge_with_403(self, flow, config):
        config.missing_challenge_policy = "forbid"
        _, (session_id, _) = flow.login_as()

        response = flow.echo("POST", "hello", session_id=session_id)
        assert response.status_code == 403
        assert response.json()["type"] == "csrf_missing"

    def test_expired_session_forbidden(self, flow, config):
        _, (session_id, token) = flow.login_as()
        config.session_ttl_seconds = 0

        response = flow.echo("POST", "hello", session_id=session_id, header_token=token)
        assert response.status_code == 403
        assert response.json()["type"] == "session_expired"


class TestLogout:
    def test_logout_clears_session(self, flow):
        _, (session_id, token) = flow.login_as()

        response = flow.request("POST", "/rest/user/logout", session_id=session_id, header_token=token)
        assert response.status_code == 204
        assert response.cookies.get("JSESSIONID") in (None, "")

        after = flow.request("GET", "/rest/user/current", session_id=session_id)
        assert after.status_code == 403
        assert after.json()["type"] == "no_session"

    def test_logout_without_token_is_not_performed(self, flow):
        _, (session_id, _) = flow.login_as()
        response = flow.request("POST", "/rest/user/logout", session_id=session_id)
        assert response.status_code == 302
        assert flow.request("GET", "/rest/user/current", session_id=session_id).status_code == 200


def test_health(flow):
    assert flow.request("GET", "/health").json() == {"status": "healthy"}
