"""Tests for the GitLab REST client."""

import json
import unittest
from unittest.mock import Mock, patch

import requests

from vc_daily_report.vcs.gitlab_client import COMMITS_PER_PAGE, GitLabClient, GitLabError


def _response(status_code=200, data=None, text=None):
    response = Mock()
    response.status_code = status_code
    if data is not None:
        response.json.return_value = data
        response.text = json.dumps(data)
    else:
        response.json.side_effect = json.JSONDecodeError("msg", "doc", 0)
        response.text = text or ""
    return response


class TestGitLabClient(unittest.TestCase):
    def setUp(self) -> None:
        self.client = GitLabClient("https://gitlab.example.com/", "secret-token", request_timeout=5)

    @patch("vc_daily_report.vcs.gitlab_client.requests.get")
    def test_get_current_user(self, mock_get):
        mock_get.return_value = _response(data={"name": "Zhang San", "email": "ZS@example.com"})

        user = self.client.get_current_user()

        self.assertEqual(user["name"], "Zhang San")
        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], "https://gitlab.example.com/api/v4/user")
        self.assertEqual(kwargs["headers"], {"PRIVATE-TOKEN": "secret-token"})
        self.assertEqual(kwargs["timeout"], 5)

    @patch("vc_daily_report.vcs.gitlab_client.requests.get")
    def test_list_commits_params(self, mock_get):
        mock_get.return_value = _response(data=[{"id": "abc"}])

        commits = self.client.list_commits("42", "2024-01-01T00:00:00.000Z", "2024-01-01T23:59:59.999Z")

        self.assertEqual(commits, [{"id": "abc"}])
        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], "https://gitlab.example.com/api/v4/projects/42/repository/commits")
        self.assertEqual(
            kwargs["params"],
            {
                "since": "2024-01-01T00:00:00.000Z",
                "until": "2024-01-01T23:59:59.999Z",
                "per_page": COMMITS_PER_PAGE,
            },
        )

    @patch("vc_daily_report.vcs.gitlab_client.requests.get")
    def test_project_path_is_encoded(self, mock_get):
        mock_get.return_value = _response(data={"name": "app"})

        self.client.get_project("group/app")

        self.assertEqual(mock_get.call_args[0][0], "https://gitlab.example.com/api/v4/projects/group%2Fapp")

    @patch("vc_daily_report.vcs.gitlab_client.requests.get")
    def test_error_status_carries_payload(self, mock_get):
        mock_get.return_value = _response(status_code=401, data={"message": "401 Unauthorized"})

        with self.assertRaises(GitLabError) as ctx:
            self.client.get_current_user()
        self.assertIn("401", str(ctx.exception))
        self.assertEqual(ctx.exception.payload, {"message": "401 Unauthorized"})

    @patch("vc_daily_report.vcs.gitlab_client.requests.get")
    def test_request_exception(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("Connection refused")

        with self.assertRaises(GitLabError) as ctx:
            self.client.get_project("1")
        self.assertIn("Connection refused", str(ctx.exception))

    @patch("vc_daily_report.vcs.gitlab_client.requests.get")
    def test_invalid_json(self, mock_get):
        mock_get.return_value = _response(text="<html>")

        with self.assertRaises(GitLabError):
            self.client.get_current_user()

    @patch("vc_daily_report.vcs.gitlab_client.requests.get")
    def test_unexpected_commit_list_shape(self, mock_get):
        mock_get.return_value = _response(data={"message": "not a list"})

        with self.assertRaises(GitLabError):
            self.client.list_commits("1", "a", "b")


if __name__ == "__main__":
    unittest.main()
