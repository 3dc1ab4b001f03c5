"""
Tests for credentials, env-var loading and the error types.
"""

import dataclasses
import os
import unittest
from unittest.mock import patch

from wiki_session.config import Credentials, env_flag
from wiki_session.exceptions import AuthError, TransportError, WikiSessionError


class TestCredentials(unittest.TestCase):
    def test_defaults_are_empty(self):
        creds = Credentials()
        self.assertEqual(creds.missing_fields(), ["base_url", "bot_username", "bot_password"])
        self.assertFalse(creds.private)

    def test_immutable(self):
        creds = Credentials(base_url="https://wiki.example/")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            creds.base_url = "https://elsewhere/"

    def test_repr_masks_password(self):
        creds = Credentials("https://wiki.example/", "Bot", "hunter2")
        self.assertNotIn("hunter2", repr(creds))
        self.assertIn("Bot", repr(creds))

    @patch.dict(os.environ, {
        "WIKI_BASE_URL": "https://wiki.example/w/",
        "WIKI_BOT_USERNAME": "Bot@task",
        "WIKI_BOT_PASSWORD": "secret",
        "WIKI_PRIVATE": "yes",
    })
    def test_from_env(self):
        creds = Credentials.from_env()
        self.assertEqual(creds, Credentials("https://wiki.example/w/", "Bot@task", "secret", True))
        self.assertEqual(creds.missing_fields(), [])

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_empty(self):
        self.assertEqual(Credentials.from_env(), Credentials())


class TestEnvFlag(unittest.TestCase):
    def test_values(self):
        for raw, expected in (("1", True), ("TRUE", True), (" on ", True),
                              ("0", False), ("no", False), ("", False)):
            with self.subTest(raw=raw):
                with patch.dict(os.environ, {"WIKI_FLAG": raw}):
                    self.assertEqual(env_flag("WIKI_FLAG"), expected)

    @patch.dict(os.environ, {}, clear=True)
    def test_default(self):
        self.assertTrue(env_flag("WIKI_FLAG", default=True))


class TestErrors(unittest.TestCase):
    def test_hierarchy(self):
        self.assertTrue(issubclass(AuthError, WikiSessionError))
        self.assertTrue(issubclass(TransportError, WikiSessionError))

    def test_cause_in_message(self):
        err = AuthError("Login failed", cause=ValueError("bad"))
        self.assertEqual(str(err), "Login failed (bad)")
        self.assertEqual(err.message, "Login failed")

    def test_transport_status(self):
        err = TransportError("HTTP error! status: 502 - Bad Gateway", status=502,
                             status_text="Bad Gateway")
        self.assertEqual((err.status, err.status_text), (502, "Bad Gateway"))


if __name__ == "__main__":
    unittest.main()
