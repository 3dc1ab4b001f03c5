"""
Tests for the action classifier, token extraction and the token cache.
"""

import unittest

from wiki_session.auth.token import (
    ACTION_TOKEN_TYPES,
    CSRF,
    TokenCache,
    classify,
    extract_token,
    token_key,
    token_query,
)
from wiki_session.exceptions import TokenError


class TestClassify(unittest.TestCase):
    def test_edit_uses_csrf(self):
        self.assertEqual(classify("edit"), "csrf")

    def test_common_writes_use_csrf(self):
        for action in ("upload", "move", "delete", "protect", "undelete",
                       "block", "unblock", "emailuser", "options"):
            with self.subTest(action=action):
                self.assertEqual(classify(action), CSRF)

    def test_patrol_has_its_own_type(self):
        self.assertEqual(classify("patrol"), "patrol")

    def test_login_is_tokenless(self):
        self.assertIsNone(classify("login"))

    def test_table_is_exhaustive(self):
        self.assertEqual(ACTION_TOKEN_TYPES, {
            "createaccount": "createaccount",
            "login":         None,
            "patrol":        "patrol",
            "rollback":      "rollback",
            "userrights":    "userrights",
            "watch":         "watch",
        })
        for action, token_type in ACTION_TOKEN_TYPES.items():
            with self.subTest(action=action):
                self.assertEqual(classify(action), token_type)

    def test_missing_action_defaults_to_csrf(self):
        self.assertEqual(classify(None), CSRF)
        self.assertEqual(classify(""), CSRF)


class TestTokenKey(unittest.TestCase):
    def test_keys(self):
        self.assertEqual(token_key("csrf"), "csrftoken")
        self.assertEqual(token_key("login"), "logintoken")
        self.assertEqual(token_key("patrol"), "patroltoken")

    def test_query_always_names_the_type(self):
        self.assertEqual(token_query("csrf"), {
            "action": "query", "meta": "tokens", "type": "csrf", "format": "json",
        })


class TestExtractToken(unittest.TestCase):
    def test_extracts(self):
        payload = {"batchcomplete": "", "query": {"tokens": {"csrftoken": "abc+\\"}}}
        self.assertEqual(extract_token("csrf", payload), "abc+\\")

    def test_wrong_key(self):
        with self.assertRaises(TokenError):
            extract_token("csrf", {"query": {"tokens": {"logintoken": "LT"}}})

    def test_unrecognised_shapes(self):
        for payload in (None, [], "text", {}, {"query": []}, {"query": {"tokens": "x"}},
                        {"query": {"tokens": {"csrftoken": ""}}},
                        {"query": {"tokens": {"csrftoken": 5}}}):
            with self.subTest(payload=payload):
                with self.assertRaises(TokenError):
                    extract_token("csrf", payload)

    def test_error_envelope(self):
        payload = {"error": {"code": "badvalue", "info": "Unrecognized value for parameter \"type\""}}
        with self.assertRaises(TokenError) as ctx:
            extract_token("bogus", payload)
        self.assertIn("badvalue", str(ctx.exception))


class TestTokenCache(unittest.TestCase):
    def test_get_set(self):
        cache = TokenCache()
        self.assertIsNone(cache.get("csrf"))
        cache.set("csrf", "CT")
        self.assertEqual(cache.get("csrf"), "CT")
        self.assertIn("csrf", cache)

    def test_clear_drops_everything(self):
        cache = TokenCache()
        cache.set("login", "LT")
        cache.set("csrf", "CT")
        cache.clear()
        self.assertEqual(len(cache), 0)

    def test_snapshot_restore(self):
        cache = TokenCache()
        cache.set("login", "LT")
        snap = cache.snapshot()
        cache.clear()
        cache.set("csrf", "other")
        cache.restore(snap)
        self.assertEqual(cache.snapshot(), {"login": "LT"})

    def test_fetch_lock_is_per_type(self):
        cache = TokenCache()
        self.assertIs(cache.fetch_lock("csrf"), cache.fetch_lock("csrf"))
        self.assertIsNot(cache.fetch_lock("csrf"), cache.fetch_lock("patrol"))


if __name__ == "__main__":
    unittest.main()
