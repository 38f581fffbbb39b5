"""Tests for size threshold parsing."""

import unittest

from logroll.errors import InvalidConfiguration
from logroll.sizes import parse_size


class TestParseSize(unittest.TestCase):
    def test_suffixed_strings(self):
        self.assertEqual(parse_size("10k"), 10240)
        self.assertEqual(parse_size("5m"), 5242880)
        self.assertEqual(parse_size("2g"), 2147483648)

    def test_integer_is_megabytes(self):
        self.assertEqual(parse_size(100), 104857600)

    def test_unsuffixed_string_is_megabytes(self):
        self.assertEqual(parse_size("3"), 3 * 1024 * 1024)

    def test_suffix_case_insensitive(self):
        self.assertEqual(parse_size("10K"), 10240)
        self.assertEqual(parse_size(" 1G "), 1024 ** 3)

    def test_none_means_no_limit(self):
        self.assertIsNone(parse_size(None))

    def test_malformed_rejected(self):
        for spec in ("5x", "abc", "", "k", "1.5m", "-5m", "10 kb"):
            with self.assertRaises(InvalidConfiguration, msg=f"Expected failure for {spec!r}"):
                parse_size(spec)

    def test_non_positive_rejected(self):
        for spec in (0, -1, "0k"):
            with self.assertRaises(InvalidConfiguration):
                parse_size(spec)

    def test_wrong_types_rejected(self):
        for spec in (True, 1.5, [10]):
            with self.assertRaises(InvalidConfiguration):
                parse_size(spec)

    def test_error_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_size("5x")
