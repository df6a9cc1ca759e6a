from django.test import SimpleTestCase

from django_tenancy.normalizer import normalize_domain


class TestNormalizeDomain(SimpleTestCase):
    def test_url_is_reduced_to_its_host(self):
        self.assertEqual(normalize_domain("HTTPS://Example.com./"), "example.com")
        self.assertEqual(
            normalize_domain("http://user@Acme.Example.Test:8443/path?q=1"),
            "acme.example.test",
        )

    def test_plain_host_is_lowercased_and_trimmed(self):
        self.assertEqual(normalize_domain("  Acme.Example.Test.  "), "acme.example.test")
        self.assertEqual(normalize_domain(".acme.test"), "acme.test")

    def test_blank_and_hostless_values(self):
        for value in ["", "   ", "...", "https://", "http:///path"]:
            with self.subTest(value=value):
                self.assertIsNone(normalize_domain(value))

    def test_non_string_values(self):
        for value in [None, 5, ["example.com"], b"example.com"]:
            with self.subTest(value=value):
                self.assertIsNone(normalize_domain(value))

    def test_idempotent(self):
        for value in ["HTTPS://Example.com./", " acme.TEST ", "a.b.c"]:
            with self.subTest(value=value):
                once = normalize_domain(value)
                self.assertEqual(normalize_domain(once), once)
