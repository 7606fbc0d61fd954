"""Unit tests for settings validation in gatekeeper.core.config."""

import unittest

from pydantic import ValidationError

from gatekeeper.core.config import Settings
from gatekeeper.core.database import _engine_options


class TestSettingsValidation(unittest.TestCase):
    def test_defaults_from_test_environment(self) -> None:
        settings = Settings()
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")
        self.assertEqual(settings.API_PREFIX, "")
        self.assertFalse(settings.is_production)

    def test_rejects_unsupported_database(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DATABASE_URL="mysql://root@localhost/db")

    def test_rejects_unknown_algorithm(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_ALGORITHM="HS1")

    def test_algorithm_is_upper_cased(self) -> None:
        self.assertEqual(Settings(JWT_ALGORITHM="hs512").JWT_ALGORITHM, "HS512")

    def test_asymmetric_algorithm_requires_key_pair(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_ALGORITHM="RS256")
        with self.assertRaises(ValidationError):
            Settings(JWT_ALGORITHM="ES256", JWT_PRIVATE_KEY="private-pem")

    def test_blank_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(JWT_SECRET="   ")

    def test_bounds(self) -> None:
        for field, value in (
            ("JWT_EXPIRE_MINUTES", 0),
            ("JWT_EXPIRE_MINUTES", 10081),
            ("BCRYPT_ROUNDS", 3),
            ("DB_TIMEOUT_SEC", 0),
            ("DB_POOL_TIMEOUT_SEC", 500),
        ):
            with self.subTest(field=field, value=value):
                with self.assertRaises(ValidationError):
                    Settings(**{field: value})

    def test_api_prefix(self) -> None:
        self.assertEqual(Settings(API_PREFIX="/api/v1/").API_PREFIX, "/api/v1")
        with self.assertRaises(ValidationError):
            Settings(API_PREFIX="api")

    def test_log_level(self) -> None:
        self.assertEqual(Settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            Settings(LOG_LEVEL="chatty")


class TestEngineOptions(unittest.TestCase):
    """Store calls are bounded for both backends."""

    def test_postgres_gets_connect_statement_and_pool_timeouts(self) -> None:
        settings = Settings(
            DATABASE_URL="postgresql+psycopg2://u:p@db:5432/gatekeeper",
            DB_TIMEOUT_SEC=2.5,
            DB_POOL_TIMEOUT_SEC=7,
        )
        options = _engine_options(settings)
        self.assertEqual(options["connect_args"]["connect_timeout"], 2)
        self.assertEqual(options["connect_args"]["options"], "-c statement_timeout=2500")
        self.assertEqual(options["pool_timeout"], 7)

    def test_sqlite_uses_busy_timeout_only(self) -> None:
        options = _engine_options(Settings(DATABASE_URL="sqlite:///./local.db", DB_TIMEOUT_SEC=3))
        self.assertEqual(options["connect_args"]["timeout"], 3)
        self.assertNotIn("pool_timeout", options)


if __name__ == "__main__":
    unittest.main()
