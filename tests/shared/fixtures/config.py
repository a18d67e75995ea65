"""Configuration values shared by tests."""

# Long enough for HS512 without key-length warnings
TEST_JWT_SECRET = "test-secret-key-" + "x" * 64
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
