"""Identity service coordinates shared by the test suite."""

IDENTITY_BASE_URL = "https://identity.example.com/api"
CLIENT_ID = "client-1"
CLIENT_SECRET = "client-secret-1"  # noqa: S105
