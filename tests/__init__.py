"""Test suite for storagebridge.

- unit/: Isolated tests; providers mocked with pytest-httpx or AsyncMock
- integration/: Repository tests against SQLite (aiosqlite) and the HTTP API
  through FastAPI's TestClient

No Docker services are required; Redis is replaced by in-memory fakes.
"""
