from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Backend under test
BASE_URL = config.get("BACKEND_URL", "http://localhost:8787")

# Client credentials for the token endpoint
CLIENT_ID = config.get_optional("CLIENT_ID")
CLIENT_SECRET = config.get_optional("CLIENT_SECRET")
GRANT_TYPE = config.get("GRANT_TYPE", "exchange_code")

# Grant-specific credentials (only the ones the grant type needs are used)
EXCHANGE_CODE = config.get_optional("EXCHANGE_CODE")
USERNAME = config.get_optional("AUTH_USERNAME")
PASSWORD = config.get_optional("AUTH_PASSWORD")
REFRESH_TOKEN = config.get_optional("REFRESH_TOKEN")

# Timeouts in seconds
AUTH_TIMEOUT = config.get("AUTH_TIMEOUT", 30.0)
REQUEST_TIMEOUT = config.get("REQUEST_TIMEOUT", 30.0)

# Suite discovery
TESTS_DIR = config.get("TESTS_DIR", "suites")

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "info")
LOG_FILE = config.get_optional("LOG_FILE")

# Local stub backend (python -m stub)
STUB_BIND_ADDRESS = config.get("STUB_BIND_ADDRESS", "127.0.0.1")
STUB_PORT = config.get("STUB_PORT", 8787)
STUB_CLIENT_ID = config.get("STUB_CLIENT_ID", "fortnite-client-simulator")
STUB_CLIENT_SECRET = config.get("STUB_CLIENT_SECRET", "secret123")
