from .client_creator import (
    create_test_client, create_test_config,
    TEST_API_KEY, TEST_POLICY_ID, TEST_PRIV_KEY, TEST_RELAYER_URL, TEST_ENDPOINT,
    TEST_ACCOUNT, TEST_TOKEN, TEST_DESTINATION,
)

__all__ = [
    "create_test_client",
    "create_test_config",
    "TEST_API_KEY",
    "TEST_POLICY_ID",
    "TEST_PRIV_KEY",
    "TEST_RELAYER_URL",
    "TEST_ENDPOINT",
    "TEST_ACCOUNT",
    "TEST_TOKEN",
    "TEST_DESTINATION",
]
