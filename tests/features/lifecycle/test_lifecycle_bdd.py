"""BDD tests for the request lifecycle."""

import pytest
from pytest_bdd import scenarios

scenarios("request_lifecycle.feature")

pytestmark = [
    pytest.mark.tier(2),
    pytest.mark.tra("Application.RequestLifecycle"),
]
