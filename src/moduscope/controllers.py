"""Action controller base class."""

import re
from typing import Any

from moduscope.core.exceptions import ActionNotFoundError

_ACTION_SEPARATORS = re.compile(r"[-.\s]+")


def action_method_name(action: str) -> str:
    """Map an action name such as "list-users" to "list_users_action"."""
    return f"{_ACTION_SEPARATORS.sub('_', action.strip()).lower()}_action"


class AbstractActionController:
    """Dispatches an action name to the matching ``<action>_action`` method."""

    def dispatch(self, action: str, **params: Any) -> Any:
        """Call the method for action with the route parameters.

        Raises:
            ActionNotFoundError: If the controller has no such action.
        """
        method = getattr(self, action_method_name(action), None)
        if method is None or not callable(method):
            raise ActionNotFoundError(
                f"{type(self).__name__} has no action {action!r}"
            )
        return method(**params)
