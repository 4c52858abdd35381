"""Controllers of the usuarios module."""

from typing import Any

from moduscope import AbstractActionController, get_logger

logger = get_logger(__name__)


class UsuariosController(AbstractActionController):
    def index_action(self) -> dict[str, Any]:
        logger.debug("Rendering usuarios index")
        return {"module": "usuarios", "action": "index"}
