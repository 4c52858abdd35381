"""Declarative configuration of the usuarios module."""

from pathlib import Path
from typing import Any

from moduscope import InvokableFactory
from usuarios.controller import UsuariosController

VIEW_PATH = str(Path(__file__).resolve().parent / "view")


def module_config() -> dict[str, Any]:
    return {
        "controllers": {
            "factories": {
                UsuariosController: InvokableFactory,
            },
        },
        "router": {
            "routes": {
                "usuarios": {
                    "type": "literal",
                    "options": {
                        "route": "/usuarios",
                        "defaults": {
                            "controller": UsuariosController,
                            "action": "index",
                        },
                    },
                    "may_terminate": True,
                    # Additional routes matching below /usuarios go here
                    "child_routes": {},
                },
            },
        },
        "view_manager": {
            "template_path_stack": {
                "usuarios": VIEW_PATH,
            },
        },
    }
