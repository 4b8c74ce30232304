"""Scaffoldkit -- create new projects by layering template overlays."""

from scaffoldkit.config import Argv, CreateConfig, ExtraTool
from scaffoldkit.creator import (
    ConfigurationError,
    InvalidProjectNameError,
    TemplateNotFoundError,
    UnknownToolError,
    create,
    run,
)
from scaffoldkit.prompts import multiselect, select, text

__all__ = [
    "Argv",
    "ConfigurationError",
    "CreateConfig",
    "ExtraTool",
    "InvalidProjectNameError",
    "TemplateNotFoundError",
    "UnknownToolError",
    "create",
    "multiselect",
    "run",
    "select",
    "text",
]
