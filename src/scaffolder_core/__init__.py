"""Scaffolder Core - cookiecutter template execution for scaffolder tasks.

Renders a fetched template with a local cookiecutter or, when none is
installed, inside a container, and places the result in the task workspace.
"""

from scaffolder_core.actions import ActionContext, FetchCookiecutterAction
from scaffolder_core.cookiecutter import CookiecutterRunner

__version__ = "1.0.0"
__all__ = ["__version__", "ActionContext", "CookiecutterRunner", "FetchCookiecutterAction"]
