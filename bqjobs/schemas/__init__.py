"""Pydantic v2 schemas for the job and query-results documents."""

from .job import *  # noqa: F401,F403
from .results import *  # noqa: F401,F403
