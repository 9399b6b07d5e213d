"""Base model configuration for documents validated with pydantic."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model: immutable, and strict about unknown document keys."""

    model_config = ConfigDict(frozen=True, extra="forbid")
