"""Base model for relayrules wire and storage models.

Every model inherits from :class:`RulesBaseModel` which provides:

* ``populate_by_name`` so fields accept both the Python name and the
  short wire alias (``dec``, ``enable``, ``temperature``).
* A ``model_validator(mode="before")`` that drops ``null`` values so
  the field default is used. The rules file is hand-edited and older
  writers emit ``"schedule": null`` for an empty schedule.
* :meth:`to_wire` which dumps by alias in declaration order.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class RulesBaseModel(BaseModel):
    """Base for relayrules models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``None`` values so field defaults apply."""
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}

    def to_wire(self) -> dict[str, Any]:
        """Return a JSON-ready dict using wire aliases."""
        return self.model_dump(mode="json", by_alias=True)
