from __future__ import annotations

from typing import Optional, Protocol

from .model import CompanySettings


class CompanySettingsRepository(Protocol):
    def get(self) -> Optional[CompanySettings]:
        """Return the single settings row, or None when not configured yet."""

        raise NotImplementedError

    def save(self, settings: CompanySettings) -> CompanySettings:
        raise NotImplementedError
