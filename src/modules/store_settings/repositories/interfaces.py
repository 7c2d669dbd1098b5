"""Setting repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.store_settings.models import Setting


class ISettingRepository(IRepository["Setting"]):
    @abstractmethod
    def get_by_key(self, key: str) -> Optional[Setting]:
        """Retrieve a setting by its unique key."""

    @abstractmethod
    def all(self) -> List[Setting]:
        """Return every stored setting."""
