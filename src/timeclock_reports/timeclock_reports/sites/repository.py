from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol


class SiteRepository(Protocol):
    def get_client_names(self, site_ids: Iterable[str]) -> Mapping[str, str]:
        """Map site record id -> client name for the ids that have one."""

        raise NotImplementedError

    def get_site_name(self, site_id: str) -> Optional[str]:
        raise NotImplementedError
