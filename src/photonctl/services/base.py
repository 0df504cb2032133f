from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel

from photonctl.constants import API_ROOT
from photonctl.models.common import ResourceList
from photonctl.models.tasks import Task

M = TypeVar("M", bound=BaseModel)


def api_path(*segments: str) -> str:
    return API_ROOT + "/" + "/".join(segment.strip("/") for segment in segments)


class ServiceBase:
    """Base type for service classes bound to a client instance."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def _get(self, model: type[M], path: str, *, params: Mapping[str, Any] | None = None) -> M:
        data = await self._client._request_json("GET", path, params=params)
        return model.model_validate(data)

    async def _task(self, method: str, path: str, *, json_data: Mapping[str, Any] | None = None) -> Task:
        data = await self._client._request_json(method, path, json_data=json_data)
        return Task.model_validate(data)

    async def _collect(
        self,
        model: type[M],
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
    ) -> ResourceList[M]:
        """GET a list endpoint and follow ``nextPageLink`` until exhausted."""

        data = await self._client._request_json("GET", path, params=params)
        page = ResourceList[model].model_validate(data)  # type: ignore[valid-type]
        items = list(page.items)
        next_link = page.nextPageLink
        seen: set[str] = set()
        while next_link and next_link not in seen:
            seen.add(next_link)
            parts = urlsplit(next_link)
            link_path = parts.path
            if not link_path.startswith(API_ROOT):
                link_path = api_path(link_path)
            query = dict(parse_qsl(parts.query))
            data = await self._client._request_json("GET", link_path, params=query or None)
            page = ResourceList[model].model_validate(data)  # type: ignore[valid-type]
            items.extend(page.items)
            next_link = page.nextPageLink
        return ResourceList[model](items=items)  # type: ignore[valid-type]
