"""
Route-table URL generator.

Routes are named path templates with {placeholder} parameters, e.g.
"/view/content/location/{locationId}". Parameters that do not appear in the
template are appended as a query string.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote, urlencode

from src.domain.errors import InvalidArgumentError, NotFoundError

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class RouteTableRouter:
    """Implements RouterPort from a mapping of route name to path template."""

    def __init__(self, routes: dict[str, str], base_url: str = "") -> None:
        self._routes = dict(routes)
        self._base_url = base_url.rstrip("/")

    def has_route(self, name: str) -> bool:
        return name in self._routes

    def generate(self, name: str, params: dict[str, Any], absolute: bool = False) -> str:
        template = self._routes.get(name)
        if template is None:
            raise NotFoundError("route", name)

        placeholders = _PLACEHOLDER.findall(template)
        missing = [p for p in placeholders if params.get(p) is None]
        if missing:
            raise InvalidArgumentError(
                "params", f"route '{name}' requires {', '.join(missing)}"
            )

        path = _PLACEHOLDER.sub(lambda m: quote(str(params[m.group(1)]), safe=""), template)

        extra = {k: v for k, v in params.items() if k not in placeholders and v is not None}
        if extra:
            path = f"{path}?{urlencode(extra)}"

        if absolute:
            return f"{self._base_url}{path}"
        return path
