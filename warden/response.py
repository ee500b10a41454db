"""
Response primitives - status, headers and cookie helpers.

Headers are stored lower-cased; ``set-cookie`` may carry several values.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union


class Response:
    """
    HTTP response with cookie helpers.

    Args:
        content: Response body (bytes or str)
        status: HTTP status code
        headers: Response headers (supports multi-value)
        media_type: Content-Type override
    """

    def __init__(
        self,
        content: Union[bytes, str] = b"",
        status: int = 200,
        headers: Optional[Mapping[str, Union[str, Sequence[str]]]] = None,
        media_type: Optional[str] = None,
    ):
        self.status = status
        self._content = content

        self._headers: Dict[str, Union[str, List[str]]] = {}
        if headers:
            for key, value in headers.items():
                if isinstance(value, (list, tuple)):
                    self._headers[key.lower()] = list(value)
                else:
                    self._headers[key.lower()] = value

        if media_type:
            self._headers["content-type"] = media_type
        elif "content-type" not in self._headers and content:
            self._headers["content-type"] = (
                "text/plain; charset=utf-8" if isinstance(content, str) else "application/octet-stream"
            )

    @property
    def body(self) -> bytes:
        if isinstance(self._content, str):
            return self._content.encode("utf-8")
        return self._content

    @property
    def headers(self) -> Dict[str, Union[str, List[str]]]:
        return self._headers

    @classmethod
    def json(cls, data: Any, status: int = 200, **kwargs) -> "Response":
        """Create JSON response."""
        return cls(
            content=json.dumps(data).encode("utf-8"),
            status=status,
            media_type="application/json",
            **kwargs,
        )

    @classmethod
    def redirect(
        cls,
        url: str,
        status: int = 303,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> "Response":
        """
        Create redirect response.

        Args:
            url: Redirect URL
            status: HTTP status (default 303 See Other)
            headers: Additional headers
        """
        redirect_headers = {"location": url}
        if headers:
            redirect_headers.update(headers)

        return cls(content=b"", status=status, headers=redirect_headers)

    # ========================================================================
    # Header Helpers
    # ========================================================================

    def add_header(self, name: str, value: str) -> None:
        """Append a header value, keeping earlier values of the same name."""
        name = name.lower()
        existing = self._headers.get(name)
        if existing is None:
            self._headers[name] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            self._headers[name] = [existing, value]

    def header_values(self, name: str) -> List[str]:
        """All values of a header, in the order they were added."""
        value = self._headers.get(name.lower())
        if value is None:
            return []
        if isinstance(value, list):
            return list(value)
        return [value]

    # ========================================================================
    # Cookie Helpers
    # ========================================================================

    def set_cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: Optional[int] = None,
        path: str = "/",
        domain: Optional[str] = None,
        secure: bool = True,
        httponly: bool = True,
        samesite: Optional[str] = "Lax",
    ) -> None:
        """
        Set a cookie.

        Args:
            name: Cookie name
            value: Cookie value
            max_age: Max age in seconds
            path: Cookie path
            domain: Cookie domain
            secure: Secure flag
            httponly: HttpOnly flag
            samesite: SameSite policy (Strict, Lax, None)
        """
        cookie_parts = [f"{name}={value}"]

        if max_age is not None:
            cookie_parts.append(f"Max-Age={max_age}")

        cookie_parts.append(f"Path={path}")

        if domain:
            cookie_parts.append(f"Domain={domain}")

        if secure:
            cookie_parts.append("Secure")

        if httponly:
            cookie_parts.append("HttpOnly")

        if samesite:
            cookie_parts.append(f"SameSite={samesite}")

        self.add_header("set-cookie", "; ".join(cookie_parts))

    def __repr__(self) -> str:
        return f"<Response [{self.status}]>"


__all__ = ["Response"]
