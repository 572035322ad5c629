"""Configuration objects for the catalog Python SDK."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from .models import RetryPolicy, RetryRule


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = "http://localhost:8080"
    timeout: float = 10.0
    username: Optional[str] = None
    password: Optional[str] = None
    login_path: str = "/api/users/login"
    not_found_fallback: Optional[str] = None
    max_retries: int = 3
    user_agent: str = "catalog-sdk-python/0.1.0"
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            base_url=os.environ.get("CATALOG_API_BASE_URL", "http://localhost:8080").rstrip("/"),
            timeout=float(os.environ.get("CATALOG_API_TIMEOUT", "10.0")),
            username=os.environ.get("CATALOG_USERNAME") or None,
            password=os.environ.get("CATALOG_PASSWORD") or None,
            login_path=os.environ.get("CATALOG_LOGIN_PATH", "/api/users/login"),
            not_found_fallback=os.environ.get("CATALOG_NOT_FOUND_FALLBACK") or None,
            max_retries=int(os.environ.get("CATALOG_MAX_RETRIES", "3")),
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def login_body(self, username: Optional[str] = None, password: Optional[str] = None) -> bytes:
        payload = {"username": username or self.username, "password": password or self.password}
        return json.dumps(payload, separators=(",", ":")).encode("utf-8")

    def retry_policy(self) -> RetryPolicy:
        rules: Dict[int, RetryRule] = {
            404: RetryRule(target=self.not_found_fallback),
        }
        if self.has_credentials:
            rules[401] = RetryRule(
                target=self.login_path,
                method="POST",
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                body=self.login_body(),
                reauthenticate=True,
            )
        return RetryPolicy(rules=rules, max_attempts=self.max_retries)


__all__ = ["ClientConfig"]
