from __future__ import annotations
import os
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit, quote
from pydantic import SecretStr
from bindings_release.core.errors import CredentialMissing

REDACTED = "***"


@dataclass(frozen=True)
class Credential:
    name: str
    username: str
    secret: SecretStr

    def authenticated_url(self, remote_url: str) -> str:
        """Return ``remote_url`` with the credential embedded for http(s) remotes.

        Local paths and ssh remotes are returned unchanged.
        """
        parts = urlsplit(remote_url)
        if parts.scheme not in ("http", "https"):
            return remote_url
        host = parts.hostname or ""
        if parts.port:
            host = f"{host}:{parts.port}"
        userinfo = f"{quote(self.username, safe='')}:{quote(self.secret.get_secret_value(), safe='')}"
        return urlunsplit((parts.scheme, f"{userinfo}@{host}", parts.path, parts.query, parts.fragment))

    def redact(self, text: str) -> str:
        value = self.secret.get_secret_value()
        if not value:
            return text
        for form in {value, quote(value, safe="")}:
            text = text.replace(form, REDACTED)
        return text


class CredentialProvider:
    """Reads the publish credential from the environment when asked, never earlier."""

    def __init__(self, env_var: str, username: str):
        self.env_var = env_var
        self.username = username

    def resolve(self) -> Credential:
        value = os.environ.get(self.env_var)
        if not value:
            raise CredentialMissing(self.env_var)
        return Credential(name=self.env_var, username=self.username, secret=SecretStr(value))
