from bindings_release.core.credentials import CredentialProvider, REDACTED
from bindings_release.core.errors import CredentialMissing
import pytest

TOKEN = "ghp_s3cret/token+value"


def test_resolve_reads_environment_at_call_time(monkeypatch):
    monkeypatch.delenv("EZKL_PORTER_TOKEN", raising=False)
    provider = CredentialProvider("EZKL_PORTER_TOKEN", "zkonduit")
    monkeypatch.setenv("EZKL_PORTER_TOKEN", TOKEN)

    credential = provider.resolve()

    assert credential.name == "EZKL_PORTER_TOKEN"
    assert credential.secret.get_secret_value() == TOKEN


def test_missing_credential_names_the_variable(monkeypatch):
    monkeypatch.delenv("EZKL_PORTER_TOKEN", raising=False)
    with pytest.raises(CredentialMissing) as excinfo:
        CredentialProvider("EZKL_PORTER_TOKEN", "zkonduit").resolve()
    assert excinfo.value.name == "EZKL_PORTER_TOKEN"
    assert "EZKL_PORTER_TOKEN" in str(excinfo.value)


def test_empty_credential_counts_as_missing(monkeypatch):
    monkeypatch.setenv("EZKL_PORTER_TOKEN", "")
    with pytest.raises(CredentialMissing):
        CredentialProvider("EZKL_PORTER_TOKEN", "zkonduit").resolve()


def test_credential_never_shows_in_repr(monkeypatch):
    monkeypatch.setenv("EZKL_PORTER_TOKEN", TOKEN)
    credential = CredentialProvider("EZKL_PORTER_TOKEN", "zkonduit").resolve()
    assert TOKEN not in repr(credential)
    assert TOKEN not in str(credential)


def test_authenticated_url_and_redaction(monkeypatch):
    monkeypatch.setenv("EZKL_PORTER_TOKEN", TOKEN)
    credential = CredentialProvider("EZKL_PORTER_TOKEN", "zkonduit").resolve()

    url = credential.authenticated_url("https://github.com/zkonduit/ezkl-swift-package.git")
    assert url.startswith("https://zkonduit:")
    assert url.endswith("@github.com/zkonduit/ezkl-swift-package.git")

    message = f"fatal: unable to access '{url}': Could not resolve host (token {TOKEN})"
    redacted = credential.redact(message)
    assert TOKEN not in redacted
    assert "ghp_s3cret" not in redacted
    assert REDACTED in redacted


def test_local_remotes_are_left_alone(monkeypatch):
    monkeypatch.setenv("EZKL_PORTER_TOKEN", TOKEN)
    credential = CredentialProvider("EZKL_PORTER_TOKEN", "zkonduit").resolve()
    assert credential.authenticated_url("/srv/git/remote.git") == "/srv/git/remote.git"
    assert credential.authenticated_url("git@github.com:zkonduit/x.git") == "git@github.com:zkonduit/x.git"
