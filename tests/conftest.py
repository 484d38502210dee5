import json

import pytest

from flowvault.runtime.engine import FlowRuntime
from flowvault.utils.security import encrypt_string
from flowvault.vault.config_node import VaultConfig
from flowvault.vault.registry import VaultRegistry


API_STORE = {
    "apiService": {
        "baseUrl": "http://x",
        "apiKey": {"value": "k1", "type": "cred"},
    },
    "db": {
        "host": {"value": "db.local", "type": "str"},
        "port": {"value": 5432, "type": "num"},
        "tls": True,
        "options": {"value": {"pool": 5}, "type": "json"},
    },
}


@pytest.fixture
def registry():
    return VaultRegistry()


@pytest.fixture
def make_vault(registry):
    """Build a standalone vault-config node from a store dict."""

    def _make(store=None, name="Prod", node_id="vault-1", blob=None):
        if blob is None and store is not None:
            blob = json.dumps(store)
        definition = {
            "id": node_id,
            "type": "vault-config",
            "name": name,
            "credentials": {"store": blob} if blob is not None else {},
        }
        return VaultConfig(None, definition, registry=registry)

    return _make


@pytest.fixture
def runtime():
    rt = FlowRuntime()
    yield rt
    rt.teardown()


def vault_definition(store, node_id="vault-1", name="Prod", sealed=True):
    text = json.dumps(store)
    return {
        "id": node_id,
        "type": "vault-config",
        "name": name,
        "credentials": {"store": encrypt_string(text) if sealed else text},
    }
