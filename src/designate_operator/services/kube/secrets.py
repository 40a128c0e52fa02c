"""Input secret reader."""

from __future__ import annotations

from kubernetes import client

from ...models import DesignateAPI
from ...utils.secrets import get_secret_with_hash, missing_secret_keys
from .objects import api_call


class KubeSecretReader:
    """Reads the secret named by ``spec.secret`` and checks its password keys."""

    def __init__(self, api: client.CoreV1Api, instance: DesignateAPI) -> None:
        self.api = api
        self.instance = instance

    def read(self) -> str:
        spec = self.instance.spec
        with api_call("secrets", "read"):
            secret, secret_hash = get_secret_with_hash(self.api, self.instance.namespace, spec.secret)

        missing = missing_secret_keys(secret, [spec.password_selectors.database, spec.password_selectors.service])
        if missing:
            raise ValueError(f"secret {spec.secret} is missing keys: {', '.join(missing)}")
        return secret_hash
