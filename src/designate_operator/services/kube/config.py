"""Rendering of the scripts and config-data ConfigMaps."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from kubernetes import client

from ...builders.collaborators import create_configmap
from ...builders.workload import (
    CONFIG_DATA_PATH,
    CONFIG_MERGED_PATH,
    SCRIPTS_PATH,
    config_data_configmap_name,
    scripts_configmap_name,
)
from ...constants import CUSTOM_SERVICE_CONFIG_FILE, DATABASE_NAME, DESIGNATE_API_PORT
from ...models import DesignateAPI
from ...utils.hashing import object_hash
from .keystone import get_keystone_api_endpoints
from .objects import apply_object, configmap_client

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent.parent / "templates"

SCRIPT_TEMPLATES = {
    "init.sh": "designateapi/scripts/init.sh.j2",
    "common.sh": "common/common.sh.j2",
}
CONFIG_TEMPLATES = {
    "designate.conf": "designateapi/config/designate.conf.j2",
    "logging.conf": "designateapi/config/logging.conf.j2",
}


def create_template_environment(template_dir: Path | None = None) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


class KubeConfigMaterializer:
    """Renders the service scripts and configuration into ConfigMaps.

    Passwords never reach the ConfigMaps: the init container writes them
    into the merged config from the input secret.
    """

    def __init__(
        self,
        api: client.CoreV1Api,
        custom_api: client.CustomObjectsApi,
        instance: DesignateAPI,
        env: Environment | None = None,
    ) -> None:
        self.instance = instance
        self.custom_api = custom_api
        self.configmaps = configmap_client(api)
        self.env = env or create_template_environment()

    def _template_parameters(self) -> dict[str, Any]:
        keystone = get_keystone_api_endpoints(self.custom_api, self.instance.namespace)
        spec = self.instance.spec
        return {
            "service_user": spec.service_user,
            "database_user": spec.database_user,
            "database_hostname": self.instance.status.get("databaseHostname") or "",
            "keystone_internal_url": keystone["internal"],
            "keystone_public_url": keystone["public"],
            "api_port": DESIGNATE_API_PORT,
            "database_name": DATABASE_NAME,
            "custom_config_file": CUSTOM_SERVICE_CONFIG_FILE,
            "config_data_path": CONFIG_DATA_PATH,
            "config_merged_path": CONFIG_MERGED_PATH,
            "scripts_path": SCRIPTS_PATH,
        }

    def render(self) -> tuple[dict[str, str], dict[str, str]]:
        """Render the scripts and config data.

        Returns:
            File name to content maps for the scripts and the config data
        """
        params = self._template_parameters()
        scripts = {
            name: self.env.get_template(template).render(**params)
            for name, template in SCRIPT_TEMPLATES.items()
        }
        config = {
            name: self.env.get_template(template).render(**params)
            for name, template in CONFIG_TEMPLATES.items()
        }
        # Extra files may replace rendered defaults such as logging.conf,
        # but custom.conf always comes from customServiceConfig.
        config.update(self.instance.spec.default_config_overwrite)
        config[CUSTOM_SERVICE_CONFIG_FILE] = self.instance.spec.custom_service_config
        return scripts, config

    def materialize(self, env_inputs: dict[str, str]) -> None:
        scripts, config = self.render()
        for name, data, config_type in (
            (scripts_configmap_name(self.instance), scripts, "scripts"),
            (config_data_configmap_name(self.instance), config, "config"),
        ):
            apply_object(self.configmaps, create_configmap(self.instance, name, data, config_type))
            env_inputs[name] = object_hash(data)
