# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
from typing import NamedTuple, Optional

from structlog import get_logger

from jsonio.conf.settings import JsonIOSettings

logger = get_logger()

#: environment variable holding the path of a yaml file with settings overrides
CONFIG_YAML_ENV_VAR = 'JSONIO_CONFIG_YAML'


class _SettingsMetadata(NamedTuple):
    source: Optional[str]
    settings: JsonIOSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> JsonIOSettings:
    """
    Returns the global settings.

    Settings are loaded from the yaml file in the 'JSONIO_CONFIG_YAML' env var, the defaults are used when it is not
    set. They are loaded only once, changing the env var afterwards to point somewhere else is an error.
    """
    settings_yaml_filepath = os.environ.get(CONFIG_YAML_ENV_VAR)
    return _load_settings_singleton(settings_yaml_filepath)


def get_settings_source() -> Optional[str]:
    """ Returns the path of the YAML file that was loaded, `None` if the defaults are in use.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source


def _load_settings_singleton(source: Optional[str]) -> JsonIOSettings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')
        return _settings_singleton.settings

    log = logger.new()
    if source is None:
        settings = JsonIOSettings()
    else:
        settings = JsonIOSettings.from_yaml(filepath=source)
    log.debug('settings loaded', source=source, settings=settings.model_dump())
    _settings_singleton = _SettingsMetadata(source=source, settings=settings)
    return settings
