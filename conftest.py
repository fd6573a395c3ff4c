import logging
import os

import structlog

from jsonio.conf import UNITTESTS_SETTINGS_FILEPATH

os.environ['JSONIO_CONFIG_YAML'] = os.environ.get('JSONIO_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)

# debug events would end up in the output compared by doctests
structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.INFO))
