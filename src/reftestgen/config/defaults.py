"""
reftestgen.config.defaults - Default configuration values.
"""

CONFIG_FILE_NAME = ".reftestgen.toml"

ENV_PREFIX = "REFTESTGEN_"

DEFAULT_CONFIG = {
    "generate": {
        "module": "refret",
        "kinds": ["parsing", "analysis", "refret"],
        "include_empty": False,
        "force": False,
        "fail_fast": False,
    },
    "analysis": {
        "variants": ["default", "test"],
    },
    "discovery": {
        "extensions": [".java"],
        "skip_dirs": [],
    },
    "spt": {
        "language": "Java",
    },
}
