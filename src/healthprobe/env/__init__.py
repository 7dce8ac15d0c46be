from healthprobe.env.env import (
    ConfigError,
    Environment,
    LoggingEnvironment,
    get_env,
    get_logging_env,
    reset_env_caches,
)

from healthprobe.env.paths import (
    CONFIG_DIR,
    PROJECT_ROOT,
    RUN_ID_FORMAT,
    logs_dir,
    module_logs_dir,
    new_run_id,
    suite_logs_dir,
)

__all__ = [
    "ConfigError",
    "Environment",
    "LoggingEnvironment",
    "get_env",
    "get_logging_env",
    "reset_env_caches",
    "CONFIG_DIR",
    "PROJECT_ROOT",
    "RUN_ID_FORMAT",
    "logs_dir",
    "module_logs_dir",
    "new_run_id",
    "suite_logs_dir",
]
