APP_NAME = "dirmark"
ENV_PREFIX = "DIRMARK_"
CONFIG_ENV_PREFIX = f"{ENV_PREFIX}CONFIG__"

DEFAULT_STORE_DIR_NAME = ".goto"
