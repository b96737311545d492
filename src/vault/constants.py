from pathlib import Path

class Constants:
    VAULT_HOME = Path.home() / Path(".vault/")
    CONFIG_FILE = VAULT_HOME / Path("config.toml")

    SECONDS_PER_DAY = 86400
    MAX_OWNERS = 250

    FIRST_SEQUENCE_ID = 1
    SEQUENCE_WINDOW = 0

    OkCode = 0
    ErrorCode = 1
    NotFoundCode = 2
