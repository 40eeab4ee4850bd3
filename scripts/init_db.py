from __future__ import annotations

import importlib

from dotenv import load_dotenv

from account_service.config import get_settings_module
from account_service.database.bootstrap import apply_schema
from account_service.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_dict(dict(settings.DB_CONFIG))

    apply_schema(DatabaseConnection(config))
    print(f"OK: Applied schema.sql -> {config.user}@{config.host}:{config.port}/{config.database}")


if __name__ == "__main__":
    main()
