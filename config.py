import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Data files
    inventory_file: str = os.getenv("LIBRANET_INVENTORY_FILE", "inventory.txt")
    borrowed_file: str = os.getenv("LIBRANET_BORROWED_FILE", "borrowed.txt")
    error_log_file: str = os.getenv("LIBRANET_ERROR_LOG", "errors.log")

    # Lending policy
    loan_days: int = int(os.getenv("LIBRANET_LOAN_DAYS", "7"))
    demo_user_id: str = os.getenv("LIBRANET_DEMO_USER", "U001")
    reject_duplicate_ids: bool = _env_flag("LIBRANET_REJECT_DUPLICATE_IDS")

    # CLI
    output_mode: str = os.getenv("LIBRANET_OUTPUT", "plain")
    app_name: str = os.getenv("APP_NAME", "LibraNet System")
    debug: bool = _env_flag("DEBUG")


settings = Settings()
