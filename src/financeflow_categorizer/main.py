import os

import uvicorn

from financeflow_categorizer.core.settings import get_env_int
from financeflow_categorizer.logger import get_logging_config


def run() -> None:
    uvicorn.run(
        "financeflow_categorizer.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=get_env_int("PORT", 8000, min_value=1),
        log_config=get_logging_config(),
    )


if __name__ == "__main__":
    run()
