"""Run the API with uvicorn: ``python -m app``."""

import uvicorn

from app.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=settings.app_env == "development",
        log_config=None,
    )


if __name__ == "__main__":
    main()
