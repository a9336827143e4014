"""Run the API with uvicorn: ``python -m cms_backend``."""

import os

import uvicorn

from cms_backend.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    port = int(os.environ.get("PORT", 5000))
    if not settings.is_production:
        # Development mode - hot reload needs the import string
        uvicorn.run(
            "cms_backend.app:app",
            host="0.0.0.0",
            port=port,
            reload=True,
            log_level="debug",
        )
    else:
        # JSON files are single-process only
        uvicorn.run(
            "cms_backend.app:app",
            host="0.0.0.0",
            port=port,
            reload=False,
            workers=1,
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*",
        )
