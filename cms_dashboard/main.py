import uvicorn

from cms_dashboard.configs.settings import settings
from cms_dashboard.configs.setup import create_app

app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "cms_dashboard.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.APP_ENV == "dev",
    )
