import uvicorn

from contact_api.platform.config import settings


def main() -> None:
    uvicorn.run("contact_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
