import uvicorn

from .core.settings import settings


def main() -> None:
    uvicorn.run("loyalty_gateway.app:create_app", factory=True, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
