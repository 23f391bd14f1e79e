import uvicorn

from hse_bridge.config import settings


def run() -> None:
    uvicorn.run(
        "hse_bridge.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
