"""Application entry point for the CHAMPIONS portal backend."""

from champions.app import App
from champions.config import Config
from champions.logging import setup_logging
from champions.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
