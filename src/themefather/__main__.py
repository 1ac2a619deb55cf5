"""Theme Father CLI entrypoint."""

from themefather.cli import app

if __name__ == "__main__":
    app()
