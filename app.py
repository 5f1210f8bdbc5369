from __future__ import annotations

from crashtodo import create_app
from crashtodo.logging_setup import setup_logging

setup_logging()

app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=5000, debug=True)
