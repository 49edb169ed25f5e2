"""
Loggen server entrypoint.

  gunicorn -w 2 -b 0.0.0.0:3001 loggen.wsgi:app
  python -m loggen.wsgi          # single-process, PORT defaults to 3001

Settings come from the environment; a `.env` in the working directory
is read first (LOGGEN_PASSWORD, LOGGEN_SECRET_KEY, DATABASE_URL, ...).
"""

import os

from dotenv import load_dotenv

from . import create_app

load_dotenv()

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", "3001")))
