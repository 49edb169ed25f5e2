#!/usr/bin/env python3
"""
Seed the database with demo posts spread over the last few months.

Usage:
  python scripts/seed.py
  python scripts/seed.py --count 25 --months 3

Older posts are swept into the archive the next time the active list is read,
which makes this handy for trying out the archive view.
"""

from __future__ import annotations

import argparse
import os
import random
import sys
from datetime import timedelta

# Allow running from repo root
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from dotenv import load_dotenv

from loggen import create_app
from loggen.models import LogMessage, db
from loggen.policy import utcnow_naive

load_dotenv()

AUTHORS = ["Anna", "Erik", "Maria", "Johan", "Lisa", "Oscar", "Emma", "Karl"]
TITLES = [
    "Ny rutin för morgonmöten",
    "Uppdatering av systemet",
    "Viktig information",
    "Semesterplanering",
    "Städdag på kontoret",
    "Ny kollega börjar",
    "Feedback från kunder",
    "Projektuppdatering",
    "Fikapaus kl 15",
    "Kontorsflytt nästa vecka",
]
MESSAGES = [
    "Kom ihåg att läsa igenom dokumentet innan mötet imorgon.",
    "Vi har uppdaterat rutinerna, se bifogad fil för mer info.",
    "Tack för ert hårda arbete den senaste tiden!",
    "Glöm inte att registrera era timmar innan fredag.",
    "Mötet flyttas till rum 3B istället.",
    "Alla behöver signera den nya policyn.",
    "Grattis till teamet för ett lyckat projekt!",
    "Påminnelse om att låsa dörren när ni går.",
    "Ny kaffemaskin har installerats i fikarummet.",
    "Tack för en bra vecka allihop!",
]


def main():
    ap = argparse.ArgumentParser(description="Seed Loggen with demo posts")
    ap.add_argument("--count", type=int, default=10, help="Number of posts")
    ap.add_argument("--months", type=int, default=6, help="Spread over N months")
    args = ap.parse_args()

    app = create_app()
    with app.app_context():
        now = utcnow_naive()
        version = app.config.get("APP_VERSION", "0.0.0")
        for _ in range(max(0, args.count)):
            days_ago = random.randint(0, max(0, args.months) * 30)
            db.session.add(
                LogMessage(
                    title=random.choice(TITLES),
                    message=f"<p>{random.choice(MESSAGES)}</p>",
                    author=random.choice(AUTHORS),
                    version=version,
                    created_at=now - timedelta(days=days_ago, hours=random.randint(0, 23)),
                    pinned=False,
                    archived=False,
                )
            )
        db.session.commit()
        print(f"Seeded {args.count} post(s).")


if __name__ == "__main__":
    main()
