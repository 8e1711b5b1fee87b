# scripts/backfill_attribute_ratings.py
"""
Convert legacy profiles (perceived strengths/weaknesses only) to numeric
attribute ratings.

Reads a JSON file holding one profile object or a list of them (the shape
served by GET /users/profile/{email}) and prints, per profile, the
attribute_ratings string the questionnaire would write on its next submit.

    python -m scripts.backfill_attribute_ratings profiles.json
"""
import json
import sys
from typing import Dict, List

from app.models.questionnaire import default_rated_attributes
from app.models.user import UserProfileData
from app.services.attribute_ratings import (
    RatingSource,
    apply_ratings,
    rating_source,
    resolve_ratings,
    serialize_attribute_ratings,
)


def backfill(profiles: List[dict]) -> List[Dict[str, str]]:
    out = []
    for raw in profiles:
        profile = UserProfileData(**raw)
        source = rating_source(profile)
        if source is not RatingSource.LEGACY:
            continue
        attrs = apply_ratings(default_rated_attributes(), resolve_ratings(profile))
        out.append({
            "email": profile.email or "",
            "attribute_ratings": serialize_attribute_ratings(attrs),
        })
    return out


def run(path: str) -> int:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = [data]
    rows = backfill(data)
    for row in rows:
        print(json.dumps(row))
    print(f"Backfill complete: {len(rows)} legacy profile(s).", file=sys.stderr)
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: backfill_attribute_ratings.py <profiles.json>", file=sys.stderr)
        sys.exit(2)
    sys.exit(run(sys.argv[1]))
