#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import random
from pathlib import Path

from installplan.core.calendar import date_key, iter_days, parse_day_key, week_of
from installplan.core.config import PLANNING_CONFIG
from installplan.core.roster import apply_team_pairs, pair_name

CLIENTS = [
    ("Comunidad Calle Mayor 12", "Calle Mayor 12", "Bilbao"),
    ("Residencial Los Olmos", "Av. de los Olmos 4", "Getxo"),
    ("Talleres Urbi", "Polígono Ugaldeguren 3", "Zamudio"),
    ("Colegio San Ignacio", "Plaza Indautxu 1", "Bilbao"),
    ("Hotel Abando", "Calle Colón de Larreátegui 9", "Bilbao"),
    ("Bodegas Txakoli", "Barrio Goitioltza 2", "Bakio"),
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample planning snapshot (works + teams)")
    parser.add_argument("--week", required=True, help="any day of the target week, format YYYY-MM-DD")
    parser.add_argument("--output", required=True, help="output file path (.json)")
    parser.add_argument("--works", type=int, default=12, help="number of pending work orders")
    parser.add_argument("--seed", type=int, default=7)
    args = parser.parse_args()

    rng = random.Random(args.seed)
    week = week_of(parse_day_key(args.week))
    installers = list(PLANNING_CONFIG.installers)
    pairs = [pair_name(installers[i], installers[i + 1]) for i in range(0, len(installers) - 1, 2)][:3]
    teams = apply_team_pairs({}, date_key(week[0]), date_key(week[4]), pairs)

    works = []
    for index in range(args.works):
        client, address, city = CLIENTS[index % len(CLIENTS)]
        total_days = rng.choice([1, 1, 2, 3])
        works.append({
            "id": f"wo-{index + 1:05d}",
            "code": f"{'M' if index % 3 else 'R'}-{week[0].year}{index + 1:03d}",
            "client": client,
            "address": address,
            "city": city,
            "coordinates": {"x": round(rng.uniform(0, 100), 1), "y": round(rng.uniform(0, 100), 1)},
            "dateAccepted": date_key(week[0]),
            "totalDays": total_days,
            "currentDay": 1,
            "fractionOfDay": rng.choice([0.25, 0.5, 0.75, 1.0]),
            "status": "pending",
            "type": "Montaje (M)" if index % 3 else "Revisión (R)",
        })

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps({"works": works, "teams": teams}, ensure_ascii=False, indent=2), encoding="utf-8")

    days = list(iter_days(date_key(week[0]), date_key(week[4])))
    print(f"sample plan written to {output}: {len(works)} works, {len(pairs)} teams on {len(days)} days")


if __name__ == "__main__":
    main()
