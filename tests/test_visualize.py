import os

from visualize import generate_all_charts


def test_generate_all_charts(tmp_path) -> None:
    results = {
        "summary": {
            "significance_threshold": 2,
            "champions": [{"champion": "Kai'Sa", "matches_played": 3, "wins": 2}],
        },
        "profiles": {
            "Kai'Sa": {
                "matches_played": 3,
                "wins": 2,
                "allies": {"Nautilus": {"wins": 1, "matches": 1, "win_rate": 1.0, "win_chance": 0.8}},
                "enemies": {
                    "Zed": {"wins": 2, "matches": 3, "win_rate": 2 / 3, "win_chance": 2 / 3},
                    "Ahri": {"wins": 0, "matches": 2, "win_rate": 0.0, "win_chance": 0.0},
                },
            },
        },
    }

    paths = generate_all_charts(results, str(tmp_path))

    names = sorted(os.path.basename(path) for path in paths)
    assert names == ["Kai_Sa_enemies.png", "champion_matches.png"]
    assert all(os.path.getsize(path) > 0 for path in paths)
