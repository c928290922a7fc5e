"""Tests for the command line admin tool."""

import json

import pytest

from warzone_fishing.cli.main import build_parser, main


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "rewards.json"
    path.write_text(
        json.dumps(
            {
                "settings": {"claim-plugin": "all"},
                "rewards": {
                    "cod": {"material": "RAW_FISH", "weight": 3, "display-name": "&7Cod"},
                    "apple": {
                        "material": "GOLDEN_APPLE",
                        "weight": 1,
                        "rarity": "EPIC",
                        "lore": ["&5Shiny"],
                        "commands": ["say {player}"],
                    },
                },
            }
        )
    )
    return str(path)


class TestParser:
    def test_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_roll_defaults(self):
        args = build_parser().parse_args(["roll"])
        assert args.actor == "console"
        assert args.count == 1
        assert args.config is None
        assert args.verbose == 0


class TestCommands:
    def test_list(self, config_path, capsys):
        assert main(["list", "--config", config_path]) == 0
        out = capsys.readouterr().out
        assert "• apple - Chance: 1.00 - Rarity: EPIC" in out
        assert "Total: 2 rewards, weight 4.00" in out
        assert "§" not in out

    def test_list_by_rarity(self, config_path, capsys):
        assert main(["list", "--config", config_path, "--rarity", "epic"]) == 0
        out = capsys.readouterr().out
        assert "apple" in out
        assert "cod" not in out

    def test_list_unknown_rarity(self, config_path, capsys):
        assert main(["list", "--config", config_path, "--rarity", "mythic"]) == 1
        assert "Unknown rarity" in capsys.readouterr().out

    def test_preview(self, config_path, capsys):
        assert main(["preview", "APPLE", "--config", config_path]) == 0
        out = capsys.readouterr().out
        assert "Material: GOLDEN_APPLE x1" in out
        assert "Rarity: EPIC" in out
        assert "Shiny" in out
        assert "/say {player}" in out

    def test_preview_unknown(self, config_path, capsys):
        assert main(["preview", "boot", "--config", config_path]) == 1
        assert "Reward not found: boot" in capsys.readouterr().out

    def test_roll_once(self, config_path, capsys):
        assert main(["roll", "--config", config_path, "--actor", "Steve", "--seed", "4"]) == 0
        assert "Steve caught" in capsys.readouterr().out

    def test_roll_many(self, config_path, capsys):
        assert main(["roll", "--config", config_path, "--count", "50", "--seed", "4"]) == 0
        out = capsys.readouterr().out
        assert "50 rolls for console" in out
        assert "cod:" in out

    def test_roll_bad_count(self, config_path):
        assert main(["roll", "--config", config_path, "--count", "0"]) == 1

    def test_roll_empty_catalog(self, tmp_path, capsys):
        path = tmp_path / "empty.json"
        path.write_text("{}")
        assert main(["roll", "--config", str(path)]) == 1
        assert "No reward available" in capsys.readouterr().out

    def test_odds(self, config_path, capsys):
        assert main(["odds", "--config", config_path, "--simulate", "1000", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Level: 1" in out
        assert "simulated" in out
        assert "COMMON: 70.073%" in out

    def test_info(self, config_path, capsys):
        assert main(["info", "--config", config_path]) == 0
        out = capsys.readouterr().out
        assert "Rewards: 2" in out
        assert "HeadHunting: disabled" in out

    def test_missing_config(self, tmp_path, capsys):
        assert main(["info", "--config", str(tmp_path / "nope.json")]) == 1
        assert "Error" in capsys.readouterr().out

    def test_default_config(self, capsys):
        assert main(["info"]) == 0
        assert "Rewards: 12" in capsys.readouterr().out

    def test_test_catch(self, config_path, capsys):
        assert main(["test", "Steve", "--config", config_path, "--seed", "4"]) == 0
        out = capsys.readouterr().out
        assert "Catch for Steve" in out
        assert "Title: Fish Caught!" in out
        assert "§" not in out

    def test_test_catch_out_of_zone(self, tmp_path, capsys):
        path = tmp_path / "zoned.json"
        path.write_text(
            json.dumps(
                {
                    "settings": {"claim-plugin": "none", "allowed-worlds": ["warzone"]},
                    "rewards": {"cod": {"material": "RAW_FISH"}},
                }
            )
        )
        assert main(["test", "Steve", "--config", str(path), "--world", "lobby"]) == 1
        assert "lobby is not a fishing zone" in capsys.readouterr().out
        assert main(["test", "Steve", "--config", str(path), "--world", "warzone"]) == 0
