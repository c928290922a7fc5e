"""Command line admin tool for warzone fishing rewards."""

from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from typing import Optional

from warzone_fishing.analysis.odds import rarity_breakdown, selection_probabilities, simulate_draws
from warzone_fishing.data import load_config
from warzone_fishing.display import theme
from warzone_fishing.game.capabilities import ProviderRegistry
from warzone_fishing.game.manager import RewardManager
from warzone_fishing.game.trigger import TriggerFlow, TriggerStatus
from warzone_fishing.models.actor import Location
from warzone_fishing.models.rarity import RarityTier

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(verbose: int = 0) -> None:
    """Send log records to stderr; -v for INFO, -vv for DEBUG."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, stream=sys.stderr)


def _echo(message: str) -> None:
    print(theme.strip_color(message))


def _build_manager(args: argparse.Namespace) -> RewardManager:
    return RewardManager(
        config=load_config(args.config),
        registry=ProviderRegistry.from_entry_points(),
        seed=getattr(args, "seed", None),
    )


def cmd_list(manager: RewardManager, args: argparse.Namespace) -> int:
    if args.rarity:
        rewards = manager.rewards_by_rarity(RarityTier.parse(args.rarity))
    else:
        rewards = list(manager.catalog)

    _echo(theme.header("Fishing Rewards"))
    for reward in rewards:
        _echo(theme.list_entry(reward))
    _echo(f"&7Total: &b{len(rewards)} &7rewards, weight &b{manager.total_weight:.2f}")
    _echo(theme.footer())
    return 0


def cmd_preview(manager: RewardManager, args: argparse.Namespace) -> int:
    reward = manager.get_reward(args.reward_id)
    if reward is None:
        _echo(theme.prefixed(f"&cReward not found: {args.reward_id}"))
        return 1

    payload = reward.payload
    _echo(theme.header(f"Preview: {reward.id}"))
    _echo(f"&7Name: &f{theme.item_display_name(reward)}")
    _echo(f"&7Type: &b{payload.type.value}")
    if payload.material:
        _echo(f"&7Material: &b{payload.material} &7x{payload.amount}")
    _echo(f"&7Rarity: {theme.format_rarity(reward.rarity)}")
    _echo(f"&7Chance: &b{reward.base_weight:.2f}")
    if reward.required_level:
        _echo(f"&7Required level: &b{reward.required_level}")
    if reward.requires_special_ability:
        _echo(f"&7Requires: &b{manager.engine.config.gate_key}")
    for line in payload.lore:
        _echo(f"  &5{line}")
    for name, level in payload.enchantments.items():
        _echo(f"  &7{name} {level}")
    for command in payload.commands:
        _echo(f"  &8/{command}")
    _echo(theme.footer())
    return 0


def cmd_roll(manager: RewardManager, args: argparse.Namespace) -> int:
    if args.count < 1:
        _echo(theme.prefixed("&cCount must be at least 1"))
        return 1

    tally: Counter[str] = Counter()
    for _ in range(args.count):
        reward = manager.select(args.actor)
        if reward is None:
            _echo(theme.prefixed("&cNo reward available"))
            return 1
        tally[reward.id] += 1
        if args.count == 1:
            _echo(theme.prefixed(f"&b{args.actor} &fcaught {theme.item_display_name(reward)}"
                                 f" &7({reward.rarity.value})"))

    if args.count > 1:
        _echo(theme.header(f"{args.count} rolls for {args.actor}"))
        for reward_id, hits in tally.most_common():
            _echo(f"&f{reward_id}&7: &b{hits}")
        _echo(theme.footer())
    return 0


def cmd_test(manager: RewardManager, args: argparse.Namespace) -> int:
    flow = TriggerFlow(manager)
    location = Location(world=args.world, x=args.x, y=args.y, z=args.z)
    outcome = flow.handle(args.actor, location, bypass_cooldown=True)

    if outcome.status == TriggerStatus.OUT_OF_ZONE:
        _echo(theme.prefixed(f"&c{args.world} is not a fishing zone"))
        return 1
    if outcome.delivery is None:
        _echo(theme.prefixed("&cNo reward available"))
        return 1

    delivery = outcome.delivery
    _echo(theme.header(f"Catch for {delivery.player}"))
    _echo(f"&7Reward: &f{delivery.reward.id} &7({delivery.reward.rarity.value})")
    _echo(f"&7Title: {delivery.title}")
    _echo(f"&7Subtitle: {delivery.subtitle}")
    if delivery.broadcast:
        _echo(f"&7Broadcast: {delivery.broadcast}")
    if delivery.action_bar:
        _echo(f"&7Action bar: {delivery.action_bar}")
    for command in delivery.commands:
        _echo(f"  &8/{command}")
    _echo(theme.footer())
    return 0


def cmd_odds(manager: RewardManager, args: argparse.Namespace) -> int:
    snap = manager.snapshot
    state = snap.engine.actor_state(args.actor, snap.bridge)
    probabilities = selection_probabilities(snap.catalog, state, snap.engine)

    _echo(theme.header(f"Odds for {args.actor}"))
    _echo(f"&7Level: &b{state.level} &7Gate ability: &b{state.has_gate_ability}")
    simulated = None
    if args.simulate:
        simulated = simulate_draws(snap.catalog, state, snap.engine, args.simulate, args.seed)
    for reward in snap.catalog:
        line = f"&f{reward.id}&7: &b{probabilities[reward.id] * 100:.3f}%"
        if simulated is not None:
            line += f" &7(simulated {simulated[reward.id] / args.simulate * 100:.3f}%)"
        _echo(line)
    for tier, p in rarity_breakdown(snap.catalog, probabilities).items():
        _echo(f"{theme.format_rarity(tier)}&7: &b{p * 100:.3f}%")
    _echo(theme.footer())
    return 0


def cmd_info(manager: RewardManager, args: argparse.Namespace) -> int:
    _echo(theme.header("Warzone Fishing"))
    _echo(f"&7Rewards: &b{manager.reward_count}")
    _echo(f"&7Total weight: &b{manager.total_weight:.2f}")
    _echo(f"&7Claim plugin: &b{manager.settings.claim_plugin}")
    status = "enabled" if manager.bridge.enabled else "disabled"
    _echo(f"&7{manager.bridge.name}: &b{status}")
    if manager.last_load.failed:
        _echo(f"&cFailed entries: {manager.last_load.failed}")
    _echo(theme.footer())
    return 0


def cmd_serve(manager: RewardManager, args: argparse.Namespace) -> int:
    import uvicorn

    from warzone_fishing.api.app import create_app
    from warzone_fishing.api.settings import get_settings

    settings = get_settings()
    if args.config:
        settings = settings.model_copy(update={"config_path": args.config})
    app = create_app(manager, settings)
    uvicorn.run(app, host=args.host or settings.host, port=args.port or settings.port)
    return 0


COMMANDS = {
    "list": cmd_list,
    "preview": cmd_preview,
    "roll": cmd_roll,
    "test": cmd_test,
    "odds": cmd_odds,
    "info": cmd_info,
    "serve": cmd_serve,
}


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, default=None, help="Rewards file (JSON or YAML)")
    common.add_argument("-v", "--verbose", action="count", default=0, help="More log output")

    parser = argparse.ArgumentParser(
        prog="warzone-fishing", description="Inspect and test warzone fishing rewards"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", parents=[common], help="List configured rewards")
    p_list.add_argument("--rarity", type=str, default=None, help="Only show one rarity tier")

    p_preview = sub.add_parser("preview", parents=[common], help="Show one reward in detail")
    p_preview.add_argument("reward_id", help="Reward id (case-insensitive)")

    p_roll = sub.add_parser("roll", parents=[common], help="Draw rewards for an actor")
    p_roll.add_argument("--actor", type=str, default="console", help="Actor name")
    p_roll.add_argument("--count", type=int, default=1, help="Number of draws")
    p_roll.add_argument("--seed", type=int, default=None, help="Random seed")

    p_test = sub.add_parser("test", parents=[common], help="Run a full catch for an actor")
    p_test.add_argument("actor", help="Actor name")
    p_test.add_argument("--world", type=str, default="world", help="World the hook landed in")
    p_test.add_argument("--x", type=float, default=0.0)
    p_test.add_argument("--y", type=float, default=64.0)
    p_test.add_argument("--z", type=float, default=0.0)
    p_test.add_argument("--seed", type=int, default=None, help="Random seed")

    p_odds = sub.add_parser("odds", parents=[common], help="Show selection odds for an actor")
    p_odds.add_argument("--actor", type=str, default="console", help="Actor name")
    p_odds.add_argument("--simulate", type=int, default=0, help="Also simulate N draws")
    p_odds.add_argument("--seed", type=int, default=None, help="Simulation seed")

    sub.add_parser("info", parents=[common], help="Show plugin status")

    p_serve = sub.add_parser("serve", parents=[common], help="Run the admin HTTP API")
    p_serve.add_argument("--host", type=str, default=None, help="Bind address")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        manager = _build_manager(args)
        return COMMANDS[args.command](manager, args)
    except (OSError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        _echo(theme.prefixed(f"&cError: {e}"))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
