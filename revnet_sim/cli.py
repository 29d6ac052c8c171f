"""Command line interface for single runs and parameter sweeps."""

import argparse
from typing import Any, Dict, List, Optional

import polars as pl

from .analysis import analyze_results, calculate_return_distribution
from .config import SCENARIOS, InvalidParameterError, SimulationConfig
from .core import RevnetMarketModel, RevnetSimulation
from .metrics import calculate_venue_breakdown, calculate_weekly_aggregates


def build_config(
    scenario: str = "default",
    calibration_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SimulationConfig:
    """Build a config from a calibration file or named scenario, then apply overrides."""
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    if calibration_file:
        return SimulationConfig.from_calibration_file(
            calibration_file, overrides={"simulation_config": overrides}
        )
    return SimulationConfig.create_scenario(scenario, **overrides)


def run_parameter_sweep(
    tax_intensities: List[float],
    ceiling_increases: List[float],
    seeds: List[int],
    scenario: str = "default",
    days: Optional[int] = None,
) -> pl.DataFrame:
    """Run every combination of tax intensity, ceiling increase and seed."""
    combos = [
        (tax, ceiling, seed)
        for tax in tax_intensities
        for ceiling in ceiling_increases
        for seed in seeds
    ]
    total_runs = len(combos)
    print(f"Running {total_runs} parameter combinations")

    rows = []
    for i, (tax, ceiling, seed) in enumerate(combos, 1):
        print(f"[{i}/{total_runs}] tax={tax}, ceiling_increase={ceiling}, seed={seed}")
        try:
            config = build_config(scenario, overrides={
                "price_floor_tax_intensity": tax,
                "price_ceiling_increase_percentage": ceiling,
                "random_seed": seed,
                "days_to_calculate": days,
            })
            results = RevnetSimulation(config).run()
        except InvalidParameterError as e:
            print(f"  Skipped: {e}")
            continue

        analysis = analyze_results(results)
        returns = calculate_return_distribution(results)
        rows.append({
            "price_floor_tax_intensity": tax,
            "price_ceiling_increase_percentage": ceiling,
            "random_seed": seed,
            "final_eth_balance": analysis.get("final_eth_balance", 0.0),
            "final_token_supply": analysis.get("final_token_supply", 0.0),
            "final_price_floor": analysis.get("final_price_floor", 0.0),
            "final_pool_token_price": analysis.get("final_pool_token_price"),
            "purchases_via_revnet_pct": analysis.get("purchases_via_revnet_pct"),
            "sales_via_revnet_pct": analysis.get("sales_via_revnet_pct"),
            "mean_return": returns["mean_return"],
            "profitable_share": returns["profitable_share"],
        })
        print(f"  Completed: treasury={analysis.get('final_eth_balance', 0.0):.2f} ETH")

    summary_df = pl.DataFrame(rows)
    if summary_df.height > 0:
        best_treasury = summary_df.sort("final_eth_balance", descending=True).head(1)
        best_return = summary_df.sort("mean_return", descending=True).head(1)
        print("\nTop performers:")
        print(f"   • Largest treasury: tax={best_treasury['price_floor_tax_intensity'].item()}, "
              f"ceiling_increase={best_treasury['price_ceiling_increase_percentage'].item()}")
        print(f"   • Best trader return: tax={best_return['price_floor_tax_intensity'].item()}, "
              f"ceiling_increase={best_return['price_ceiling_increase_percentage'].item()}")
    return summary_df


def _fmt(value: Optional[float], suffix: str = "", signed: bool = False) -> str:
    if value is None:
        return "n/a"
    sign = "+" if signed and value > 0 else ""
    return f"{sign}{value:,.2f}{suffix}"


def run_single(config: SimulationConfig, weekly: bool = False) -> Dict[str, Any]:
    """Run one simulation and print the summary table."""
    print(f"Running Revnet simulation for {config.days_to_calculate} days (seed {config.random_seed})")

    results = RevnetSimulation(config).run()
    analysis = analyze_results(results)
    if not analysis:
        print("No days simulated")
        return analysis

    print("\nFinal Revnet:")
    print(f"   • Treasury: {_fmt(analysis['final_eth_balance'], ' ETH')}")
    print(f"   • Token Supply: {_fmt(analysis['final_token_supply'])}")
    print(f"   • Price Ceiling: {_fmt(analysis['final_price_ceiling'], ' ETH')}")
    print(f"   • Price Floor: {_fmt(analysis['final_price_floor'], ' ETH')}")
    print(f"   • Tokens Sent to Boost: {_fmt(analysis['final_tokens_sent_to_boost'])}")

    print("\nFinal Pool:")
    print(f"   • ETH: {_fmt(analysis['final_pool_eth'])}")
    print(f"   • Tokens: {_fmt(analysis['final_pool_token'])}")
    print(f"   • Token Price: {_fmt(analysis['final_pool_token_price'], ' ETH')}")

    print("\nTraders:")
    print(f"   • Average Return: {_fmt(analysis['avg_return'], ' ETH', signed=True)}")
    print(f"   • Purchase Count: {analysis['purchase_count']}")
    print(f"   • Purchases via Revnet: {analysis['purchases_via_revnet']} "
          f"({_fmt(analysis['purchases_via_revnet_pct'], '%')})")
    print(f"   • Average Purchase Size: {_fmt(analysis['avg_purchase_size'], ' ETH')}")
    print(f"   • Sale Count: {analysis['sale_count']} ({analysis['voided_sale_count']} voided)")
    print(f"   • Sales via Revnet: {analysis['sales_via_revnet']} "
          f"({_fmt(analysis['sales_via_revnet_pct'], '%')})")
    print(f"   • Average Sale Size: {_fmt(analysis['avg_sale_size'], ' ETH')}")
    print(f"   • Average Days Held: {_fmt(analysis['avg_days_held'])}")

    breakdown = calculate_venue_breakdown(results.traders)
    if breakdown.height > 0:
        print("\nVenue breakdown:")
        print(breakdown)

    if weekly:
        print("\nWeekly aggregates:")
        print(pl.DataFrame(calculate_weekly_aggregates(results.snapshots)))

    return analysis


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--scenario', default='default', choices=list(SCENARIOS.keys()),
                        help='Named scenario preset')
    parser.add_argument('--config', dest='calibration_file', default=None,
                        help='JSON calibration file ({"simulation_config": {...}})')
    parser.add_argument('--days', type=int, default=None, help='Days to simulate')
    parser.add_argument('--seed', type=int, default=None, help='Base random seed')
    parser.add_argument('--day-deployed', type=int, default=None, help='Day the pool joins routing')
    parser.add_argument('--initial-eth', type=float, default=None, help='Initial pool ETH')
    parser.add_argument('--initial-token', type=float, default=None, help='Initial pool tokens')
    parser.add_argument('--lambda', dest='daily_purchases_lambda', type=float, default=None,
                        help='Mean daily buyers')
    parser.add_argument('--sale-probability', type=float, default=None, help='Daily sale probability')


def _config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        'days_to_calculate': args.days,
        'random_seed': args.seed,
        'day_deployed': args.day_deployed,
        'initial_eth': args.initial_eth,
        'initial_token': args.initial_token,
        'daily_purchases_lambda': args.daily_purchases_lambda,
        'sale_probability': args.sale_probability,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="Revnet vs. AMM Simulation CLI")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    single_parser = subparsers.add_parser('single', help='Run a single simulation')
    _add_config_arguments(single_parser)
    single_parser.add_argument('--weekly', action='store_true', help='Print weekly aggregates')

    sweep_parser = subparsers.add_parser('sweep', help='Sweep tax intensity and ceiling increase')
    sweep_parser.add_argument('--scenario', default='default', choices=list(SCENARIOS.keys()),
                              help='Base scenario')
    sweep_parser.add_argument('--days', type=int, default=None, help='Days to simulate')
    sweep_parser.add_argument('--tax-intensity', nargs='+', type=float,
                              default=[0.0, 0.3, 0.7, 1.0],
                              help='Price floor tax intensities')
    sweep_parser.add_argument('--ceiling-increase', nargs='+', type=float,
                              default=[0.01, 0.05, 0.1],
                              help='Price ceiling increase percentages')
    sweep_parser.add_argument('--seeds', nargs='+', type=int, default=[2], help='Random seeds')

    subparsers.add_parser('scenarios', help='List available scenarios')

    test_parser = subparsers.add_parser('test', help='Smoke-test the AgentPy model')
    test_parser.add_argument('--steps', type=int, default=30, help='Number of days to step')

    args = parser.parse_args(argv)

    if args.command == 'single':
        try:
            config = build_config(args.scenario, args.calibration_file, _config_overrides(args))
            config.validate()
        except (InvalidParameterError, FileNotFoundError) as e:
            print(f"Invalid configuration: {e}")
            return 2
        run_single(config, weekly=args.weekly)
    elif args.command == 'sweep':
        try:
            build_config(args.scenario, overrides={'days_to_calculate': args.days}).validate()
        except InvalidParameterError as e:
            print(f"Invalid configuration: {e}")
            return 2
        summary = run_parameter_sweep(
            tax_intensities=args.tax_intensity,
            ceiling_increases=args.ceiling_increase,
            seeds=args.seeds,
            scenario=args.scenario,
            days=args.days,
        )
        if summary.height > 0:
            print()
            print(summary)
    elif args.command == 'scenarios':
        print("Available scenarios:\n")
        for name, overrides in SCENARIOS.items():
            print(f"{name}")
            if not overrides:
                print("   • (defaults)")
            for key, value in overrides.items():
                print(f"   • {key}: {value}")
            print()
    elif args.command == 'test':
        print("Testing AgentPy integration...")

        config = SimulationConfig(days_to_calculate=args.steps)
        model = RevnetMarketModel(config.to_agentpy_params())
        model.sim_setup(steps=args.steps)
        while model.running:
            model.sim_step()

        print(f"Successfully ran {args.steps} steps")
        print(f"Collected {len(model.snapshots)} snapshots")
        print(f"Final treasury: {model.revnet.eth_balance:.2f} ETH")
        print("AgentPy integration working!")
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
