"""
Sidejack Command Line Interface.

Commands: signatures, sessionize, replay, simulate, demo, serve
"""

from __future__ import annotations

import json
import logging
import time

import click
import numpy as np

from .alerts import AlertLog
from .detection import AddressBindingTable
from .engine import DetectorConfig, SidejackDetector
from .exceptions import ConfigError
from .session import Connection, Sighting


def _load_config(path: str | None) -> DetectorConfig:
    if not path:
        return DetectorConfig()
    try:
        return DetectorConfig.load(path)
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint="--config") from exc


def _print_alerts(log: AlertLog, limit: int = 20) -> None:
    for a in log.recent(limit):
        click.echo(f"  [{a['kind']}] {a['message']}")


@click.group()
@click.version_option(version="0.1.0")
@click.option("--log-level", default="WARNING",
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging verbosity")
def cli(log_level: str):
    """Sidejack: session-cookie hijacking detection"""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command()
@click.option("--config", "config_file", default=None,
              type=click.Path(exists=True, dir_okay=False), help="YAML configuration file")
def signatures(config_file: str):
    """List the service signature catalog."""
    config = _load_config(config_file)
    click.echo(f"--- Service Signatures ({len(config.signatures)}) ---")
    for sig in config.signatures:
        d = sig.to_dict()
        keys = ", ".join(d.get("keys", [])) or "-"
        click.echo(f"  {d['description']:14s} host=/{d['host']}/ keys={keys}"
                   + (f" pattern=/{d['key_pattern']}/" if "key_pattern" in d else ""))


@cli.command()
@click.option("--host", required=True, help="Host header value")
@click.option("--cookie", required=True, help="Raw cookie header value")
@click.option("--config", "config_file", default=None,
              type=click.Path(exists=True, dir_okay=False), help="YAML configuration file")
def sessionize(host: str, cookie: str, config_file: str):
    """Reduce a cookie to its canonical session identifier."""
    detector = SidejackDetector(config=_load_config(config_file))
    result = detector.canonicalize(host, cookie)
    if result is None:
        click.echo("[-] No session recognized")
        return
    canonical, service = result
    click.echo(f"Service:   {service}")
    click.echo(f"Canonical: {canonical}")


@cli.command()
@click.argument("sightings_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_file", default=None,
              type=click.Path(exists=True, dir_okay=False), help="YAML configuration file")
def replay(sightings_file: str, config_file: str):
    """Replay JSON-lines cookie sightings through the detector."""
    log = AlertLog()
    detector = SidejackDetector(
        config=_load_config(config_file),
        resolver=AddressBindingTable(),
        sink=log,
    )

    processed = 0
    with open(sightings_file) as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                rec = json.loads(line)
            except json.JSONDecodeError as exc:
                raise click.ClickException(f"line {lineno}: {exc}") from exc
            if not isinstance(rec, dict):
                raise click.ClickException(f"line {lineno}: expected a JSON object")
            ts = rec.get("timestamp", time.time())
            if isinstance(ts, bool) or not isinstance(ts, (int, float)):
                raise click.ClickException(f"line {lineno}: timestamp must be a number")
            if "hardware_id" in rec and rec.get("client_address"):
                detector.resolver.learn(rec["client_address"], rec["hardware_id"])
            detector.process(Sighting(
                connection=Connection(
                    uid=rec.get("uid", f"L{lineno}"),
                    client_address=rec.get("client_address", ""),
                ),
                host=rec.get("host", ""),
                cookie=rec.get("cookie", ""),
                user_agent=rec.get("user_agent", ""),
                timestamp=float(ts),
            ))
            processed += 1

    stats = detector.stats()
    click.echo(f"[+] Replayed {processed} sightings")
    click.echo(f"    Outcomes: {json.dumps(stats['outcomes'])}")
    click.echo(f"    Dropped:  {stats['dropped']}")
    click.echo(f"\n--- Alerts ({len(log)}, {log.suppressed} suppressed) ---")
    _print_alerts(log)


@cli.command()
@click.option("--sessions", default=20, help="Number of legitimate sessions")
@click.option("--sightings", default=500, help="Number of cookie sightings")
@click.option("--hijack-rate", default=0.02, help="Probability a sighting is an attacker replay")
@click.option("--seed", default=42, help="Random seed")
def simulate(sessions: int, sightings: int, hijack_rate: float, seed: int):
    """Run synthetic traffic with injected hijacks through the detector."""
    click.echo(f"[*] Simulating {sightings} sightings across {sessions} sessions...")

    np_rng = np.random.RandomState(seed)
    log = AlertLog()
    detector = SidejackDetector(sink=log)
    agents = ["Mozilla/5.0 (X11; Linux x86_64) Firefox/128.0",
              "Mozilla/5.0 (Macintosh) Safari/605.1.15",
              "Mozilla/5.0 (Windows NT 10.0) Chrome/126.0"]

    owners = []
    for i in range(sessions):
        owners.append({
            "address": f"10.0.{np_rng.randint(1, 10)}.{np_rng.randint(1, 254)}",
            "agent": agents[np_rng.randint(len(agents))],
            "cookie": f"c_user={100000 + i}; xs={np_rng.randint(1 << 30):x}; datr=t{i}",
        })

    now = time.time()
    injected = 0
    for n in range(sightings):
        now += float(np_rng.exponential(30.0))
        owner = owners[np_rng.randint(sessions)]
        address, agent = owner["address"], owner["agent"]
        if np_rng.rand() < hijack_rate:
            address = f"192.0.2.{np_rng.randint(1, 254)}"
            agent = "Mozilla/5.0 (attacker) Firefox/115.0"
            injected += 1
        detector.process(Sighting(
            connection=Connection(uid=f"S{n:05d}", client_address=address),
            host="www.facebook.com",
            cookie=owner["cookie"],
            user_agent=agent,
            timestamp=now,
        ))

    stats = detector.stats()
    click.echo(f"\n--- Simulation Results ---")
    click.echo(f"Injected hijacks:   {injected}")
    click.echo(f"Hijack outcomes:    {stats['outcomes']['hijack']}")
    click.echo(f"Alerts delivered:   {len(log)} ({log.suppressed} suppressed)")
    click.echo(f"Tracked sessions:   {stats['tracked_sessions']}")
    _print_alerts(log, 5)


@cli.command()
def demo():
    """Walk through the reuse, hijack and roaming scenarios."""
    click.echo("=" * 60)
    click.echo("  Sidejack  -  Detection Demo")
    click.echo("=" * 60)

    cookie = "c_user=1001; xs=49%3Aabc; datr=xyz; locale=en_US"
    t0 = time.time()

    def run(title, detector, steps):
        click.echo(f"\n{title}")
        for i, (address, agent) in enumerate(steps):
            verdict = detector.process(Sighting(
                connection=Connection(uid=f"C{i}", client_address=address),
                host="www.facebook.com", cookie=cookie,
                user_agent=agent, timestamp=t0 + i * 60,
            ))
            click.echo(f"    {address:10s} {agent:8s} -> {verdict.outcome.value}")

    log = AlertLog()
    run("[1/4] Same address, new browser (reuse)",
        SidejackDetector(sink=log), [("10.0.0.1", "AgentX"), ("10.0.0.1", "AgentY")])
    run("[2/4] New address, new browser (hijack)",
        SidejackDetector(sink=log), [("10.0.0.1", "AgentX"), ("10.0.0.2", "AgentY")])

    bindings = AddressBindingTable()
    bindings.learn("10.0.0.1", "00:16:3e:aa:bb:cc")
    bindings.learn("10.0.0.2", "00:16:3e:aa:bb:cc")
    run("[3/4] New address, same host (roam, aliasing on)",
        SidejackDetector(DetectorConfig(aliasing_enabled=True), resolver=bindings, sink=log),
        [("10.0.0.1", "AgentX"), ("10.0.0.2", "AgentX")])
    run("[4/4] New address, same browser (aliasing off)",
        SidejackDetector(sink=log), [("10.0.0.1", "AgentX"), ("10.0.0.2", "AgentX")])

    click.echo(f"\n--- Alerts ({len(log)}) ---")
    _print_alerts(log)
    click.echo("\n" + "=" * 60)
    click.echo("  Demo complete.")
    click.echo("=" * 60)


@cli.command()
@click.option("--host", default="127.0.0.1", help="API host")
@click.option("--port", default=5000, help="API port")
@click.option("--config", "config_file", default=None,
              type=click.Path(exists=True, dir_okay=False), help="YAML configuration file")
def serve(host: str, port: int, config_file: str):
    """Launch the REST API."""
    from .api import create_app

    click.echo(f"[*] Starting Sidejack API on {host}:{port}")
    app = create_app(config=_load_config(config_file))
    app.run(host=host, port=port)


def main():
    cli()


if __name__ == "__main__":
    main()
