"""
Flask REST API for Sidejack.

Accepts cookie sightings from a traffic sensor, exposes alerts, session
store statistics, the signature catalog and the address binding table.
"""

from __future__ import annotations

import time

from flask import Flask, jsonify, request

from ..alerts import AlertLog
from ..detection import AddressBindingTable
from ..engine import DetectorConfig, SidejackDetector
from ..session import Connection, Sighting


def create_app(
    detector: SidejackDetector | None = None,
    config: DetectorConfig | None = None,
) -> Flask:
    """Create and configure the Flask application."""

    app = Flask(__name__)

    if detector is None:
        detector = SidejackDetector(
            config=config,
            resolver=AddressBindingTable(),
            sink=AlertLog(),
        )

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "healthy", "timestamp": time.time()})

    # --- Sightings ---

    @app.route("/api/v1/sightings", methods=["POST"])
    def sightings():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"error": "JSON object required"}), 400
        address = data.get("client_address", "")
        cookie = data.get("cookie", "")
        if not address or not cookie:
            return jsonify({"error": "client_address and cookie required"}), 400

        text_fields = ("uid", "client_address", "cookie", "host", "user_agent", "server_address")
        bad = [f for f in text_fields if not isinstance(data.get(f, ""), str)]
        timestamp = data.get("timestamp", time.time())
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            bad.append("timestamp")
        if bad:
            return jsonify({"error": "invalid fields", "fields": bad}), 400

        sighting = Sighting(
            connection=Connection(
                uid=data.get("uid", ""),
                client_address=address,
                client_port=data.get("client_port", 0),
                server_address=data.get("server_address", ""),
                server_port=data.get("server_port", 80),
            ),
            host=data.get("host", ""),
            cookie=cookie,
            user_agent=data.get("user_agent", ""),
            timestamp=float(timestamp),
        )
        verdict = detector.process(sighting)
        if verdict is None:
            return jsonify({"outcome": "dropped"})
        return jsonify({
            "outcome": verdict.outcome.value,
            "alert": verdict.alerts,
            "dedup_key": list(verdict.dedup_key) if verdict.dedup_key else None,
        })

    @app.route("/api/v1/sessionize", methods=["POST"])
    def sessionize_cookie():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"error": "JSON object required"}), 400
        host = data.get("host", "")
        cookie = data.get("cookie", "")
        if not isinstance(host, str) or not isinstance(cookie, str):
            return jsonify({"error": "host and cookie must be strings"}), 400
        result = detector.canonicalize(host, cookie)
        if result is None:
            return jsonify({"error": "no_session_recognized"}), 404
        canonical, service = result
        return jsonify({"canonical_cookie": canonical, "service": service})

    # --- Alerts and stats ---

    @app.route("/api/v1/alerts", methods=["GET"])
    def alerts():
        n = request.args.get("n", 50, type=int)
        recent = getattr(detector.sink, "recent", None)
        return jsonify({"alerts": recent(n) if callable(recent) else []})

    @app.route("/api/v1/stats", methods=["GET"])
    def stats():
        return jsonify(detector.stats())

    @app.route("/api/v1/sessions/summary", methods=["GET"])
    def sessions_summary():
        return jsonify(detector.store.summary())

    # --- Catalog ---

    @app.route("/api/v1/signatures", methods=["GET"])
    def signatures():
        return jsonify({
            "signatures": [s.to_dict() for s in detector.config.signatures],
        })

    # --- Address bindings ---

    @app.route("/api/v1/bindings", methods=["POST"])
    def bindings():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return jsonify({"error": "JSON object required"}), 400
        address = data.get("address", "")
        hardware_id = data.get("hardware_id", "")
        learn = getattr(detector.resolver, "learn", None)
        if not callable(learn):
            return jsonify({"error": "resolver is read-only"}), 409
        valid = isinstance(address, str) and isinstance(hardware_id, str)
        if not valid or not address or not hardware_id:
            return jsonify({"error": "address and hardware_id required"}), 400
        learn(address, hardware_id)
        return jsonify({"status": "learned", "address": address, "hardware_id": hardware_id})

    return app
