"""Flask application factory for the py-pager JSON API.

``POST /api/simulate`` accepts a JSON body with either a ``trace`` list
of page identifiers or ``"generate": true``, plus any configuration key
(``max_pages``, ``num_frames``, ``trace_length``, ``seed``, ``verbose``,
``fifo_mode``) and an optional ``policies`` list.  Invalid input is
answered with HTTP 400 and an ``error`` field.
"""

from __future__ import annotations

import random

from flask import Flask, Response, jsonify, request

from py_pager.config import SimulationConfig
from py_pager.errors import SimulationError
from py_pager.logging import Logger
from py_pager.memory.policies import Policy
from py_pager.simulator import run_all
from py_pager.trace import generate_trace, validate_trace

_HTTP_BAD_REQUEST = 400
_REQUEST_KEYS = frozenset({"trace", "generate", "policies"})


def _bad_request(message: str) -> tuple[Response, int]:
    return jsonify({"error": message}), _HTTP_BAD_REQUEST


def create_app() -> Flask:
    """Create and configure the Flask application.

    Returns:
        A configured Flask application ready to serve.

    """
    app = Flask(__name__)

    @app.route("/api/policies")
    def policies() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the policy names in run order."""
        return jsonify({"policies": [p.value for p in Policy.ordered()]})

    @app.route("/api/simulate", methods=["POST"])
    def simulate() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run every requested policy over one trace.

        Returns:
            JSON with ``trace_length``, ``results`` and, when verbose,
            a ``log`` of fault events and per-policy
            ``evictions`` as ``[step, page, evicted]`` triples.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _bad_request("Expected a JSON object")
        if "trace" not in data and not data.get("generate"):
            return _bad_request("Provide 'trace' or set 'generate' to true")

        options = {k: v for k, v in data.items() if k not in _REQUEST_KEYS}
        try:
            config = SimulationConfig.from_mapping(options)
            if "trace" in data:
                raw = data["trace"]
                if not isinstance(raw, list):
                    return _bad_request("'trace' must be a list of page numbers")
                trace = validate_trace(
                    raw, max_pages=config.max_pages, max_length=config.trace_length
                )
            else:
                trace = generate_trace(
                    length=config.trace_length,
                    max_pages=config.max_pages,
                    rng=random.Random(config.seed_for("trace")),  # noqa: S311
                )
            requested = data.get("policies") or list(Policy.ordered())
            if not isinstance(requested, list):
                return _bad_request("'policies' must be a list of policy names")
            selected = [Policy.parse(str(p)) for p in requested]
        except (SimulationError, ValueError) as exc:
            return _bad_request(str(exc))

        logger = Logger()
        results = run_all(trace, config, logger=logger, policies=selected)
        body: dict[str, object] = {
            "trace_length": len(trace),
            "results": [r.to_dict() for r in results],
        }
        if config.verbose:
            body["log"] = [str(e) for e in logger.entries]
            body["evictions"] = {
                r.policy.value: [list(ev) for ev in logger.evictions(source=r.policy.value)]
                for r in results
            }
        return jsonify(body)

    return app


def main() -> None:
    """Run the API development server.

    This is the ``py-pager-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
