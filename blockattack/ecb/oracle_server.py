#!/usr/bin/env python3
"""
ECB Oracle Server - serves an EncryptionOracle over HTTP

Every request is answered by the same oracle instance, so the hidden key,
mode, prefix and secret stay fixed for the life of the server.

Endpoints:
  POST /api/encrypt  {"data": "<base64>"}  ->  {"ciphertext": "<base64>"}
  GET  /status

Usage: python3 -m blockattack.ecb.oracle_server
"""

import base64
import binascii
import logging

from flask import Flask, jsonify, request

logger = logging.getLogger(__name__)


def create_app(oracle) -> Flask:
    app = Flask(__name__)

    @app.route("/api/encrypt", methods=["POST"])
    def encrypt():
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "data" not in data:
            return jsonify({"error": "Missing 'data' field"}), 400
        try:
            plaintext = base64.b64decode(data["data"], validate=True)
        except (binascii.Error, TypeError, ValueError):
            return jsonify({"error": "'data' must be base64"}), 400

        ciphertext = oracle.query(plaintext)
        logger.debug("encrypted %d bytes -> %d bytes", len(plaintext), len(ciphertext))
        return jsonify({"ciphertext": base64.b64encode(ciphertext).decode()})

    @app.route("/status", methods=["GET"])
    def status():
        return jsonify({
            "status": "running",
            "service": "ECB Oracle",
            "queries": getattr(oracle, "query_count", None),
        })

    return app


if __name__ == "__main__":
    from blockattack.config import HOST, PORT, configure_logging
    from blockattack.ecb.oracle_attack import SECRET
    from blockattack.oracle import EncryptionOracle, Mode

    configure_logging()
    app = create_app(EncryptionOracle(mode=Mode.ECB, suffix=SECRET))
    print("-" * 60)
    print(f"Starting ECB oracle on http://{HOST}:{PORT}")
    print("Endpoints: /api/encrypt, /status")
    app.run(host=HOST, port=PORT, debug=False, threaded=True)
