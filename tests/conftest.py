"""Shared fixtures: a local Flask app standing in for the remote API."""

import os
import socket
import threading

import pytest
from flask import Flask, jsonify, request
from werkzeug.serving import make_server

# Never route test traffic to the loopback server through an env-configured proxy.
os.environ["NO_PROXY"] = os.environ["no_proxy"] = "127.0.0.1,localhost"

JSON = {"Content-Type": "application/json"}


def create_app() -> Flask:
    app = Flask(__name__)

    @app.route("/success")
    def success():
        return '{"message": "success"}\n', 200, JSON

    @app.route("/post", methods=["GET", "POST"])
    def post():
        if request.method != "POST":
            return "", 405
        if request.get_data(as_text=True) != '{"key": "value"}':
            return '{"message": "bad request body"}\n', 400, JSON
        return '{"message": "post success"}\n', 200, JSON

    @app.route("/headers")
    def headers():
        if request.headers.get("Authorization") != "Bearer token123":
            return "", 401
        return '{"message": "header success"}\n', 200, JSON

    @app.route("/badrequest")
    def badrequest():
        return '{"message": "bad request"}\n', 400, JSON

    @app.route("/notfound")
    def notfound():
        return '{"message": "not found"}\n', 404, JSON

    @app.route("/created", methods=["POST"])
    def created():
        return '{"id": 7}', 201, JSON

    @app.route("/nocontent", methods=["DELETE"])
    def nocontent():
        return "", 204

    @app.route("/teapot")
    def teapot():
        return "short and stout", 418

    @app.route("/list")
    def as_list():
        return "[1, 2, 3]", 200, JSON

    @app.route("/utf8-error")
    def utf8_error():
        return "café ☕".encode("utf-8"), 400, {"Content-Type": "text/plain"}

    @app.route("/latin1-error")
    def latin1_error():
        return "café".encode("latin-1"), 400, {"Content-Type": "text/plain; charset=ISO-8859-1"}

    @app.route("/text")
    def text():
        return "plain text", 200, {"Content-Type": "text/plain"}

    @app.route("/echo", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    def echo():
        auth = request.authorization
        return jsonify(
            method=request.method,
            raw_method=request.environ["REQUEST_METHOD"],
            body=request.get_data(as_text=True),
            content_type=request.headers.get("Content-Type"),
            authorization=request.headers.get("Authorization"),
            user_agent=request.headers.get("User-Agent"),
            basic_username=auth.username if auth is not None else None,
            basic_password=auth.password if auth is not None else None,
        )

    @app.route("/<path:anything>", methods=["GET", "POST"])
    def unknown(anything):
        return "", 500

    return app


@pytest.fixture(scope="session")
def server_url():
    server = make_server("127.0.0.1", 0, create_app(), threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}"
    server.shutdown()
    thread.join(timeout=5)


@pytest.fixture
def refused_url():
    """URL on a local port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/"
