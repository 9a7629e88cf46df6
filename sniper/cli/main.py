import json
import os

import requests
import typer

from sniper.core.validation import parse_history_text, InvalidHistoryError

app = typer.Typer(help="Client for a running Sniper API")
BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN")


def _headers():
    h = {}
    if ADMIN_TOKEN:
        h["X-Admin-Token"] = ADMIN_TOKEN
    return h


def _history(text: str, oldest_first: bool) -> list[str]:
    try:
        hist = parse_history_text(text, order="oldest-first" if oldest_first else "newest-first")
    except InvalidHistoryError as e:
        raise typer.BadParameter(str(e))
    return [h.value for h in hist]


def _echo(r: requests.Response):
    try:
        typer.echo(json.dumps(r.json(), indent=2))
    except ValueError:
        typer.echo(r.text)
    if r.status_code >= 400:
        raise typer.Exit(code=1)


@app.command()
def predict(history: str = typer.Argument("", help="e.g. 'P,B,B,P' newest first"),
            key: str = typer.Option(..., "--key"),
            device: str = typer.Option(..., "--device"),
            oldest_first: bool = typer.Option(False, "--oldest-first")):
    payload = {"history": _history(history, oldest_first), "key": key, "deviceId": device}
    _echo(requests.post(f"{BASE}/api/predict", json=payload, timeout=10))


@app.command()
def verify(key: str = typer.Option(..., "--key"), device: str = typer.Option(..., "--device")):
    _echo(requests.post(f"{BASE}/api/verify", json={"key": key, "deviceId": device}, timeout=10))


@app.command()
def reset(key: str):
    _echo(requests.post(f"{BASE}/api/reset", json={"key": key}, headers=_headers(), timeout=10))


@app.command()
def patterns(history: str, min_run: int = 3, oldest_first: bool = typer.Option(False, "--oldest-first")):
    payload = {"history": _history(history, oldest_first), "min_run": min_run}
    _echo(requests.post(f"{BASE}/api/patterns", json=payload, timeout=10))


if __name__ == "__main__":
    app()
