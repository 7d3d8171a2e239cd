# app.py
import os
import pathlib

from flask import Flask, session, render_template, request, redirect, url_for
from flask_wtf import CSRFProtect

from countries import CountryStore, CountryDataError
from rules.challenge import generate_challenge, MAX_ATTEMPTS
from rules.game import RoundState, new_round, submit_guess


app = Flask(__name__)


# --- Security / config ---
app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-only-change-me")
app.config.update(
    SESSION_COOKIE_HTTPONLY=True,
    SESSION_COOKIE_SAMESITE="Lax",
    SESSION_COOKIE_SECURE=bool(
        os.environ.get("FLASK_HTTPS")
    ),  # set FLASK_HTTPS=1 behind HTTPS
)

csrf = CSRFProtect(app)


# --- Game config ---
COUNTRY_DATA_URL = os.environ.get("COUNTRY_DATA_URL") or None
COUNTRY_DATA_PATH = os.environ.get("COUNTRY_DATA_PATH")

# Begin/end letter matching; vowels are always matched lower-cased
LETTER_MATCH_CASE_SENSITIVE = os.environ.get("LETTER_MATCH_CASE_SENSITIVE") == "1"

# "0" stops the second secondary filter from repeating the first
ALLOW_REPEAT_FILTER = os.environ.get("ALLOW_REPEAT_FILTER", "1") != "0"

def int_setting(raw, default: int) -> int:
    """Positive int from an env value; anything else falls back to `default`."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


MAX_CHALLENGE_ATTEMPTS = int_setting(os.environ.get("MAX_CHALLENGE_ATTEMPTS"), MAX_ATTEMPTS)


# --- Data ---
country_store = CountryStore()


def load_country_data():
    """Single load at startup. Failure leaves the game unavailable (no retry)."""
    path = pathlib.Path(COUNTRY_DATA_PATH) if COUNTRY_DATA_PATH else None
    try:
        countries = country_store.load(path=path, url=COUNTRY_DATA_URL)
        app.logger.info(f"Loaded {len(countries)} countries")
    except CountryDataError as e:
        app.logger.warning(f"Country data load failed: {e}")


def get_round():
    return RoundState.from_dict(session.get("round"))


def save_round(state):
    session["round"] = state.to_dict() if state else None


# --- Routes ---

@app.route("/")
def index():
    state = get_round()
    return render_template(
        "index.html",
        data_ready=country_store.ready,
        game=state,
        no_challenge=session.pop("no_challenge", False),
    )


@app.route("/challenge", methods=["POST"])
def new_challenge():
    if not country_store.ready:
        session["no_challenge"] = True
        return redirect(url_for("index"))

    challenge = generate_challenge(
        country_store.countries,
        max_attempts=MAX_CHALLENGE_ATTEMPTS,
        case_sensitive=LETTER_MATCH_CASE_SENSITIVE,
        allow_repeat_filter=ALLOW_REPEAT_FILTER,
    )

    if challenge is None:
        app.logger.warning("Challenge generation exhausted its attempts")
        session["no_challenge"] = True
        save_round(None)
        return redirect(url_for("index"))

    app.logger.info(
        f"New challenge: {challenge.kind.value}={challenge.parameter!r} "
        f"filters={[f.value for f in challenge.filters]} "
        f"answers={len(challenge.answers)} attempts={challenge.attempts}"
    )
    save_round(new_round(challenge))
    return redirect(url_for("index"))


@app.route("/guess", methods=["POST"])
def guess():
    state = get_round()
    raw = (request.form.get("guess") or "").strip()

    submit_guess(state, raw)

    if state is not None:
        save_round(state)
    return redirect(url_for("index"))


@app.route("/reset")
def reset():
    session.clear()
    return redirect(url_for("index"))


@app.get("/health")
def health():
    return {"status": "ok", "data_ready": country_store.ready}, 200


# Load the dataset when the worker starts
load_country_data()


if __name__ == "__main__":

    app.run(debug=True)
